"""
Admin API endpoints.

Customer account approval, internal staff accounts, and dashboard counts.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status

from federaltalks.api.deps import get_store, require_permission
from federaltalks.config import CONTRACT_STATUSES, PERMISSIONS, ROLE_PERMISSIONS, UPLOAD_KINDS
from federaltalks.schemas.user import (
    AdminUserUpdate,
    InternalUserCreate,
    InternalUserResponse,
    InternalUserUpdate,
    UserResponse,
)
from federaltalks.services.auth import AuthSession, permissions_for_role
from federaltalks.services.store import TableStore
from federaltalks.utils.security import get_password_hash

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_or_404(store: TableStore, table: str, row_id: UUID, label: str) -> dict:
    row = store.select_one(table, {"id": row_id})
    if not row:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{label} not found",
        )
    return row


# =============================================================================
# Customer Accounts
# =============================================================================

@router.get("/users", response_model=List[UserResponse])
async def list_users(
    is_active: Optional[bool] = None,
    session: AuthSession = Depends(require_permission("view_users")),
    store: TableStore = Depends(get_store),
):
    """List customer accounts, newest first. Filter is_active=false for pending approvals."""
    filters = {} if is_active is None else {"is_active": is_active}
    return store.select("users", filters=filters, order=["-created_at"])


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: AdminUserUpdate,
    session: AuthSession = Depends(require_permission("manage_users")),
    store: TableStore = Depends(get_store),
):
    """Approve / deactivate an account, change its role or trial days."""
    _get_or_404(store, "users", user_id, "User")

    patch = data.model_dump(exclude_unset=True)
    if patch:
        store.update("users", patch, {"id": user_id})
        logger.info(f"User {user_id} updated by {session.email}: {sorted(patch)}")

    return _get_or_404(store, "users", user_id, "User")


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    session: AuthSession = Depends(require_permission("manage_users")),
    store: TableStore = Depends(get_store),
):
    """Delete a customer account with its favorites and pipelines."""
    user = _get_or_404(store, "users", user_id, "User")
    if user_id == session.user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account",
        )

    pipeline_ids = [p["id"] for p in store.select("pipelines", columns=["id"], filters={"user_id": user_id})]
    if pipeline_ids:
        store.delete("pipeline_entries", {"pipeline_id": pipeline_ids})
        store.delete("pipeline_stages", {"pipeline_id": pipeline_ids})
        store.delete("pipelines", {"id": pipeline_ids})
    store.delete("user_favorites", {"user_id": user_id})
    store.delete("users", {"id": user_id})

    logger.info(f"User {user['email']} deleted by {session.email}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Internal Users
# =============================================================================

@router.get("/permissions")
async def list_permissions(
    session: AuthSession = Depends(require_permission("manage_internal_users")),
):
    """Permission catalog and role presets."""
    return {
        "permissions": [
            {"name": name, "category": category, "description": description}
            for name, (category, description) in PERMISSIONS.items()
        ],
        "roles": {role: permissions_for_role(role) for role in ROLE_PERMISSIONS},
    }


@router.get("/internal-users", response_model=List[InternalUserResponse])
async def list_internal_users(
    session: AuthSession = Depends(require_permission("manage_internal_users")),
    store: TableStore = Depends(get_store),
):
    return store.select("internal_users", order=["-created_at"])


@router.post("/internal-users", response_model=InternalUserResponse, status_code=status.HTTP_201_CREATED)
async def create_internal_user(
    data: InternalUserCreate,
    session: AuthSession = Depends(require_permission("manage_internal_users")),
    store: TableStore = Depends(get_store),
):
    """Create a staff account. Omitted permissions default to the role preset."""
    email = data.email.lower()
    if store.select_one("internal_users", {"email": email}) or store.select_one("users", {"email": email}):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already exists",
        )

    [staff] = store.insert(
        "internal_users",
        [{
            "email": email,
            "password_hash": get_password_hash(data.password),
            "full_name": data.full_name,
            "role": data.role,
            "permissions": data.permissions if data.permissions is not None else permissions_for_role(data.role),
            "is_active": True,
            "created_by": session.user_id,
        }],
    )

    logger.info(f"Internal user {email} ({data.role}) created by {session.email}")
    return staff


@router.patch("/internal-users/{internal_user_id}", response_model=InternalUserResponse)
async def update_internal_user(
    internal_user_id: UUID,
    data: InternalUserUpdate,
    session: AuthSession = Depends(require_permission("manage_internal_users")),
    store: TableStore = Depends(get_store),
):
    """A role change without explicit permissions resets them to the new role's preset."""
    _get_or_404(store, "internal_users", internal_user_id, "Internal user")

    patch = data.model_dump(exclude_unset=True)
    if "role" in patch and "permissions" not in patch:
        patch["permissions"] = permissions_for_role(patch["role"])
    if patch:
        store.update("internal_users", patch, {"id": internal_user_id})

    return _get_or_404(store, "internal_users", internal_user_id, "Internal user")


@router.delete("/internal-users/{internal_user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_internal_user(
    internal_user_id: UUID,
    session: AuthSession = Depends(require_permission("manage_internal_users")),
    store: TableStore = Depends(get_store),
):
    if internal_user_id == session.user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account",
        )
    _get_or_404(store, "internal_users", internal_user_id, "Internal user")
    store.delete("internal_users", {"id": internal_user_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Dashboard
# =============================================================================

@router.get("/stats")
async def get_stats(
    session: AuthSession = Depends(require_permission("view_dashboard")),
    store: TableStore = Depends(get_store),
):
    """Record counts for the admin dashboard."""
    return {
        "contracts": {
            "total": store.count("contracts"),
            "by_status": {s: store.count("contracts", {"status": s}) for s in CONTRACT_STATUSES},
        },
        "contacts": store.count("contacts"),
        "users": {
            "total": store.count("users"),
            "pending_approval": store.count("users", {"is_active": False}),
        },
        "internal_users": store.count("internal_users"),
        "uploads": {
            "total": store.count("upload_logs"),
            "by_kind": {k: store.count("upload_logs", {"upload_type": k}) for k in UPLOAD_KINDS},
        },
    }
