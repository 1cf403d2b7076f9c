"""
Contacts API endpoints.

Directory of procurement decision-makers.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from federaltalks.api.deps import get_auth_session, get_store, require_permission
from federaltalks.schemas.contact import ContactCreate, ContactListResponse, ContactResponse, ContactUpdate
from federaltalks.services.auth import AuthSession
from federaltalks.services.errors import StoreError
from federaltalks.services.store import TableStore

logger = logging.getLogger(__name__)

router = APIRouter()

SEARCHABLE_FIELDS = ("full_name", "title", "agency", "department", "email")


def get_contact_or_404(store: TableStore, contact_id: UUID) -> dict:
    contact = store.select_one("contacts", {"id": contact_id})
    if not contact:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contact not found",
        )
    return contact


@router.get("", response_model=ContactListResponse)
async def list_contacts(
    contact_type: Optional[str] = None,
    state: Optional[str] = None,
    is_federal: Optional[bool] = None,
    q: Optional[str] = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    """List contacts alphabetically."""
    filters = {}
    if contact_type:
        filters["contact_type"] = contact_type
    if state:
        filters["state"] = state
    if is_federal is not None:
        filters["is_federal"] = is_federal

    rows = store.select("contacts", filters=filters, order=["full_name"])

    if q:
        needle = q.lower()
        rows = [
            row for row in rows
            if any(needle in (row.get(name) or "").lower() for name in SEARCHABLE_FIELDS)
        ]

    return ContactListResponse(items=rows[offset:offset + limit], total=len(rows))


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
async def create_contact(
    contact_data: ContactCreate,
    session: AuthSession = Depends(require_permission("add_contacts")),
    store: TableStore = Depends(get_store),
):
    """Create a contact by manual entry."""
    row = contact_data.model_dump()
    row["data_source"] = "manual"

    try:
        [contact] = store.insert("contacts", [row])
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Error creating contact: {e}",
        )

    logger.info(f"Contact {contact['full_name']} created by {session.email}")
    return contact


@router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact(
    contact_id: UUID,
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    return get_contact_or_404(store, contact_id)


@router.patch("/{contact_id}", response_model=ContactResponse)
async def update_contact(
    contact_id: UUID,
    contact_data: ContactUpdate,
    session: AuthSession = Depends(require_permission("edit_contacts")),
    store: TableStore = Depends(get_store),
):
    get_contact_or_404(store, contact_id)

    patch = contact_data.model_dump(exclude_unset=True)
    try:
        store.update("contacts", patch, {"id": contact_id})
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Error updating contact: {e}",
        )

    return get_contact_or_404(store, contact_id)


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(
    contact_id: UUID,
    session: AuthSession = Depends(require_permission("delete_contacts")),
    store: TableStore = Depends(get_store),
):
    contact = get_contact_or_404(store, contact_id)
    store.delete("contacts", {"id": contact_id})

    logger.info(f"Contact {contact['full_name']} deleted by {session.email}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
