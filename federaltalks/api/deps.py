"""
API Dependencies

Common dependencies for database sessions, the table store, and the
signed-in AuthSession.
"""

from typing import Optional
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from federaltalks.database import get_db
from federaltalks.services.auth import AuthSession, session_from_token
from federaltalks.services.errors import AuthenticationError
from federaltalks.services.store import TableStore

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)

_ACCOUNT_TABLES = {
    "user": "users",
    "internal": "internal_users",
}


def get_store(db: Session = Depends(get_db)) -> TableStore:
    """Table store bound to the request's database session."""
    return TableStore(db)


async def get_auth_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    store: TableStore = Depends(get_store),
) -> AuthSession:
    """
    Resolve the bearer token into an AuthSession.

    Store-backed accounts are re-checked on every request so that a
    deactivated or deleted account loses access before its token expires.

    Raises:
        HTTPException: 401 if the token is missing, invalid, or its account is gone
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        session = session_from_token(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    table = _ACCOUNT_TABLES.get(session.account_type)
    if table:
        account = store.select_one(table, {"id": session.user_id})
        if not account or not account["is_active"]:
            logger.warning(f"Rejected token for inactive or missing account {session.email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Account not found or inactive",
                headers={"WWW-Authenticate": "Bearer"},
            )

    return session


async def require_admin(session: AuthSession = Depends(get_auth_session)) -> AuthSession:
    """Admin (or super admin) accounts only."""
    if not session.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return session


class PermissionRequirement:
    """
    Dependency to check an internal-user permission.

    Admins pass every check.
    """

    def __init__(self, permission: str):
        self.permission = permission

    async def __call__(self, session: AuthSession = Depends(get_auth_session)) -> AuthSession:
        if not session.has_permission(self.permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing permission: {self.permission}",
            )
        return session


def require_permission(permission: str) -> PermissionRequirement:
    return PermissionRequirement(permission)
