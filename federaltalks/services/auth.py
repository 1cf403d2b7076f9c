"""
Authentication Service

Authenticators turn credentials into an AuthSession; the session travels
to route handlers as a dependency and inside the bearer token between
requests. Nothing about the signed-in user is held in module state.
"""

import hmac
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, List, Optional, Tuple

from federaltalks.config import PERMISSIONS, ROLE_PERMISSIONS, Settings
from federaltalks.services.errors import AuthenticationError
from federaltalks.services.store import TableStore
from federaltalks.utils.security import create_session_token, decode_session_token, verify_password

logger = logging.getLogger(__name__)

ADMIN_ROLES = ("admin", "super_admin")
INACTIVE_MESSAGE = "Account is inactive. Please contact support or wait for admin approval."
INVALID_CREDENTIALS = "Invalid email or password"

_DEMO_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "federaltalks-iq/demo-accounts")


@dataclass(frozen=True)
class AuthSession:
    """The signed-in principal for one request."""

    user_id: uuid.UUID
    email: str
    full_name: str
    role: str
    permissions: FrozenSet[str] = field(default_factory=frozenset)
    account_type: str = "user"  # user, internal, demo

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    def has_permission(self, name: str) -> bool:
        return self.is_admin or name in self.permissions


def permissions_for_role(role: str) -> List[str]:
    """Permission preset for an internal role; admins get the full catalog."""
    if role in ADMIN_ROLES:
        return list(PERMISSIONS)
    return list(ROLE_PERMISSIONS.get(role, []))


# =============================================================================
# Authenticators
# =============================================================================

class Authenticator:
    """Checks credentials. Raises AuthenticationError on rejection."""

    def authenticate(self, email: str, password: str) -> AuthSession:
        raise NotImplementedError


class DemoAuthenticator(Authenticator):
    """
    Fixed demo accounts configured through settings.

    An account whose email or password is unset is disabled, so a default
    deployment accepts no demo logins at all.
    """

    def __init__(self, settings: Settings):
        self.accounts: List[Tuple[str, str, str, str]] = []
        candidates = (
            (settings.demo_admin_email, settings.demo_admin_password, "admin", "Administrator"),
            (settings.demo_user_email, settings.demo_user_password, "user", "Demo User"),
        )
        for email, password, role, name in candidates:
            if email and password:
                self.accounts.append((email.strip().lower(), password, role, name))

    def authenticate(self, email: str, password: str) -> AuthSession:
        email = (email or "").strip().lower()
        for account_email, account_password, role, name in self.accounts:
            if email == account_email and hmac.compare_digest(password.encode(), account_password.encode()):
                return AuthSession(
                    user_id=uuid.uuid5(_DEMO_NAMESPACE, account_email),
                    email=account_email,
                    full_name=name,
                    role=role,
                    permissions=frozenset(PERMISSIONS) if role == "admin" else frozenset(),
                    account_type="demo",
                )
        raise AuthenticationError(INVALID_CREDENTIALS)


class StoreAuthenticator(Authenticator):
    """Customer accounts first, then internal staff accounts."""

    def __init__(self, store: TableStore):
        self.store = store

    def authenticate(self, email: str, password: str) -> AuthSession:
        email = (email or "").strip().lower()

        user = self.store.select_one("users", {"email": email})
        if user and verify_password(password, user["password_hash"]):
            if not user["is_active"]:
                raise AuthenticationError(INACTIVE_MESSAGE)
            self.store.update("users", {"last_login_at": datetime.utcnow()}, {"id": user["id"]})
            logger.info(f"User login: {email}")
            return AuthSession(
                user_id=user["id"],
                email=user["email"],
                full_name=user["full_name"],
                role=user["role"],
                permissions=frozenset(PERMISSIONS) if user["role"] in ADMIN_ROLES else frozenset(),
                account_type="user",
            )

        staff = self.store.select_one("internal_users", {"email": email})
        if staff and verify_password(password, staff["password_hash"]):
            if not staff["is_active"]:
                raise AuthenticationError(INACTIVE_MESSAGE)
            self.store.update("internal_users", {"last_login_at": datetime.utcnow()}, {"id": staff["id"]})
            logger.info(f"Internal user login: {email} ({staff['role']})")
            permissions = staff["permissions"] or permissions_for_role(staff["role"])
            return AuthSession(
                user_id=staff["id"],
                email=staff["email"],
                full_name=staff["full_name"],
                role=staff["role"],
                permissions=frozenset(permissions),
                account_type="internal",
            )

        logger.warning(f"Failed login attempt for {email}")
        raise AuthenticationError(INVALID_CREDENTIALS)


def get_authenticator(settings: Settings, store: TableStore) -> Authenticator:
    if settings.auth_backend == "demo":
        return DemoAuthenticator(settings)
    return StoreAuthenticator(store)


# =============================================================================
# Session Tokens
# =============================================================================

def issue_token(session: AuthSession) -> str:
    return create_session_token(
        str(session.user_id),
        {
            "email": session.email,
            "name": session.full_name,
            "role": session.role,
            "permissions": sorted(session.permissions),
            "account_type": session.account_type,
        },
    )


def session_from_token(token: str) -> AuthSession:
    """Rebuild the AuthSession carried by a bearer token."""
    payload = decode_session_token(token)
    if not payload:
        raise AuthenticationError("Invalid or expired token")

    try:
        user_id = uuid.UUID(payload["sub"])
    except ValueError:
        raise AuthenticationError("Invalid or expired token") from None

    return AuthSession(
        user_id=user_id,
        email=payload.get("email", ""),
        full_name=payload.get("name", ""),
        role=payload.get("role", "user"),
        permissions=frozenset(payload.get("permissions") or []),
        account_type=payload.get("account_type", "user"),
    )
