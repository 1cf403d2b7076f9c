"""
Security utilities for authentication and authorization.

Password hashes are bcrypt (passlib). Sessions are stateless HS256 JWTs
whose claims describe the signed-in account; the API re-checks the
account row on every request, so a token never outlives a deactivation.
"""

from datetime import datetime, timedelta
from typing import Optional, Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from federaltalks.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

SESSION_TOKEN_TYPE = "session"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its hash. Unset or unreadable hashes never match."""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Not a hash passlib recognises (e.g. a row seeded by hand)
        return False


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_session_token(
    subject: str,
    claims: dict,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Sign a session token for one account.

    Args:
        subject: Account id, stored as ``sub``
        claims: Account attributes (email, role, permissions, account_type)
        expires_delta: Override for ``settings.access_token_expire_minutes``
    """
    issued_at = datetime.utcnow()
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)

    payload = dict(claims)
    payload.update({
        "sub": subject,
        "type": SESSION_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    })

    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_session_token(token: str) -> Optional[dict[str, Any]]:
    """
    Decode a session token.

    Returns:
        The claims, or None if the token is malformed, expired, signed
        with another key, or is not a session token
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    if payload.get("type") != SESSION_TOKEN_TYPE or not payload.get("sub"):
        return None
    return payload
