"""
Authentication API endpoints.

Handles registration, login, and the current session.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from federaltalks.api.deps import get_auth_session, get_store
from federaltalks.config import settings
from federaltalks.schemas.user import SessionResponse, Token, UserCreate, UserLogin, UserResponse
from federaltalks.services.auth import AuthSession, get_authenticator, issue_token
from federaltalks.services.errors import AuthenticationError
from federaltalks.services.store import TableStore
from federaltalks.utils.security import get_password_hash

logger = logging.getLogger(__name__)

router = APIRouter()


def _session_response(session: AuthSession) -> SessionResponse:
    return SessionResponse(
        user_id=session.user_id,
        email=session.email,
        full_name=session.full_name,
        role=session.role,
        permissions=sorted(session.permissions),
        is_admin=session.is_admin,
        account_type=session.account_type,
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    store: TableStore = Depends(get_store),
):
    """
    Register a new user.

    The account starts inactive and cannot sign in until an admin
    approves it.
    """
    email = user_data.email.lower()

    # Check if email already exists
    if store.select_one("users", {"email": email}) or store.select_one("internal_users", {"email": email}):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already exists",
        )

    [user] = store.insert(
        "users",
        [{
            "email": email,
            "password_hash": get_password_hash(user_data.password),
            "full_name": user_data.full_name,
            "company_name": user_data.company_name,
            "phone": user_data.phone,
            "role": "user",
            "is_active": False,
        }],
    )

    logger.info(f"Registered user {email}, pending approval")
    return user


@router.post("/login", response_model=Token)
async def login(
    credentials: UserLogin,
    store: TableStore = Depends(get_store),
):
    """Authenticate and return a bearer token carrying the session."""
    authenticator = get_authenticator(settings, store)

    try:
        session = authenticator.authenticate(credentials.email, credentials.password)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Token(
        access_token=issue_token(session),
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60,
        session=_session_response(session),
    )


@router.get("/me", response_model=SessionResponse)
async def me(session: AuthSession = Depends(get_auth_session)):
    """Get the signed-in session."""
    return _session_response(session)
