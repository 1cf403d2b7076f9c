"""User and authentication Pydantic schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from federaltalks.config import PERMISSIONS, ROLE_PERMISSIONS


def _password_strength(v: str) -> str:
    if not any(c.isupper() for c in v):
        raise ValueError("Password must contain at least one uppercase letter")
    if not any(c.islower() for c in v):
        raise ValueError("Password must contain at least one lowercase letter")
    if not any(c.isdigit() for c in v):
        raise ValueError("Password must contain at least one digit")
    return v


class UserCreate(BaseModel):
    """Schema for self-service registration."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str = Field(..., min_length=1, max_length=255)
    company_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        """Validate password has minimum complexity."""
        return _password_strength(v)


class UserLogin(BaseModel):
    """Schema for user login."""

    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Customer account as shown to admins and to the user."""

    id: UUID
    email: str
    full_name: str
    company_name: Optional[str] = None
    phone: Optional[str] = None
    role: str
    is_active: bool
    trial_days_remaining: Optional[int] = 0
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminUserUpdate(BaseModel):
    """Fields an admin may change on a customer account."""

    is_active: Optional[bool] = None
    role: Optional[str] = None
    trial_days_remaining: Optional[int] = Field(None, ge=0)
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    company_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator("role")
    @classmethod
    def valid_role(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in ("admin", "user"):
            raise ValueError("Role must be 'admin' or 'user'")
        return v


class SessionResponse(BaseModel):
    """The signed-in principal."""

    user_id: UUID
    email: str
    full_name: str
    role: str
    permissions: List[str]
    is_admin: bool
    account_type: str


class Token(BaseModel):
    """Schema for authentication tokens."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    session: SessionResponse


# =============================================================================
# Internal Users
# =============================================================================

def _check_permissions(v: Optional[List[str]]) -> Optional[List[str]]:
    if v is None:
        return v
    unknown = [name for name in v if name not in PERMISSIONS]
    if unknown:
        raise ValueError(f"Unknown permissions: {', '.join(unknown)}")
    return list(dict.fromkeys(v))


def _check_internal_role(v: Optional[str]) -> Optional[str]:
    if v is not None and v not in ROLE_PERMISSIONS:
        raise ValueError(f"Role must be one of: {', '.join(ROLE_PERMISSIONS)}")
    return v


class InternalUserCreate(BaseModel):
    """
    Staff account creation.

    When ``permissions`` is omitted the role preset is used.
    """

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str = Field(..., min_length=1, max_length=255)
    role: str = "assistance"
    permissions: Optional[List[str]] = None

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _password_strength(v)

    @field_validator("role")
    @classmethod
    def valid_role(cls, v: str) -> str:
        return _check_internal_role(v)

    @field_validator("permissions")
    @classmethod
    def known_permissions(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _check_permissions(v)


class InternalUserUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Optional[str] = None
    permissions: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator("role")
    @classmethod
    def valid_role(cls, v: Optional[str]) -> Optional[str]:
        return _check_internal_role(v)

    @field_validator("permissions")
    @classmethod
    def known_permissions(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _check_permissions(v)


class InternalUserResponse(BaseModel):
    id: UUID
    email: str
    full_name: str
    role: str
    permissions: Optional[List[str]] = None
    is_active: bool
    created_by: Optional[UUID] = None
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
