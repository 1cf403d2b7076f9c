"""Contact Pydantic schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from federaltalks.config import CONTACT_TYPES


class ContactFields(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    agency: Optional[str] = Field(None, min_length=1, max_length=255)
    department: Optional[str] = None
    state: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    contact_type: Optional[str] = None
    is_federal: Optional[bool] = None

    @field_validator("contact_type")
    @classmethod
    def valid_contact_type(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in CONTACT_TYPES:
            raise ValueError(f"contact_type must be one of: {', '.join(CONTACT_TYPES)}")
        return v


class ContactCreate(ContactFields):
    """Manual contact entry."""

    full_name: str = Field(..., min_length=1, max_length=255)
    title: str = Field(..., min_length=1, max_length=255)
    agency: str = Field(..., min_length=1, max_length=255)
    contact_type: str = "procurement"
    is_federal: bool = False


class ContactUpdate(ContactFields):
    pass


class ContactResponse(ContactFields):
    id: UUID
    full_name: str
    title: str
    agency: str
    data_source: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ContactListResponse(BaseModel):
    items: List[ContactResponse]
    total: int
