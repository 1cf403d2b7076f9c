"""Contract Pydantic schemas."""

from datetime import date, datetime
from typing import List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from federaltalks.config import CONTRACT_STATUSES, CONTRACT_TYPES, DEADLINE_BUCKETS, PROCUREMENT_STATUSES
from federaltalks.services.field_mapping import parse_keywords


def _one_of(value: Optional[str], allowed, label: str) -> Optional[str]:
    if value is not None and value not in allowed:
        raise ValueError(f"{label} must be one of: {', '.join(allowed)}")
    return value


class ContractFields(BaseModel):
    """Editable contract columns, all optional."""

    contract_number: Optional[str] = Field(None, max_length=100)
    solicitation_number: Optional[str] = Field(None, max_length=100)

    contract_type: Optional[str] = None
    status: Optional[str] = None
    contract_status: Optional[str] = None

    title: Optional[str] = Field(None, min_length=1)
    contract_name: Optional[str] = None
    description: Optional[str] = None
    products_services: Optional[str] = None
    primary_requirement: Optional[str] = None
    keywords: Optional[Union[List[str], str]] = None
    contractors: Optional[str] = None

    agency: Optional[str] = Field(None, min_length=1)
    buying_organization: Optional[str] = None
    department: Optional[str] = None
    buying_org_level_1: Optional[str] = None
    buying_org_level_2: Optional[str] = None
    buying_org_level_3: Optional[str] = None

    state: Optional[str] = None
    place_of_performance_location: Optional[str] = None

    contact_first_name: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None

    budget_min: Optional[float] = None
    budget_max: Optional[float] = None
    award_value: Optional[float] = None
    naics_code: Optional[str] = Field(None, max_length=10)
    set_aside_code: Optional[str] = None

    award_date: Optional[date] = None
    start_date: Optional[date] = None
    current_expiration_date: Optional[date] = None
    ultimate_expiration_date: Optional[date] = None
    response_deadline: Optional[datetime] = None

    source_url: Optional[str] = None
    ai_analysis_summary: Optional[str] = None

    @field_validator("keywords")
    @classmethod
    def split_keywords(cls, v):
        """Accept a list or a comma-separated string."""
        return None if v is None else parse_keywords(v)

    @field_validator("contract_type")
    @classmethod
    def valid_contract_type(cls, v):
        return _one_of(v, CONTRACT_TYPES, "contract_type")

    @field_validator("status")
    @classmethod
    def valid_status(cls, v):
        return _one_of(v, CONTRACT_STATUSES, "status")

    @field_validator("contract_status")
    @classmethod
    def valid_contract_status(cls, v):
        return _one_of(v, PROCUREMENT_STATUSES, "contract_status")


class ContractCreate(ContractFields):
    """Manual contract entry. Title and agency are required."""

    title: str = Field(..., min_length=1)
    agency: str = Field(..., min_length=1)


class ContractUpdate(ContractFields):
    """Partial update; federal_id is never editable."""


class ContractStatusUpdate(BaseModel):
    status: Optional[str] = None
    contract_status: Optional[str] = None

    @field_validator("status")
    @classmethod
    def valid_status(cls, v):
        return _one_of(v, CONTRACT_STATUSES, "status")

    @field_validator("contract_status")
    @classmethod
    def valid_contract_status(cls, v):
        return _one_of(v, PROCUREMENT_STATUSES, "contract_status")


class ContractResponse(ContractFields):
    """Full contract record."""

    id: UUID
    federal_id: str
    title: str
    agency: str
    keywords: Optional[List[str]] = None
    data_source: Optional[str] = None
    updated_by: Optional[UUID] = None
    posted_date: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ContractListResponse(BaseModel):
    items: List[ContractResponse]
    total: int


# =============================================================================
# Search
# =============================================================================

class ContractSearchRequest(BaseModel):
    """Free-text query plus optional facets. "all" disables a facet."""

    query: str = ""
    contract_type: Optional[str] = None
    state: Optional[str] = None
    naics_code: Optional[str] = None
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None
    set_aside: Optional[str] = None
    deadline: str = "all"

    @field_validator("deadline")
    @classmethod
    def valid_deadline(cls, v: str) -> str:
        return _one_of(v, tuple(DEADLINE_BUCKETS), "deadline")


class ContractSearchHit(BaseModel):
    score: int
    contract: ContractResponse


class ContractSearchResponse(BaseModel):
    query: str
    mode: str  # "browse" or "search"
    total: int
    results: List[ContractSearchHit]
