"""Sales pipeline and favorites Pydantic schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from federaltalks.schemas.contract import ContractResponse


class PipelineCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    is_default: bool = False


class PipelineStageResponse(BaseModel):
    id: UUID
    pipeline_id: UUID
    name: str
    order_index: int
    color: str

    class Config:
        from_attributes = True


class PipelineResponse(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    description: Optional[str] = None
    is_default: bool
    created_at: Optional[datetime] = None
    stages: List[PipelineStageResponse] = []

    class Config:
        from_attributes = True


class PipelineEntryCreate(BaseModel):
    """Track a contract. Without ``stage_id`` it lands in the first stage."""

    contract_id: UUID
    stage_id: Optional[UUID] = None
    assigned_to: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    probability: int = Field(25, ge=0, le=100)
    estimated_value: Optional[float] = None


class PipelineEntryMove(BaseModel):
    stage_id: UUID


class PipelineEntryUpdate(BaseModel):
    assigned_to: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    probability: Optional[int] = Field(None, ge=0, le=100)
    estimated_value: Optional[float] = None


class PipelineEntryResponse(BaseModel):
    id: UUID
    pipeline_id: UUID
    contract_id: UUID
    stage_id: UUID
    assigned_to: Optional[str] = None
    notes: Optional[str] = None
    probability: int
    estimated_value: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    contract: Optional[ContractResponse] = None

    class Config:
        from_attributes = True


class BoardColumn(BaseModel):
    stage: PipelineStageResponse
    entries: List[PipelineEntryResponse]
    total_value: float


class PipelineBoardResponse(BaseModel):
    pipeline: PipelineResponse
    columns: List[BoardColumn]


class FavoriteToggleResponse(BaseModel):
    contract_id: UUID
    favorited: bool
