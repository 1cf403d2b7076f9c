"""Pydantic schemas for API request/response validation."""

from federaltalks.schemas.user import (
    UserCreate,
    UserLogin,
    UserResponse,
    AdminUserUpdate,
    SessionResponse,
    Token,
    InternalUserCreate,
    InternalUserUpdate,
    InternalUserResponse,
)
from federaltalks.schemas.contract import (
    ContractCreate,
    ContractUpdate,
    ContractStatusUpdate,
    ContractResponse,
    ContractListResponse,
    ContractSearchRequest,
    ContractSearchHit,
    ContractSearchResponse,
)
from federaltalks.schemas.contact import (
    ContactCreate,
    ContactUpdate,
    ContactResponse,
    ContactListResponse,
)
from federaltalks.schemas.upload import UploadResult, UploadLogResponse
from federaltalks.schemas.pipeline import (
    PipelineCreate,
    PipelineResponse,
    PipelineStageResponse,
    PipelineEntryCreate,
    PipelineEntryMove,
    PipelineEntryUpdate,
    PipelineEntryResponse,
    BoardColumn,
    PipelineBoardResponse,
    FavoriteToggleResponse,
)

__all__ = [
    # User
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "AdminUserUpdate",
    "SessionResponse",
    "Token",
    "InternalUserCreate",
    "InternalUserUpdate",
    "InternalUserResponse",
    # Contract
    "ContractCreate",
    "ContractUpdate",
    "ContractStatusUpdate",
    "ContractResponse",
    "ContractListResponse",
    "ContractSearchRequest",
    "ContractSearchHit",
    "ContractSearchResponse",
    # Contact
    "ContactCreate",
    "ContactUpdate",
    "ContactResponse",
    "ContactListResponse",
    # Upload
    "UploadResult",
    "UploadLogResponse",
    # Pipeline
    "PipelineCreate",
    "PipelineResponse",
    "PipelineStageResponse",
    "PipelineEntryCreate",
    "PipelineEntryMove",
    "PipelineEntryUpdate",
    "PipelineEntryResponse",
    "BoardColumn",
    "PipelineBoardResponse",
    "FavoriteToggleResponse",
]
