"""Bulk upload Pydantic schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel


class UploadResult(BaseModel):
    """Outcome of one bulk upload. ``total`` counts parsed rows."""

    success_count: int
    total: int
    errors: List[str]


class UploadLogResponse(BaseModel):
    id: UUID
    uploaded_by: Optional[UUID] = None
    file_name: str
    file_type: Optional[str] = None
    upload_type: str
    records_processed: int
    records_successful: int
    records_failed: int
    error_details: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
