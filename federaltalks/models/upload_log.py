"""
Upload Log Model

Append-only audit trail, one row per bulk upload operation.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer

from federaltalks.database import Base
from federaltalks.utils.column_types import GUID, JSONDict


class UploadLog(Base):
    """Summary of a single bulk upload."""

    __tablename__ = "upload_logs"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)

    uploaded_by = Column(GUID(), nullable=True, index=True)
    file_name = Column(String(255), nullable=False)
    file_type = Column(String(255), nullable=True)
    upload_type = Column(String(20), nullable=False)  # contracts, contacts

    records_processed = Column(Integer, nullable=False, default=0)
    records_successful = Column(Integer, nullable=False, default=0)
    records_failed = Column(Integer, nullable=False, default=0)

    # {"errors": [...]} when anything failed
    error_details = Column(JSONDict(), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<UploadLog {self.file_name}: {self.records_successful}/{self.records_processed}>"
