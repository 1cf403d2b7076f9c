"""
Pipeline Models

Per-user sales pipelines: ordered stages holding tracked contracts,
plus the simpler favorites list.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer, Text, Float, UniqueConstraint

from federaltalks.database import Base
from federaltalks.utils.column_types import GUID


class Pipeline(Base):
    """A named board owned by one user."""

    __tablename__ = "pipelines"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID(), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    is_default = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Pipeline {self.name}>"


class PipelineStage(Base):
    """A column on a pipeline board."""

    __tablename__ = "pipeline_stages"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    pipeline_id = Column(GUID(), ForeignKey("pipelines.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    order_index = Column(Integer, nullable=False, default=0)
    color = Column(String(20), nullable=False, default="#6B7280")

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<PipelineStage {self.order_index}: {self.name}>"


class PipelineEntry(Base):
    """A contract placed on a pipeline stage."""

    __tablename__ = "pipeline_entries"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    pipeline_id = Column(GUID(), ForeignKey("pipelines.id", ondelete="CASCADE"), nullable=False, index=True)
    contract_id = Column(GUID(), ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False, index=True)
    stage_id = Column(GUID(), ForeignKey("pipeline_stages.id", ondelete="CASCADE"), nullable=False, index=True)

    assigned_to = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    probability = Column(Integer, nullable=False, default=25)  # 0-100
    estimated_value = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<PipelineEntry {self.contract_id} @ {self.stage_id}>"


class UserFavorite(Base):
    """A contract bookmarked by a user."""

    __tablename__ = "user_favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "contract_id", name="uq_user_favorites_user_contract"),
    )

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID(), nullable=False, index=True)
    contract_id = Column(GUID(), ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
