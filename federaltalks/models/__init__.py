"""
FederalTalks IQ Database Models

All SQLAlchemy models are imported here for easy access.
"""

from federaltalks.models.user import User, InternalUser
from federaltalks.models.contract import Contract, generate_federal_id
from federaltalks.models.contact import Contact
from federaltalks.models.upload_log import UploadLog
from federaltalks.models.pipeline import Pipeline, PipelineStage, PipelineEntry, UserFavorite

__all__ = [
    "User",
    "InternalUser",
    "Contract",
    "generate_federal_id",
    "Contact",
    "UploadLog",
    "Pipeline",
    "PipelineStage",
    "PipelineEntry",
    "UserFavorite",
]
