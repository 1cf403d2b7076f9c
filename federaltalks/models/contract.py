"""
Contract Model

Government procurement contracts and opportunities, federal and state.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Float, Date

from federaltalks.database import Base
from federaltalks.utils.column_types import GUID, StringList


def generate_federal_id() -> str:
    """Build a new system identifier, e.g. ``FT-2024-3F9A1C07``."""
    return f"FT-{datetime.utcnow():%Y}-{uuid.uuid4().hex[:8].upper()}"


class Contract(Base):
    """A procurement opportunity or award tracked by the platform."""

    __tablename__ = "contracts"

    # Primary key
    id = Column(GUID(), primary_key=True, default=uuid.uuid4)

    # ==========================================================================
    # Identity
    # ==========================================================================

    # Assigned once on insert, never editable
    federal_id = Column(String(32), unique=True, nullable=False, index=True, default=generate_federal_id)
    contract_number = Column(String(100), nullable=True)
    solicitation_number = Column(String(100), nullable=True, index=True)

    # ==========================================================================
    # Classification
    # ==========================================================================

    contract_type = Column(String(20), nullable=False, default="federal", index=True)
    # Types: federal, state

    status = Column(String(20), nullable=False, default="active", index=True)
    # Status: active, forecast, tracked, closed, cancelled

    contract_status = Column(String(20), nullable=False, default="open")
    # Procurement status: open, awarded, cancelled

    # ==========================================================================
    # Descriptive
    # ==========================================================================

    title = Column(Text, nullable=False)
    contract_name = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    products_services = Column(Text, nullable=True)
    primary_requirement = Column(Text, nullable=True)
    keywords = Column(StringList(), nullable=True)
    contractors = Column(Text, nullable=True)  # Incumbent / awardee names

    # ==========================================================================
    # Organization
    # ==========================================================================

    agency = Column(String(255), nullable=False, index=True)
    buying_organization = Column(String(255), nullable=True)
    department = Column(String(255), nullable=True)
    buying_org_level_1 = Column(String(255), nullable=True)
    buying_org_level_2 = Column(String(255), nullable=True)
    buying_org_level_3 = Column(String(255), nullable=True)

    # ==========================================================================
    # Location
    # ==========================================================================

    state = Column(String(100), nullable=True, index=True)
    place_of_performance_location = Column(String(255), nullable=True)

    # ==========================================================================
    # Contact
    # ==========================================================================

    contact_first_name = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    contact_email = Column(String(255), nullable=True)

    # ==========================================================================
    # Financial
    # ==========================================================================

    budget_min = Column(Float, nullable=True)
    budget_max = Column(Float, nullable=True)
    award_value = Column(Float, nullable=True)
    naics_code = Column(String(10), nullable=True, index=True)
    set_aside_code = Column(String(50), nullable=True)

    # ==========================================================================
    # Dates
    # ==========================================================================

    award_date = Column(Date, nullable=True)
    start_date = Column(Date, nullable=True)
    current_expiration_date = Column(Date, nullable=True)
    ultimate_expiration_date = Column(Date, nullable=True)
    response_deadline = Column(DateTime, nullable=True, index=True)
    posted_date = Column(DateTime, nullable=True, default=datetime.utcnow, index=True)

    # ==========================================================================
    # Links & Research
    # ==========================================================================

    source_url = Column(Text, nullable=True)
    ai_analysis_summary = Column(Text, nullable=True)

    # ==========================================================================
    # Provenance
    # ==========================================================================

    data_source = Column(String(20), nullable=True, default="manual")
    # Sources: manual, upload, scrape
    updated_by = Column(GUID(), nullable=True)

    # ==========================================================================
    # Timestamps
    # ==========================================================================

    last_updated = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Contract {self.federal_id}: {self.title[:50]}>"
