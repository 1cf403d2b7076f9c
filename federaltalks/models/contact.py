"""
Contact Model

Procurement decision-makers. Contacts are not linked to contracts.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime

from federaltalks.database import Base
from federaltalks.utils.column_types import GUID


class Contact(Base):
    """Government procurement contact."""

    __tablename__ = "contacts"

    # Primary key
    id = Column(GUID(), primary_key=True, default=uuid.uuid4)

    # Required
    full_name = Column(String(255), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    agency = Column(String(255), nullable=False, index=True)

    # Optional
    department = Column(String(255), nullable=True)
    state = Column(String(100), nullable=True, index=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)

    contact_type = Column(String(20), nullable=False, default="procurement")
    # Types: cio, cto, cpo, procurement, director

    is_federal = Column(Boolean, nullable=False, default=False)

    data_source = Column(String(20), nullable=True, default="manual")

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Contact {self.full_name} ({self.agency})>"
