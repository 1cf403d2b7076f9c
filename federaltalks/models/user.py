"""
User Models

Customer accounts and permission-scoped internal staff accounts.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Integer

from federaltalks.database import Base
from federaltalks.utils.column_types import GUID, StringList


class User(Base):
    """Customer account. New registrations wait for admin approval."""

    __tablename__ = "users"

    # Primary key
    id = Column(GUID(), primary_key=True, default=uuid.uuid4)

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile
    full_name = Column(String(255), nullable=False)
    company_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)

    # Access
    role = Column(String(20), nullable=False, default="user")  # admin, user
    is_active = Column(Boolean, default=False)
    trial_days_remaining = Column(Integer, default=0)

    # Activity tracking
    last_login_at = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<User {self.email}>"


class InternalUser(Base):
    """Staff account whose access is limited to an explicit permission list."""

    __tablename__ = "internal_users"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)

    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)

    role = Column(String(50), nullable=False, default="assistance")
    # Roles: assistance, admin_super_assistance, super_admin
    permissions = Column(StringList(), nullable=True)

    is_active = Column(Boolean, default=True)
    created_by = Column(GUID(), nullable=True)
    last_login_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<InternalUser {self.email} ({self.role})>"
