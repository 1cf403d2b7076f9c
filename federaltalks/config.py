"""
FederalTalks IQ Configuration

Loads settings from environment variables with validation.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ==========================================================================
    # Application
    # ==========================================================================
    app_name: str = "FederalTalks IQ"
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # ==========================================================================
    # Database
    # ==========================================================================
    database_url: str = "sqlite:///./federaltalks.db"

    # ==========================================================================
    # Security
    # ==========================================================================
    secret_key: str = "change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 12

    # "store" checks the users tables, "demo" checks the demo accounts below
    auth_backend: str = "store"

    # Demo accounts are disabled unless both email and password are set
    demo_admin_email: str = ""
    demo_admin_password: str = ""
    demo_user_email: str = ""
    demo_user_password: str = ""

    # ==========================================================================
    # Reports
    # ==========================================================================
    # "stub" renders template reports, "anthropic" calls the Messages API
    report_generator: str = "stub"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-haiku-20241022"

    # ==========================================================================
    # Search
    # ==========================================================================
    search_candidate_limit: int = 5000

    # ==========================================================================
    # CORS
    # ==========================================================================
    cors_origins: str = "*"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience access
settings = get_settings()


# =============================================================================
# Record Enumerations
# =============================================================================

CONTRACT_TYPES = ("federal", "state")

CONTRACT_STATUSES = ("active", "forecast", "tracked", "closed", "cancelled")

# Procurement state of the underlying solicitation
PROCUREMENT_STATUSES = ("open", "awarded", "cancelled")

CONTACT_TYPES = ("cio", "cto", "cpo", "procurement", "director")

DATA_SOURCES = ("manual", "upload", "scrape")

UPLOAD_KINDS = ("contracts", "contacts")

DEADLINE_BUCKETS = {
    "all": None,
    "7days": 7,
    "30days": 30,
}


# =============================================================================
# Internal User Permissions
# =============================================================================

PERMISSIONS = {
    # Dashboard
    "view_dashboard": ("Dashboard", "Access the main dashboard"),
    "view_analytics": ("Dashboard", "View analytics and reports"),
    # User management
    "view_users": ("User Management", "View user listings"),
    "manage_users": ("User Management", "Approve, edit and remove users"),
    "manage_trials": ("User Management", "Manage demo and trial accounts"),
    # Contract management
    "view_contracts": ("Contract Management", "View contract listings"),
    "add_contracts": ("Contract Management", "Create new contracts manually"),
    "edit_contracts": ("Contract Management", "Modify existing contracts"),
    "delete_contracts": ("Contract Management", "Remove contracts"),
    "upload_contracts": ("Contract Management", "Bulk upload contracts"),
    # Contact management
    "view_contacts": ("Contact Management", "View contact listings"),
    "add_contacts": ("Contact Management", "Create new contacts manually"),
    "edit_contacts": ("Contact Management", "Modify existing contacts"),
    "delete_contacts": ("Contact Management", "Remove contacts"),
    "upload_contacts": ("Contact Management", "Bulk upload contacts"),
    # System
    "view_upload_logs": ("System", "Access upload history"),
    "manage_internal_users": ("Internal", "Create and manage internal users"),
}

ROLE_PERMISSIONS = {
    "assistance": [
        "view_dashboard",
        "view_contracts",
        "view_contacts",
        "add_contracts",
        "add_contacts",
    ],
    "admin_super_assistance": [
        "view_dashboard",
        "view_analytics",
        "view_contracts",
        "view_contacts",
        "add_contracts",
        "add_contacts",
        "edit_contracts",
        "edit_contacts",
        "upload_contracts",
        "upload_contacts",
        "view_users",
        "manage_trials",
        "view_upload_logs",
    ],
    "super_admin": list(PERMISSIONS),
}

# Ordered stages seeded into a user's first pipeline
DEFAULT_PIPELINE_STAGES = [
    ("Prospecting", "#6B7280"),
    ("Qualified", "#3B82F6"),
    ("Proposal", "#8B5CF6"),
    ("Negotiation", "#F59E0B"),
    ("Won", "#10B981"),
    ("Lost", "#EF4444"),
]
