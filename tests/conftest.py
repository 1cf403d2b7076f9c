import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("AUTH_BACKEND", "store")
os.environ.setdefault("REPORT_GENERATOR", "stub")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from federaltalks.database import Base, get_db
from federaltalks.main import app
from federaltalks.services.auth import AuthSession, issue_token, permissions_for_role
from federaltalks.services.reports import StubReportGenerator, get_report_generator
from federaltalks.services.store import TableStore
from federaltalks.utils.security import get_password_hash

TEST_PASSWORD = "Secret123"


def pytest_addoption(parser):
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked as integration (requires network / API keys).",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "integration: tests that require external services (e.g., the Anthropic API)"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(
        reason="integration test (use --run-integration to run)"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# =============================================================================
# Database
# =============================================================================

@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def store(db):
    return TableStore(db)


# =============================================================================
# API
# =============================================================================

@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_report_generator] = StubReportGenerator
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Accounts
# =============================================================================

def _create_user(store, email, role="user", is_active=True, full_name="Test User"):
    [user] = store.insert(
        "users",
        [{
            "email": email,
            "password_hash": get_password_hash(TEST_PASSWORD),
            "full_name": full_name,
            "role": role,
            "is_active": is_active,
        }],
    )
    return user


def _create_internal_user(store, email, role="assistance", permissions=None):
    [staff] = store.insert(
        "internal_users",
        [{
            "email": email,
            "password_hash": get_password_hash(TEST_PASSWORD),
            "full_name": "Staff Member",
            "role": role,
            "permissions": permissions if permissions is not None else permissions_for_role(role),
            "is_active": True,
        }],
    )
    return staff


def _bearer(row, account_type="user"):
    """Authorization header for a users / internal_users row."""
    session = AuthSession(
        user_id=row["id"],
        email=row["email"],
        full_name=row["full_name"],
        role=row["role"],
        permissions=frozenset(row.get("permissions") or permissions_for_role(row["role"])),
        account_type=account_type,
    )
    return {"Authorization": f"Bearer {issue_token(session)}"}


@pytest.fixture()
def password():
    return TEST_PASSWORD


@pytest.fixture()
def user_factory(store):
    def _create(email, **kwargs):
        return _create_user(store, email, **kwargs)

    return _create


@pytest.fixture()
def staff_factory(store):
    def _create(email, **kwargs):
        return _create_internal_user(store, email, **kwargs)

    return _create


@pytest.fixture()
def headers_for():
    """Build bearer headers for a stored account row."""
    return _bearer


@pytest.fixture()
def admin_user(store):
    return _create_user(store, "admin@federaltalks.io", role="admin", full_name="Site Admin")


@pytest.fixture()
def admin_headers(admin_user):
    return _bearer(admin_user)


@pytest.fixture()
def member_user(store):
    return _create_user(store, "member@contractor.com", full_name="Member User")


@pytest.fixture()
def member_headers(member_user):
    return _bearer(member_user)


@pytest.fixture()
def make_contract(store):
    """Insert a contract with sensible defaults."""

    def _make(**fields):
        row = {"title": "Network Upgrade", "agency": "GSA", "status": "active"}
        row.update(fields)
        return store.insert("contracts", [row])[0]

    return _make
