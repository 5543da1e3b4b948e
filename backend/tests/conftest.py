"""
Org Portal - Test Configuration

Pytest fixtures: in-memory SQLite sessions, local object storage under a
temporary directory, and a TestClient bound to both.
"""
import os
from datetime import date
from uuid import uuid4

# Keep app.database off the default PostgreSQL URL during collection
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth import create_access_token, hash_password
from app.database import Base, get_db
from app.main import app
from app.models.db_models import AccountStatus, EventDB, OrgAccountDB
from app.services.storage import ObjectStorage, get_storage


@pytest.fixture
def db_session():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def storage(tmp_path):
    return ObjectStorage(backend="local", base_path=str(tmp_path), public_base_url="http://files.test")


@pytest.fixture
def make_event(db_session):
    """Factory for events; defaults to an AO event ending Friday 2024-03-01."""
    def _make(**overrides):
        fields = {
            "id": str(uuid4()),
            "title": "General Assembly",
            "description": "Annual assembly",
            "start_date": date(2024, 2, 28),
            "end_date": date(2024, 3, 1),
            "all_day": True,
            "target_organization": "AO",
            "require_accomplishment": True,
            "require_liquidation": True,
            "created_by": "OSLD",
        }
        fields.update(overrides)
        event = EventDB(**fields)
        db_session.add(event)
        db_session.commit()
        return event
    return _make


@pytest.fixture
def make_account(db_session):
    def _make(organization, email=None, password="password123", status=AccountStatus.ACTIVE):
        account = OrgAccountDB(
            id=str(uuid4()),
            organization=organization,
            email=email or f"{organization.lower()}@school.edu",
            password_hash=hash_password(password),
            status=status.value,
        )
        db_session.add(account)
        db_session.commit()
        return account
    return _make


@pytest.fixture
def client(db_session, storage):
    """TestClient sharing the test session and storage."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(make_account):
    """Bearer headers for an organization, creating its account on first use."""
    accounts = {}

    def _headers(organization):
        if organization not in accounts:
            accounts[organization] = make_account(organization)
        account = accounts[organization]
        token = create_access_token(account.id, account.email, account.organization)
        return {"Authorization": f"Bearer {token}"}
    return _headers
