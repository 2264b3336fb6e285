"""Pytest configuration and fixtures for API tests."""
import os

# Set test env BEFORE any imports that use config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_SETUP_KEY"] = "K1"
os.environ["ENVIRONMENT"] = "test"

import pytest
from httpx import ASGITransport, AsyncClient

from core.credentials import create_admin_user
from database import Base, SessionLocal, engine
from main import app

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "Sup3rSecret!"


@pytest.fixture(autouse=True)
def _init_db():
    """Fresh schema for every test (ASGI lifespan doesn't run with httpx)."""
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin_user():
    """An active admin created straight through the credential store."""
    session = SessionLocal()
    try:
        return create_admin_user(session, ADMIN_USERNAME, ADMIN_PASSWORD)
    finally:
        session.close()


@pytest.fixture
async def client():
    """Async HTTP client for testing the API."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def admin_client(client, admin_user):
    """Client already holding a valid admin_session cookie."""
    r = await client.post(
        "/admin/auth",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert r.status_code == 200, f"Login failed: {r.text}"
    return client
