"""Shared fixtures and utilities for tests."""

import pytest
from fastapi.testclient import TestClient

from jobdesk.core.config import Settings
from jobdesk.core.database import Database
from jobdesk.core.permissions import Role
from jobdesk.core.security import TokenClaims
from jobdesk.main import create_app

ADMIN_EMAIL = "admin@exera.com"
ADMIN_PASSWORD = "admin123456"


def make_job_data(**overrides):
    """A payload with every required field filled in."""
    data = {
        "jobTitle": "Backend Engineer",
        "department": "Engineering",
        "location": "Colombo",
        "jobType": "Full-time",
        "aboutCompany": "We build hiring tools.",
        "positionSummary": "Own the services behind our job board.",
    }
    data.update(overrides)
    return data


def make_actor(role, user_id="a" * 24):
    raw = role.value if isinstance(role, Role) else str(role)
    parsed = role if isinstance(role, Role) else None
    return TokenClaims(id=user_id, email="actor@example.com", role=parsed, raw_role=raw)


def login(client, email, password):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def settings():
    """Settings for tests; never reads a local .env file."""
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        GEMINI_API_KEY="test-gemini-key",
        JWT_SECRET="test-jwt-secret-key-min-32-chars-long",
        BCRYPT_ROUNDS=4,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def database(settings):
    """Fresh in-memory database per test."""
    db = Database(settings.DATABASE_URL)
    db.init()
    yield db
    db.close()


@pytest.fixture
def db_session(database):
    session = database.SessionLocal()
    yield session
    session.close()


@pytest.fixture
def app(settings, database):
    return create_app(settings=settings, database=database)


@pytest.fixture
def client(app):
    # Entering the context runs startup, which seeds the admin account
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client):
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def user_factory(client, admin_headers):
    """Create an account through the API and return auth headers for it."""
    def _create(role, username=None, password="secret123"):
        username = username or role.lower().replace(" ", "_")
        email = f"{username}@exera.com"
        response = client.post(
            "/api/users",
            json={"username": username, "email": email, "password": password, "role": role},
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        return login(client, email, password)
    return _create


@pytest.fixture
def admin_actor():
    return make_actor(Role.IT_ADMIN)


@pytest.fixture
def manager_actor():
    return make_actor(Role.HR_MANAGER)


@pytest.fixture
def assistant_actor():
    return make_actor(Role.HR_ASSISTANT)
