"""Shared pytest fixtures for mma-picks-api tests."""
import os
import sys
from pathlib import Path
from typing import Any, Dict, Generator

# Configure the app for tests before anything imports app.core.config
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["API_KEY"] = "test-api-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_JSON"] = "false"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Registers the SQLite foreign-key listener on every engine
import app.core.database  # noqa: E402,F401

API_KEY_HEADERS = {"X-API-Key": "test-api-key"}
TEST_USER_ID = "6f1c2b0e-3c1e-4b7a-9a55-0d4c7f0e2a11"


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create fresh test database session with isolated in-memory database."""
    from app.models import Base

    # StaticPool keeps a single connection so every session sees the same
    # in-memory database
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestSessionLocal = sessionmaker(bind=engine, autoflush=False)
    session = TestSessionLocal()

    yield session

    session.close()
    engine.dispose()


class FakeAuthClient:
    """Stands in for SupabaseAuthClient in route tests."""

    def __init__(self, users: Dict[str, Dict[str, Any]]):
        self.users = users

    async def sign_in(self, email: str, password: str):
        from app.services.auth_client import AuthenticationError, AuthSession

        if password != "correct-horse":
            raise AuthenticationError("Invalid login credentials")
        return AuthSession(access_token="token-123", user={"id": TEST_USER_ID, "email": email})

    async def get_user(self, token: str) -> Dict[str, Any]:
        from app.services.auth_client import AuthenticationError

        if token not in self.users:
            raise AuthenticationError("Invalid token")
        return self.users[token]


@pytest.fixture
def auth_client() -> FakeAuthClient:
    return FakeAuthClient({"token-123": {"id": TEST_USER_ID, "email": "fan@example.com"}})


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture(scope="function")
def test_client(db_session, auth_client):
    """
    Create FastAPI TestClient with a fresh database for each test.

    The database dependency yields the test session and the auth client is
    replaced with FakeAuthClient, which accepts the bearer token "token-123".

    Note: We don't use context manager (with TestClient) because it conflicts
    with Prometheus middleware that's added during app module initialization.
    """
    from fastapi.testclient import TestClient
    from app.main import app
    from app.core.auth import get_auth_client
    from app.core.database import get_db

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_client] = lambda: auth_client

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()


@pytest.fixture
def ufc_316_payload() -> Dict[str, Any]:
    return {
        "name": "UFC 316",
        "date": "June 07, 2025",
        "location": "Newark, New Jersey, USA",
        "bouts": [
            {
                "left_fighter": "Merab Dvalishvili",
                "left_record": "19-4",
                "right_fighter": "Sean O'Malley",
                "right_record": "18-2",
            },
        ],
    }
