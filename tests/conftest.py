import os

# Settings read at import time by the application modules
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("SIGNUP_AUTO_APPROVE", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timezone  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from httpx import Request  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from cmdb.models.user_model import User, UserRole  # noqa: E402


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "cmdb_test.db"


@pytest.fixture
def client(db_path):
    """Test client backed by a fresh SQLite database"""
    from cmdb.db import session as db_session
    from cmdb.main import app

    db_session.configure_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)

    with TestClient(app) as test_client:
        yield test_client

    # Clean up
    db_session.engine = None
    db_session.SessionLocal = None
    app.dependency_overrides.clear()


@pytest.fixture
def grant_role(db_path):
    """Insert a role row directly, bypassing the admin-only API"""

    def _grant(user_id: str, role: str = "admin"):
        engine = create_engine(f"sqlite:///{db_path}")
        with engine.begin() as conn:
            conn.execute(UserRole.__table__.insert().values(user_id=user_id, role=role))
        engine.dispose()

    return _grant


@pytest.fixture
def signup(client):
    """Register an account through the API; returns (user, auth headers)"""

    def _signup(email: str, password: str = "correct-horse-battery"):
        response = client.post(
            "/api/auth/signup", json={"email": email, "password": password}
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}

    return _signup


@pytest.fixture
def admin(signup, grant_role):
    user, headers = signup("admin@example.com")
    grant_role(user["id"], "admin")
    return user, headers


@pytest.fixture
def mock_db_session():
    """Create a properly configured mock database session"""
    session = AsyncMock(spec=AsyncSession)

    mock_result = MagicMock()
    session.execute = AsyncMock(return_value=mock_result)

    session.add = MagicMock()
    session.add_all = MagicMock()
    session.commit = AsyncMock()
    session.flush = AsyncMock()
    session.rollback = AsyncMock()

    return session


@pytest.fixture
def mock_user():
    """Create a user with all required attributes"""
    now = datetime.now(timezone.utc)
    return User(
        id="test_user_id",
        username="test@example.com",
        email="test@example.com",
        password_hash="$2b$12$hash",
        display_name=None,
        approved=True,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def mock_httpx_response():
    """Helper to create real httpx Response objects"""

    def _create_response(status_code, json_data=None):
        from httpx import Response

        response = Response(status_code, json=json_data)
        response._request = Request("POST", "http://alertmanager:9093/api/v1/alerts")
        return response

    return _create_response
