"""
Pytest configuration and fixtures
"""
import os
import sys
from pathlib import Path

import pytest
from sqlalchemy.orm import Session

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Settings are read once, so the test environment is fixed before any reflect import
os.environ["APP_ENV"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ["LOG_FORMAT"] = "text"
os.environ["IMAGE_REMOTE_PATTERNS"] = "https://**"

from reflect.core.database import Base, get_db, get_engine, get_session_local


@pytest.fixture(scope="function")
def db() -> Session:
    """Create a database session on a fresh schema"""
    import reflect.models  # noqa: F401

    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = get_session_local()()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db: Session):
    """Create test client with database dependency override"""
    from fastapi.testclient import TestClient
    from reflect.main import app

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


def _register(client, username="writer", email=None, password="s3cret-pass"):
    response = client.post("/api/auth/register", json={
        "username": username,
        "email": email or f"{username}@example.com",
        "password": password,
    })
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture(scope="function")
def register_user():
    """Register a user through the API; the client switches to their session"""
    return _register


@pytest.fixture(scope="function")
def user(client):
    """Registered user; the client carries its session cookie"""
    return _register(client)["user"]


@pytest.fixture(scope="function")
def auth_client(client, user):
    return client


@pytest.fixture(scope="function")
def make_entry(auth_client):
    """Create entries through the API"""
    def _make(title="A day", content="<p>Some thoughts</p>", mood="happy", **extra):
        payload = {"title": title, "content": content, "mood": mood}
        payload.update(extra)
        response = auth_client.post("/api/journal", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture(scope="function")
def make_collection(auth_client):
    def _make(name="Travel", description=None):
        response = auth_client.post("/api/collections", json={"name": name, "description": description})
        assert response.status_code == 201, response.text
        return response.json()
    return _make
