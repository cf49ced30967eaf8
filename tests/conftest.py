"""
Pytest configuration for the tasks API tests.

DATABASE_URL must be set before any tasks_api import because
tasks_api/config.py validates settings and tasks_api/database.py builds the
engine at module level.
"""

import os
import sys
from pathlib import Path

# --- Environment setup (before ANY tasks_api imports) ---
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./tasks_test.db"
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

# Add tests dir so `from factories import ...` works
sys.path.insert(0, str(Path(__file__).parent))

import pytest

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from tasks_api.database import Base, get_db
from tasks_api.main import app
from tasks_api.routers.tasks import get_task_repository
from fakes import FakeTaskRepository

# ---------------------------------------------------------------------------
# Test engine: SQLite in-memory with StaticPool so all threads/connections
# share the same database (required for TestClient which runs in a thread).
# ---------------------------------------------------------------------------
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a fresh SQLAlchemy session for repository tests."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    """FastAPI TestClient with database dependency override."""
    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def fake_repo():
    """In-memory repository double for handler tests."""
    return FakeTaskRepository()


@pytest.fixture
def fake_client(fake_repo):
    """TestClient whose handlers talk to ``fake_repo`` instead of a database."""
    app.dependency_overrides[get_task_repository] = lambda: fake_repo
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
