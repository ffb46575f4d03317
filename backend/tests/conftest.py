"""
UserHub Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── alice_id:           Identifier string of the seeded user
    ├── missing_id:         Well-formed identifier nobody has
    ├── alice:              Seeded User entity (id 1111…, name "Alice")
    ├── memory_repository:  InMemoryUserRepository seeded with alice
    ├── mock_repository:    AsyncMock honouring the UserRepository contract
    ├── session_factory:    Real async SQLAlchemy sessions over a temp SQLite file
    ├── sql_repository:     SqlAlchemyUserRepository over session_factory
    └── test_client:        HTTPX AsyncClient wired to an app over memory_repository
"""

import os

# Override settings BEFORE any userhub import: config.settings is built at import time
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

import uuid  # noqa: E402
from datetime import datetime, timezone  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from userhub.bootstrap import services_for_repository  # noqa: E402
from userhub.data_access.database import (  # noqa: E402
    build_engine,
    build_session_factory,
    create_schema,
    dispose_engine,
)
from userhub.data_access.entities import User  # noqa: E402
from userhub.data_access.repositories import (  # noqa: E402
    InMemoryUserRepository,
    SqlAlchemyUserRepository,
    UserRepository,
)
from userhub.main import create_app  # noqa: E402

ALICE_ID = "11111111-1111-1111-1111-111111111111"
MISSING_ID = "22222222-2222-2222-2222-222222222222"


@pytest.fixture
def alice_id():
    return ALICE_ID


@pytest.fixture
def missing_id():
    """A well-formed identifier that no seeded user has."""
    return MISSING_ID


@pytest.fixture
def alice():
    """The user every scenario expects to find in storage."""
    created = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    return User(
        id=uuid.UUID(ALICE_ID),
        name="Alice",
        email="alice@example.com",
        created_at=created,
        updated_at=created,
        version=1,
    )


@pytest.fixture
def memory_repository(alice):
    return InMemoryUserRepository([alice])


@pytest.fixture
def mock_repository():
    """
    Provides a mock repository.

    Usage:
        mock_repository.get_by_id.return_value = alice
        result = await DefaultUserService(mock_repository).get_user_by_id(ALICE_ID)
    """
    return AsyncMock(spec=UserRepository)


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Async session factory over a fresh SQLite database file per test."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'userhub_test.db'}")
    await create_schema(engine)
    yield build_session_factory(engine)
    await dispose_engine(engine)


@pytest.fixture
def sql_repository(session_factory):
    return SqlAlchemyUserRepository(session_factory, retry_attempts=1)


@pytest_asyncio.fixture
async def test_client(memory_repository):
    """
    HTTPX AsyncClient talking to an app composed over memory_repository.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    app = create_app(services=services_for_repository(memory_repository))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
