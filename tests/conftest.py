"""Pytest fixtures: a fresh file-backed SQLite database per test.

HTTP tests go through FastAPI's TestClient with ``get_db`` overridden; store
and service tests are async and run on the anyio pytest plugin.
"""
import asyncio
import os
import tempfile

# Must be set before status_tracker is imported: settings and the bcrypt
# context are built at import time.
_TMP_DIR = tempfile.mkdtemp(prefix="status-tracker-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/app.db"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from status_tracker.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from status_tracker.main import app  # noqa: E402
from status_tracker.models.user import Role  # noqa: E402
from status_tracker.stores.user_store import UserStore  # noqa: E402

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "adminpass"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite engine for each test.

    NullPool keeps connections from outliving the event loop that opened them,
    so the same engine works from asyncio.run() here and inside TestClient.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    enable_sqlite_foreign_keys(engine)

    async def _create_all():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create_all())
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory, anyio_backend):
    """Yield an AsyncSession for store/service tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture(scope="function")
def client(session_factory):
    """FastAPI TestClient with the database dependency overridden to the per-test SQLite file."""

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def seed_user(session_factory, username: str, password: str, role: Role) -> int:
    """Insert a user straight through the store (the API cannot self-register admins)."""

    async def _create():
        async with session_factory() as session:
            user = await UserStore(session).create(username, password, role)
            return user.id

    return asyncio.run(_create())


@pytest.fixture
def admin_user(session_factory) -> dict:
    user_id = seed_user(session_factory, ADMIN_USERNAME, ADMIN_PASSWORD, Role.ADMIN)
    return {"id": user_id, "username": ADMIN_USERNAME, "password": ADMIN_PASSWORD}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def login(client: TestClient, username: str, password: str) -> str:
    """POST /api/auth/login and return the token."""
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]["token"]


def register_viewer(client: TestClient, username: str = "viewer1", password: str = "viewerpass") -> dict:
    """POST /api/auth/register and return the created user."""
    resp = client.post("/api/auth/register", json={"username": username, "password": password})
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.fixture
def admin_headers(client, admin_user) -> dict:
    return auth_headers(login(client, admin_user["username"], admin_user["password"]))


@pytest.fixture
def viewer_headers(client) -> dict:
    register_viewer(client, "viewer1", "viewerpass")
    return auth_headers(login(client, "viewer1", "viewerpass"))
