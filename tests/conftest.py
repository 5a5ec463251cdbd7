"""Shared pytest fixtures configured to use SQLite in-memory for unit tests."""

import logging
import os
import tempfile
from datetime import datetime, timedelta, timezone
from uuid import uuid4

# Must be set before the app modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="noteverse-logs-"))
os.environ["NOTEVERSE_SKIP_LIFESPAN_DB"] = "1"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from noteverse.config import Settings, get_settings
from noteverse.core.models import BaseModel, Note, User
from noteverse.core.redis_client import get_redis_client
from noteverse.database import get_db_session
from noteverse.main import app
from noteverse.security.jwt import create_access_token

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

# Users in fixtures never log in through the password path, so skip bcrypt
DUMMY_PASSWORD_HASH = "not-a-real-hash"


@pytest.fixture
def test_settings(tmp_path):
    """Settings for tests: SQLite in-memory DB and a throwaway upload dir."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        secret_key="test-secret-key",
        debug=True,
        upload_dir=str(tmp_path / "uploads"),
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
async def test_engine():
    """Fresh SQLite in-memory engine with the full schema, one per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,  # keep the same memory DB across connections
        connect_args={"check_same_thread": False},
    )

    # Ensure SQLite enforces foreign key constraints (required for CASCADE)
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def test_session(test_engine):
    """Database session bound to the per-test engine."""
    session_maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


async def _create_user(session: AsyncSession, username: str) -> User:
    user = User(
        username=username,
        email=f"{username}.{uuid4().hex[:6]}@example.com",
        password_hash=DUMMY_PASSWORD_HASH,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest.fixture
async def author(test_session):
    """User A: writes the notes in most scenarios."""
    return await _create_user(test_session, "alice")


@pytest.fixture
async def other_user(test_session):
    """User B: reads and likes A's notes."""
    return await _create_user(test_session, "bob")


@pytest.fixture
def note_factory(test_session):
    """Insert notes directly, with increasing created_at unless one is given."""
    base_time = datetime(2025, 1, 1, tzinfo=timezone.utc)
    counter = {"n": 0}

    async def _make(author_id, **overrides) -> Note:
        counter["n"] += 1
        data = {
            "title": f"Note {counter['n']}",
            "content": "Lecture notes content",
            "branch": "cs",
            "year": "2",
            "subject": "Data Structures",
            "is_public": True,
            "author_id": author_id,
            "created_at": base_time + timedelta(minutes=counter["n"]),
            "updated_at": base_time + timedelta(minutes=counter["n"]),
        }
        data.update(overrides)
        note = Note(**data)
        test_session.add(note)
        await test_session.commit()
        return note

    return _make


@pytest.fixture
def note_payload():
    """Valid create/update payload."""
    return {
        "title": "Operating Systems Unit 1",
        "content": "Processes, threads and scheduling.",
        "branch": "cs",
        "year": "3",
        "subject": "Operating Systems",
        "files": [
            {
                "name": "os-unit1.pdf",
                "url": "/uploads/file-1700000000000-1.pdf",
                "type": "application/pdf",
                "size": 2048,
            }
        ],
    }


def make_auth_headers(user_id) -> dict:
    token = create_access_token({"sub": str(user_id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(author):
    """Create authentication headers with a valid JWT token."""
    return make_auth_headers(author.id)


@pytest.fixture
def other_auth_headers(other_user):
    return make_auth_headers(other_user.id)


@pytest.fixture
def test_app(test_session, test_settings):
    """FastAPI app with DB session and settings overridden."""

    async def _override_get_db():
        yield test_session

    app.dependency_overrides[get_db_session] = _override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app):
    """Create async test client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis covering the calls we make."""

    def __init__(self):
        self.storage = {}
        self.ttls = {}

    async def ping(self):
        return True

    async def get(self, key):
        return self.storage.get(key)

    async def set(self, key, value):
        self.storage[key] = value
        return True

    async def setex(self, key, expire, value):
        self.storage[key] = value
        self.ttls[key] = expire
        return True

    async def exists(self, key):
        return 1 if key in self.storage else 0

    async def aclose(self):
        pass


@pytest.fixture
def fake_redis(monkeypatch):
    """Attach a FakeRedis to the shared client so the blacklist is live."""
    fake = FakeRedis()
    monkeypatch.setattr(get_redis_client(), "redis", fake)
    return fake
