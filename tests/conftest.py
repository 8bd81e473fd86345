"""
ItemDrop Backend - Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Inventory (all function-scoped):
    ├── mock_db_session: AsyncMock session; add() assigns an id like a flush would
    ├── fake_store: in-memory ObjectStore recording every upload
    ├── temp_storage: temporary directory for LocalObjectStore tests
    ├── sample_image_bytes / sample_image_base64: minimal JPEG payload
    ├── test_client: HTTPX AsyncClient with session and store overridden
    └── sqlite_session_factory: real async SQLite database with the items table
"""

import base64
import os
import tempfile
import uuid
from typing import List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any itemdrop imports
_test_dir = tempfile.mkdtemp(prefix="itemdrop_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_test_dir}/test.db"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["STORAGE_ROOT"] = os.path.join(_test_dir, "storage")
os.environ["CONTENT_BUCKET"] = "item-images"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from itemdrop.database import Base, get_db_session
from itemdrop.exceptions import ObjectStorageError
from itemdrop.models.item import Item  # noqa: F401  (registers the items table)
from itemdrop.services.object_store import ObjectStore, get_object_store


class RecordingObjectStore(ObjectStore):
    """
    In-memory object store for tests.

    Every successful upload is appended to `uploads` as
    (bucket, path, data, content_type). Set `fail_with` to make the next
    uploads raise ObjectStorageError with that message, or `raise_exc` to
    raise an arbitrary exception.
    """

    def __init__(self):
        self.uploads: List[Tuple[str, str, bytes, str]] = []
        self.upload_calls = 0
        self.fail_with: Optional[str] = None
        self.raise_exc: Optional[Exception] = None
        self.healthy = True

    async def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> None:
        self.upload_calls += 1
        if self.raise_exc is not None:
            raise self.raise_exc
        if self.fail_with is not None:
            raise ObjectStorageError(message=self.fail_with)
        self.uploads.append((bucket, path, data, content_type))

    async def health_check(self, bucket: str) -> bool:
        return self.healthy


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    add() gives the item a UUID, standing in for the id a real flush assigns.
    Set `flush.side_effect` to simulate an insert failure.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock(side_effect=lambda obj: setattr(obj, "id", uuid.uuid4()))
    return session


@pytest.fixture
def fake_store():
    return RecordingObjectStore()


@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def sample_image_base64(sample_image_bytes):
    return base64.b64encode(sample_image_bytes).decode("ascii")


@pytest_asyncio.fixture
async def test_client(mock_db_session, fake_store):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    The database session and object store dependencies are replaced with
    `mock_db_session` and `fake_store`, so no backend is contacted.
    """
    from itemdrop.main import app

    async def override_db_session():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_object_store] = lambda: fake_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def sqlite_session_factory(tmp_path):
    """A throwaway SQLite database with the items table created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/items.db")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()
