"""Shared test fixtures.

Every test that touches the database gets a fresh schema. SQLite (aiosqlite)
is used unless PHOTOQUEST_TEST_DATABASE_URL points at a PostgreSQL database.
"""

from __future__ import annotations

import io
import os
from collections.abc import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from photoquest.auth.service import create_account
from photoquest.auth.session import reset_secret
from photoquest.config import get_settings
from photoquest.database import close_db, get_engine, get_session_factory, init_db
from photoquest.db.base import Base
from photoquest.db.models import Account
from photoquest.errors import StorageError
from photoquest.storage.blob_store import BaseBlobStore, StoredBlob, get_blob_store, reset_blob_store

ADMIN_PASSWORD = "AdminPass1"
MEMBER_PASSWORD = "AlicePass1"
PASSPHRASE = "open-sesame"


class FakeBlobStore(BaseBlobStore):
    """In-memory blob store recording every call."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.store_calls = 0
        self.fail_store = False
        self.fail_delete = False

    async def store(self, data: bytes, folder: str) -> StoredBlob:
        self.store_calls += 1
        if self.fail_store:
            raise StorageError
        identifier = f"{folder}/blob{self.store_calls}"
        self.blobs[identifier] = data
        return StoredBlob(url=f"https://media.test/{identifier}.jpg", identifier=identifier)

    async def delete(self, identifier: str) -> bool:
        if self.fail_delete:
            return False
        self.deleted.append(identifier)
        self.blobs.pop(identifier, None)
        return True


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Known settings for every test; caches are cleared before and after."""
    monkeypatch.setenv("PHOTOQUEST_SESSION_SECRET", "test-session-secret")
    monkeypatch.setenv("PHOTOQUEST_ADMIN_PASSPHRASE", PASSPHRASE)
    monkeypatch.setenv("PHOTOQUEST_LOG_FORMAT", "console")
    get_settings.cache_clear()
    reset_secret()
    reset_blob_store()
    yield
    get_settings.cache_clear()
    reset_secret()
    reset_blob_store()


@pytest_asyncio.fixture
async def database(tmp_path, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[str, None]:
    """Initialize the engine on a fresh schema. Yields the database URL."""
    url = os.environ.get("PHOTOQUEST_TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'photoquest.db'}"
    monkeypatch.setenv("PHOTOQUEST_DATABASE_URL", url)
    get_settings.cache_clear()

    await init_db(url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield url
    await close_db()


@pytest_asyncio.fixture
async def db_session(database: str) -> AsyncGenerator[AsyncSession, None]:
    """A direct database session for setup and assertions."""
    async with get_session_factory()() as session:
        yield session


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest_asyncio.fixture
async def client_factory(database: str, blob_store: FakeBlobStore) -> AsyncGenerator[Callable[[], AsyncClient], None]:
    """Build independent clients (separate cookie jars) against one app instance."""
    from photoquest.main import create_app

    app = create_app()
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    clients: list[AsyncClient] = []

    def _make() -> AsyncClient:
        ac = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(ac)
        return ac

    yield _make

    for ac in clients:
        await ac.aclose()


@pytest_asyncio.fixture
async def client(client_factory: Callable[[], AsyncClient]) -> AsyncClient:
    """Anonymous client."""
    return client_factory()


@pytest_asyncio.fixture
async def admin_account(db_session: AsyncSession) -> Account:
    return await create_account(db_session, "admin", ADMIN_PASSWORD, is_admin=True)


@pytest_asyncio.fixture
async def member_account(db_session: AsyncSession) -> Account:
    return await create_account(db_session, "alice", MEMBER_PASSWORD)


@pytest_asyncio.fixture
async def admin_client(client_factory: Callable[[], AsyncClient], admin_account: Account) -> AsyncClient:
    """Client logged in as the admin account."""
    ac = client_factory()
    response = await ac.post("/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return ac


@pytest_asyncio.fixture
async def member_client(client_factory: Callable[[], AsyncClient], member_account: Account) -> AsyncClient:
    """Client logged in as a regular account."""
    ac = client_factory()
    response = await ac.post("/login", json={"username": "alice", "password": MEMBER_PASSWORD})
    assert response.status_code == 200
    return ac


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


def _encode(fmt: str, exif_datetime: str | None = None) -> bytes:
    buf = io.BytesIO()
    img = Image.new("RGB", (8, 8), (200, 40, 40))
    if exif_datetime is not None:
        exif = Image.Exif()
        exif[306] = exif_datetime  # DateTime
        img.save(buf, format=fmt, exif=exif)
    else:
        img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def make_jpeg() -> Callable[..., bytes]:
    """Factory: JPEG bytes, optionally with an EXIF DateTime."""

    def _make(exif_datetime: str | None = None) -> bytes:
        return _encode("JPEG", exif_datetime)

    return _make


@pytest.fixture
def jpeg_bytes(make_jpeg: Callable[..., bytes]) -> bytes:
    return make_jpeg()


@pytest.fixture
def png_bytes() -> bytes:
    return _encode("PNG")


# ---------------------------------------------------------------------------
# Assertions
# ---------------------------------------------------------------------------


async def count_rows(model: type) -> int:
    """Row count read through a fresh session."""
    async with get_session_factory()() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.fixture
def row_count() -> Callable[[type], object]:
    """Expose count_rows to tests as a fixture."""
    return count_rows
