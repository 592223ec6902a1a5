"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any
from uuid import uuid4

# Test configuration must be in place before settings are first imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["AUTH_POLICY"] = "password"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTTokenCodec
from infrastructure.database.models import Base
from infrastructure.storage.provider import BlobStoreError


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_SECRET = "test-secret-key"


class InMemoryBlobStore:
    """Test double for the remote image store."""

    base_url = "https://res.example.test/demo/image/upload/v1"

    def __init__(self) -> None:
        self.uploaded: dict[str, bytes] = {}
        self.upload_calls = 0
        self.destroyed: list[str] = []
        self.destroy_calls: list[str] = []
        self.fail_uploads_with: set[bytes] = set()
        self.fail_all_uploads = False
        self.fail_destroy_for: set[str] = set()

    async def upload(self, data: bytes, *, folder: str, quality: str) -> str:
        self.upload_calls += 1
        if self.fail_all_uploads or data in self.fail_uploads_with:
            raise BlobStoreError("upload rejected")
        public_id = f"{folder}/{uuid4().hex}"
        self.uploaded[public_id] = data
        return f"{self.base_url}/{public_id}.jpg"

    async def destroy(self, public_id: str) -> None:
        self.destroy_calls.append(public_id)
        if public_id in self.fail_destroy_for:
            raise BlobStoreError("destroy rejected")
        self.uploaded.pop(public_id, None)
        self.destroyed.append(public_id)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def token_codec() -> JWTTokenCodec:
    """Create token codec for testing."""
    return JWTTokenCodec(secret_key=TEST_SECRET, algorithm="HS256", expires_in="1h")


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client against the module-level app."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@asynccontextmanager
async def _wired_client(
    session_factory: async_sessionmaker[AsyncSession],
    blob_store: InMemoryBlobStore,
    token_codec: JWTTokenCodec,
    auth_policy: str,
) -> AsyncIterator[AsyncClient]:
    """Build an app whose collaborators are test doubles for one login policy."""
    from api.dependencies.auth import get_token_codec
    from api.dependencies.database import get_uow_factory
    from api.v1.dependencies import get_auth_service, get_child_service
    from domain.services.auth_service import AuthService, build_credential_verifier
    from domain.services.child_service import ChildService
    from domain.services.upload_service import ImageUploadService
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    child_service = ChildService(
        test_uow_factory,
        upload_service=ImageUploadService(blob_store),
        require_password=auth_policy == "password",
    )
    auth_service = AuthService(
        build_credential_verifier(auth_policy, test_uow_factory), token_codec
    )

    app.dependency_overrides[get_uow_factory] = lambda: test_uow_factory
    app.dependency_overrides[get_token_codec] = lambda: token_codec
    app.dependency_overrides[get_child_service] = lambda: child_service
    app.dependency_overrides[get_auth_service] = lambda: auth_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def api_client(
    session_factory: async_sessionmaker[AsyncSession],
    blob_store: InMemoryBlobStore,
    token_codec: JWTTokenCodec,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to test collaborators.

    This client:
    - Uses an in-memory SQLite database
    - Stores images in an in-memory blob store
    - Signs and verifies tokens with the test secret
    - Logs children in with name or email plus a password
    """
    async with _wired_client(session_factory, blob_store, token_codec, "password") as c:
        yield c


@pytest.fixture
async def identity_api_client(
    session_factory: async_sessionmaker[AsyncSession],
    blob_store: InMemoryBlobStore,
    token_codec: JWTTokenCodec,
) -> AsyncGenerator[AsyncClient, None]:
    """Same as ``api_client`` but logs children in by name or email alone."""
    async with _wired_client(session_factory, blob_store, token_codec, "identity") as c:
        yield c
