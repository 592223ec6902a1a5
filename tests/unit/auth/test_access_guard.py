"""Unit tests for the get_current_child access guard."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt as jose_jwt
from sqlalchemy.exc import OperationalError

from api.dependencies.auth import get_current_child
from core.exceptions import AuthenticationError, ErrorCode
from domain.entities.child import Child
from infrastructure.auth.jwt_provider import JWTTokenCodec
from tests.unit.conftest import FakeUnitOfWork

SECRET = "guard-secret"


@pytest.fixture
def codec() -> JWTTokenCodec:
    return JWTTokenCodec(secret_key=SECRET, algorithm="HS256", expires_in="1h")


def _request() -> SimpleNamespace:
    return SimpleNamespace(state=SimpleNamespace())


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetCurrentChild:
    async def test_attaches_child_on_valid_token(
        self, codec: JWTTokenCodec, uow: FakeUnitOfWork, child: Child
    ):
        uow.children.get.return_value = child
        request = _request()

        result = await get_current_child(
            request, _bearer(codec.create_token(child.id)), codec, lambda: uow
        )

        assert result is child
        assert request.state.child is child
        uow.children.get.assert_awaited_once_with(child.id)

    async def test_rejects_missing_header(self, codec: JWTTokenCodec, uow: FakeUnitOfWork):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_child(_request(), None, codec, lambda: uow)

        assert exc_info.value.status_code == 401
        assert exc_info.value.error_code == ErrorCode.UNAUTHORIZED
        uow.children.get.assert_not_called()

    async def test_rejects_invalid_token(self, codec: JWTTokenCodec, uow: FakeUnitOfWork):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_child(_request(), _bearer("garbage"), codec, lambda: uow)

        assert exc_info.value.error_code == ErrorCode.INVALID_TOKEN

    async def test_distinguishes_expired_token(
        self, codec: JWTTokenCodec, uow: FakeUnitOfWork, child_id: UUID
    ):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jose_jwt.encode(
            {"id": str(child_id), "iat": past, "exp": past + timedelta(hours=1)},
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_child(_request(), _bearer(token), codec, lambda: uow)

        assert exc_info.value.status_code == 401
        assert exc_info.value.error_code == ErrorCode.TOKEN_EXPIRED

    async def test_rejects_token_of_deleted_child(
        self, codec: JWTTokenCodec, uow: FakeUnitOfWork, child_id: UUID
    ):
        uow.children.get.return_value = None

        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_child(
                _request(), _bearer(codec.create_token(child_id)), codec, lambda: uow
            )

        assert exc_info.value.error_code == ErrorCode.CHILD_NO_LONGER_EXISTS

    async def test_store_failure_is_reported_as_unauthenticated(
        self, codec: JWTTokenCodec, uow: FakeUnitOfWork
    ):
        uow.children.get = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("db down"))
        )

        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_child(
                _request(), _bearer(codec.create_token(uuid4())), codec, lambda: uow
            )

        assert exc_info.value.status_code == 401
        assert "db down" not in exc_info.value.message
