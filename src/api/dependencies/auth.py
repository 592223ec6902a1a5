"""Authentication dependencies for FastAPI."""

from functools import lru_cache
from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError

from api.dependencies.database import get_uow_factory
from core.config import settings
from core.exceptions import AuthenticationError, ErrorCode
from domain.entities.child import Child
from infrastructure.auth.jwt_provider import JWTTokenCodec
from infrastructure.auth.provider import ExpiredTokenError, InvalidTokenError

logger = structlog.get_logger()

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)


@lru_cache
def get_token_codec() -> JWTTokenCodec:
    """Get the token codec singleton."""
    return JWTTokenCodec.from_settings(settings)


async def get_current_child(
    request: Request,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    token_codec: JWTTokenCodec = Depends(get_token_codec),
    uow_factory=Depends(get_uow_factory),
) -> Child:
    """
    Dependency that lets a request through only for a logged-in child.

    The token subject is re-resolved on every request, so deleting a child
    makes all of its tokens unusable without a revocation list.

    Raises:
        AuthenticationError: If no token is provided, the token is invalid or
            expired, or the child no longer exists
    """
    if not credentials or not credentials.credentials:
        raise AuthenticationError(
            message="You are not logged in. Please log in to get access",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    try:
        child_id = token_codec.validate_token(credentials.credentials)
    except ExpiredTokenError:
        logger.info("access_denied", reason="token_expired")
        raise AuthenticationError(
            message="Session expired. Please log in again",
            error_code=ErrorCode.TOKEN_EXPIRED,
        )
    except InvalidTokenError:
        logger.info("access_denied", reason="token_invalid")
        raise AuthenticationError(
            message="Invalid token. Please log in again",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    try:
        async with uow_factory() as uow:
            child = await uow.children.get(child_id)
    except SQLAlchemyError as e:
        logger.error("access_lookup_failed", error=str(e))
        raise AuthenticationError(
            message="Could not verify session. Please log in again",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    if not child:
        logger.info("access_denied", reason="child_deleted", child_id=str(child_id))
        raise AuthenticationError(
            message="The child belonging to this token no longer exists",
            error_code=ErrorCode.CHILD_NO_LONGER_EXISTS,
        )

    request.state.child = child
    return child


# Type alias for convenience in route handlers
CurrentChild = Annotated[Child, Depends(get_current_child)]
