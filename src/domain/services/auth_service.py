"""Login: credential verification and token issuing."""

from collections.abc import Callable
from typing import Protocol

import structlog
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import (
    InternalError,
    InvalidCredentialsError,
    MissingCredentialsError,
    MissingIdentityError,
    NotRegisteredError,
    ValidationError,
)
from domain.entities.child import Child
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.auth.passwords import verify_password
from infrastructure.auth.provider import ITokenCodec

logger = structlog.get_logger()


class ICredentialVerifier(Protocol):
    """Checks a login attempt and returns the matching child."""

    async def verify(
        self,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> Child:
        ...


class _BaseVerifier:
    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def _lookup(self, name: str | None, email: str | None) -> Child | None:
        """First child matching the name OR the email."""
        try:
            async with self._uow_factory() as uow:
                return await uow.children.find_one(name=name, email=email)
        except SQLAlchemyError as e:
            logger.error("login_lookup_failed", error=str(e))
            raise InternalError("Error during login") from e


class PasswordCredentialVerifier(_BaseVerifier):
    """Login with name or email plus a password."""

    async def verify(
        self,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> Child:
        if not (name or email) or not password:
            raise MissingCredentialsError()

        child = await self._lookup(name, email)
        if not child or not verify_password(password, child.password_hash):
            raise InvalidCredentialsError()

        return child.without_password()


class IdentityCredentialVerifier(_BaseVerifier):
    """Login with a name or an email alone. Passwords are refused."""

    async def verify(
        self,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> Child:
        if password is not None:
            raise ValidationError(
                "Passwords are not accepted by this service", field="password"
            )
        if not name and not email:
            raise MissingIdentityError()

        child = await self._lookup(name, email)
        if not child:
            raise NotRegisteredError()

        return child.without_password()


def build_credential_verifier(
    policy: str, uow_factory: Callable[[], IUnitOfWork]
) -> ICredentialVerifier:
    """Create the verifier for the configured login policy."""
    if policy == "password":
        return PasswordCredentialVerifier(uow_factory)
    if policy == "identity":
        return IdentityCredentialVerifier(uow_factory)
    raise ValueError(f"Unknown auth policy: {policy}")


class AuthService:
    """Issues bearer tokens for verified children."""

    def __init__(self, verifier: ICredentialVerifier, token_codec: ITokenCodec) -> None:
        self._verifier = verifier
        self._token_codec = token_codec

    async def login(
        self,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> tuple[str, Child]:
        """Verify credentials and return a fresh token with the child."""
        child = await self._verifier.verify(name=name, email=email, password=password)
        token = self._token_codec.create_token(child.id)
        logger.info("child_logged_in", child_id=str(child.id))
        return token, child
