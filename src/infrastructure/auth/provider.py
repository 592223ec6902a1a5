"""Token codec protocol and errors."""

from typing import Protocol
from uuid import UUID


class InvalidTokenError(Exception):
    """Token is malformed, has a bad signature, or lacks a subject."""


class ExpiredTokenError(InvalidTokenError):
    """Token signature is valid but its lifetime has elapsed."""


class ITokenCodec(Protocol):
    """Protocol for bearer token codecs."""

    def create_token(self, subject_id: UUID) -> str:
        """
        Create a signed token for a subject.

        Args:
            subject_id: The child ID the token is issued for

        Returns:
            The generated token string
        """
        ...

    def validate_token(self, token: str) -> UUID:
        """
        Validate a token and return its subject.

        Args:
            token: The bearer token to validate

        Returns:
            The subject ID carried by the token

        Raises:
            ExpiredTokenError: If the token has expired
            InvalidTokenError: If the token is malformed or tampered with
        """
        ...
