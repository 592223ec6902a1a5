"""JWT token codec implementation.

Tokens are signed with the service secret and carry only the subject:

    {
        "id": "child-uuid",
        "iat": 1234567800,
        "exp": 1234571400
    }

Nothing mutable about the child is embedded, so profile edits never require
re-issuing tokens.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from core.config import Settings, settings
from infrastructure.auth.provider import ExpiredTokenError, InvalidTokenError

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"^\s*(\d+)\s*(ms|s|m|h|d|w|y)?\s*$", re.IGNORECASE)

_UNIT_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
    "w": 7 * 86400,
    "y": 365 * 86400,
}


def parse_duration(value: str | int) -> timedelta:
    """Parse a lifetime such as ``"1h"``, ``"30m"``, ``"7d"`` or ``3600``.

    A bare number is a count of seconds.
    """
    if isinstance(value, int):
        return timedelta(seconds=value)

    match = _DURATION_RE.match(value)
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")

    amount = int(match.group(1))
    unit = (match.group(2) or "s").lower()
    if unit == "ms":
        return timedelta(milliseconds=amount)
    return timedelta(seconds=amount * _UNIT_SECONDS[unit])


class JWTTokenCodec:
    """JWT-based token codec (HS256 by default)."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret,
        algorithm: str = settings.jwt_algorithm,
        expires_in: str | int = settings.jwt_expires_in,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._lifetime = parse_duration(expires_in)

    @classmethod
    def from_settings(cls, config: Settings) -> "JWTTokenCodec":
        return cls(
            secret_key=config.jwt_secret,
            algorithm=config.jwt_algorithm,
            expires_in=config.jwt_expires_in,
        )

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def create_token(self, subject_id: UUID) -> str:
        """
        Create a signed token for a child.

        Args:
            subject_id: The child to create a token for

        Returns:
            The generated JWT string
        """
        issued_at = datetime.now(timezone.utc)
        payload = {
            "id": str(subject_id),
            "iat": issued_at,
            "exp": issued_at + self._lifetime,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def validate_token(self, token: str) -> UUID:
        """
        Validate a JWT and extract its subject.

        Raises:
            ExpiredTokenError: If the token has expired
            InvalidTokenError: If the signature, structure or subject is bad
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False},
            )
        except ExpiredSignatureError as e:
            raise ExpiredTokenError("Token has expired") from e
        except JWTError as e:
            raise InvalidTokenError("Token is invalid") from e

        subject = payload.get("id")
        if not subject:
            raise InvalidTokenError("Token has no subject")

        try:
            return UUID(str(subject))
        except ValueError as e:
            logger.debug("Token subject is not a UUID: %s", subject)
            raise InvalidTokenError("Token subject is malformed") from e
