"""Common Pydantic schemas shared across the API."""

from typing import Any, Literal

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standardized error response.

    ``status`` is ``"fail"`` for client errors and ``"error"`` for server
    errors.
    """

    status: Literal["fail", "error"]
    error_code: str
    message: str
    details: Any | None = None
