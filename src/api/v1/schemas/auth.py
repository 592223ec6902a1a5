"""Pydantic schemas for Auth API."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from api.v1.schemas.child import ChildData


class LoginRequest(BaseModel):
    """Login credentials.

    Which fields are required depends on the login policy: name or email
    plus a password, or name or email alone.
    """

    name: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=255)
    password: str | None = Field(None, max_length=72)

    @field_validator("name", "email")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class LoginResponse(BaseModel):
    """Successful login."""

    status: Literal["success"] = "success"
    token: str
    data: ChildData
