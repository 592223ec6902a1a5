"""Pydantic schemas for Child API."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.child import Child


class ChildUpdate(BaseModel):
    """Schema for updating a Child.

    Only name and age may change. Range checks happen in the domain layer.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(None, max_length=255)
    age: int | None = None


class ChildResponse(BaseModel):
    """Outward representation of a Child. Never includes a password."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Sara",
                "age": 7,
                "email": "sara@example.com",
                "images": [
                    "https://res.cloudinary.com/demo/image/upload/v1/children_profiles/abc123.jpg"
                ],
                "created_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    name: str
    age: int
    email: str
    images: list[str] = Field(default_factory=list)
    created_at: datetime

    @classmethod
    def from_entity(cls, child: Child) -> "ChildResponse":
        return cls(
            id=child.id,
            name=child.name,
            age=child.age,
            email=child.email,
            images=list(child.images),
            created_at=child.created_at,
        )


class ChildData(BaseModel):
    child: ChildResponse


class ChildDetailResponse(BaseModel):
    """Schema for a single Child."""

    status: Literal["success"] = "success"
    data: ChildData


class ChildCreatedData(BaseModel):
    child: ChildResponse
    uploaded_images: int
    message: str


class ChildCreatedResponse(BaseModel):
    """Schema for a newly created Child."""

    status: Literal["success"] = "success"
    data: ChildCreatedData


class ChildrenData(BaseModel):
    children: list[ChildResponse]


class ChildListResponse(BaseModel):
    """Schema for list of Children."""

    status: Literal["success"] = "success"
    results: int
    data: ChildrenData
