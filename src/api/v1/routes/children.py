"""Child API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from api.dependencies.auth import CurrentChild
from api.v1.dependencies import get_child_service
from api.v1.schemas.child import (
    ChildCreatedData,
    ChildCreatedResponse,
    ChildData,
    ChildDetailResponse,
    ChildListResponse,
    ChildrenData,
    ChildResponse,
    ChildUpdate,
)
from api.v1.schemas.common import ErrorResponse
from api.v1.uploads import read_upload_files
from core.exceptions import ValidationError
from domain.entities.child import ChildDraft
from domain.services.child_service import ChildService

router = APIRouter(prefix="/children", tags=["children"])


def _parse_age(raw: str | None) -> int | None:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError("Age must be a whole number", field="age")


@router.post(
    "",
    response_model=ChildCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a child profile",
    responses={
        201: {"description": "Child created successfully"},
        400: {"model": ErrorResponse, "description": "Missing or invalid fields, or invalid image files"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
        500: {"model": ErrorResponse, "description": "Every image upload failed"},
    },
)
async def create_child(
    name: Annotated[str, Form()] = "",
    age: Annotated[str | None, Form()] = None,
    email: Annotated[str, Form()] = "",
    password: Annotated[str | None, Form()] = None,
    images: Annotated[list[UploadFile] | None, File()] = None,
    service: ChildService = Depends(get_child_service),
) -> ChildCreatedResponse:
    """
    Create a child from a multipart form.

    Up to 5 JPEG/PNG images of at most 5MB each may be attached under the
    `images` field. Empty files are skipped; the child is still created if
    some uploads fail, but not if all of them do.
    """
    files = await read_upload_files(images)
    draft = ChildDraft(name=name, age=_parse_age(age), email=email, password=password)

    child, uploaded = await service.create(draft, files)

    message = (
        "Account created without images"
        if uploaded == 0
        else f"{uploaded} image(s) uploaded successfully"
    )
    return ChildCreatedResponse(
        data=ChildCreatedData(
            child=ChildResponse.from_entity(child),
            uploaded_images=uploaded,
            message=message,
        )
    )


@router.get(
    "",
    response_model=ChildListResponse,
    summary="List all children",
)
async def list_children(
    service: ChildService = Depends(get_child_service),
) -> ChildListResponse:
    """Get every child profile."""
    children = await service.list_all()
    return ChildListResponse(
        results=len(children),
        data=ChildrenData(children=[ChildResponse.from_entity(c) for c in children]),
    )


@router.get(
    "/{child_id}",
    response_model=ChildDetailResponse,
    summary="Get a child",
    responses={
        200: {"description": "Child details"},
        404: {"model": ErrorResponse, "description": "Child not found"},
    },
)
async def get_child(
    child_id: UUID,
    service: ChildService = Depends(get_child_service),
) -> ChildDetailResponse:
    """Get a specific child by ID."""
    child = await service.get_by_id(child_id)
    return ChildDetailResponse(data=ChildData(child=ChildResponse.from_entity(child)))


@router.patch(
    "/{child_id}",
    response_model=ChildDetailResponse,
    summary="Update a child",
    responses={
        200: {"description": "Child updated successfully"},
        400: {"model": ErrorResponse, "description": "Invalid name or age"},
        401: {"model": ErrorResponse, "description": "Not logged in"},
        404: {"model": ErrorResponse, "description": "Child not found"},
    },
)
async def update_child(
    child_id: UUID,
    body: ChildUpdate,
    current: CurrentChild,
    service: ChildService = Depends(get_child_service),
) -> ChildDetailResponse:
    """Update a child's name and/or age. Requires a bearer token."""
    child = await service.update(child_id, name=body.name, age=body.age)
    return ChildDetailResponse(data=ChildData(child=ChildResponse.from_entity(child)))


@router.delete(
    "/{child_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a child",
    responses={
        204: {"description": "Child deleted successfully"},
        401: {"model": ErrorResponse, "description": "Not logged in"},
        404: {"model": ErrorResponse, "description": "Child not found"},
    },
)
async def delete_child(
    child_id: UUID,
    current: CurrentChild,
    service: ChildService = Depends(get_child_service),
) -> None:
    """Delete a child and, best effort, its stored images. Requires a bearer token."""
    await service.delete(child_id)
    return None
