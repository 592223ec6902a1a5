"""Auth API routes."""

from fastapi import APIRouter, Depends

from api.v1.dependencies import get_auth_service
from api.v1.schemas.auth import LoginRequest, LoginResponse
from api.v1.schemas.child import ChildData, ChildResponse
from api.v1.schemas.common import ErrorResponse
from domain.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in as a child",
    responses={
        200: {"description": "Token issued"},
        400: {"model": ErrorResponse, "description": "Missing credentials"},
        401: {"model": ErrorResponse, "description": "Invalid credentials or child not registered"},
    },
)
async def login(
    body: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """
    Exchange a name or email (plus a password, under the password policy)
    for a bearer token.
    """
    token, child = await service.login(
        name=body.name,
        email=body.email,
        password=body.password,
    )
    return LoginResponse(
        token=token,
        data=ChildData(child=ChildResponse.from_entity(child)),
    )
