from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from .. import schemas
from ..auth import CurrentUser
from ..errors import AuthenticationFailedError, ServiceError
from ..services import auth_service

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _http_error(exc: ServiceError) -> HTTPException:
    headers = None
    if isinstance(exc, AuthenticationFailedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(status_code=exc.status_code, detail=exc.detail, headers=headers)


@router.post("/login", response_model=schemas.AuthResponse)
async def login(payload: schemas.LoginRequest) -> schemas.AuthResponse:
    try:
        return await auth_service.login(payload.email, payload.password)
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.post(
    "/register",
    response_model=schemas.AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(payload: schemas.RegisterRequest) -> schemas.AuthResponse:
    try:
        return await auth_service.register(payload)
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.get("/me", response_model=schemas.UserPublic)
async def me(current: CurrentUser) -> schemas.UserPublic:
    return auth_service.to_user_public(current)
