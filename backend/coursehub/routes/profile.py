from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from .. import schemas
from ..auth import CurrentUserId
from ..errors import ServiceError, UnauthorizedError
from ..services import profile_service

router = APIRouter(prefix="/api/v1/profile", tags=["profile"])


@router.get("", response_model=schemas.Profile)
async def get_my_profile(user_id: CurrentUserId) -> schemas.Profile:
    profile = await profile_service.get_profile(user_id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


@router.put("", response_model=schemas.Profile)
async def update_my_profile(
    payload: schemas.ProfileUpdateRequest,
    user_id: CurrentUserId,
) -> schemas.Profile:
    try:
        return await profile_service.update_profile(user_id, payload)
    except UnauthorizedError as exc:
        raise HTTPException(
            status_code=exc.status_code,
            detail=exc.detail,
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
