from __future__ import annotations

from fastapi import APIRouter

from .. import schemas
from ..services import courses_service

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=list[schemas.Category])
async def list_categories():
    return await courses_service.list_categories()
