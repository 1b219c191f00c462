from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from .. import schemas
from ..errors import UnauthorizedError
from ..repositories import users as users_repo

logger = logging.getLogger(__name__)


def to_profile(row: Mapping[str, Any]) -> schemas.Profile:
    return schemas.Profile(
        id=str(row["id"]),
        first_name=row.get("first_name") or "",
        last_name=row.get("last_name") or "",
        email=row["email"],
        profile_image_url=row.get("profile_image_url"),
        date_of_birth=row.get("date_of_birth"),
        bio=row.get("bio"),
        created_at=row["created_at"],
        updated_at=row.get("updated_at"),
    )


async def get_profile(user_id: int) -> schemas.Profile | None:
    row = await users_repo.get_user_by_id(user_id)
    if not row:
        return None
    return to_profile(row)


async def update_profile(
    user_id: int,
    payload: schemas.ProfileUpdateRequest,
) -> schemas.Profile:
    """Overwrite the caller's editable profile fields.

    First and last name are always taken from the request, empty strings
    included. Image, date of birth and bio keep their stored value unless
    the request body carries them.
    """

    row = await users_repo.get_user_by_id(user_id)
    if not row:
        raise UnauthorizedError("User not found")

    provided = payload.model_fields_set

    def _pick(field: str) -> Any:
        if field in provided:
            return getattr(payload, field)
        return row.get(field)

    updated = await users_repo.update_user(
        user_id,
        first_name=payload.first_name,
        last_name=payload.last_name,
        profile_image_url=_pick("profile_image_url"),
        date_of_birth=_pick("date_of_birth"),
        bio=_pick("bio"),
        updated_at=datetime.now(timezone.utc),
    )
    if not updated:
        # Row vanished between the read and the write.
        raise UnauthorizedError("User not found")

    logger.info("Profile updated", extra={"target_user_id": user_id})
    return to_profile(updated)
