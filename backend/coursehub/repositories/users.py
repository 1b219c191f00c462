from __future__ import annotations

from datetime import date, datetime
from typing import Any

from ..db import get_conn

UserRow = dict[str, Any]

USER_COLUMNS = """
    id, email, password_hash, first_name, last_name,
    profile_image_url, date_of_birth, bio, is_active,
    created_at, updated_at
"""


async def get_user_by_email(email: str) -> UserRow | None:
    async with get_conn() as cur:
        await cur.execute(
            """
            SELECT {cols}
              FROM app.users
             WHERE lower(email) = lower(%s)
             LIMIT 1
            """.format(cols=USER_COLUMNS),
            (email,),
        )
        row = await cur.fetchone()
        return dict(row) if row else None


async def get_user_by_id(user_id: int) -> UserRow | None:
    async with get_conn() as cur:
        await cur.execute(
            """
            SELECT {cols}
              FROM app.users
             WHERE id = %s
             LIMIT 1
            """.format(cols=USER_COLUMNS),
            (user_id,),
        )
        row = await cur.fetchone()
        return dict(row) if row else None


async def insert_user(
    *,
    email: str,
    password_hash: str,
    first_name: str,
    last_name: str,
    created_at: datetime,
    is_active: bool = True,
) -> UserRow:
    """Insert a user and commit. Raises ``psycopg.errors.UniqueViolation``
    when the email is already taken."""

    async with get_conn() as cur:
        await cur.execute(
            """
            INSERT INTO app.users (
                email,
                password_hash,
                first_name,
                last_name,
                is_active,
                created_at
            )
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {cols}
            """.format(cols=USER_COLUMNS),
            (email, password_hash, first_name, last_name, is_active, created_at),
        )
        row = await cur.fetchone()
    return dict(row)


async def update_user(
    user_id: int,
    *,
    first_name: str,
    last_name: str,
    profile_image_url: str | None,
    date_of_birth: date | None,
    bio: str | None,
    updated_at: datetime,
) -> UserRow | None:
    async with get_conn() as cur:
        await cur.execute(
            """
            UPDATE app.users
               SET first_name = %s,
                   last_name = %s,
                   profile_image_url = %s,
                   date_of_birth = %s,
                   bio = %s,
                   updated_at = %s
             WHERE id = %s
            RETURNING {cols}
            """.format(cols=USER_COLUMNS),
            (
                first_name,
                last_name,
                profile_image_url,
                date_of_birth,
                bio,
                updated_at,
                user_id,
            ),
        )
        row = await cur.fetchone()
    return dict(row) if row else None
