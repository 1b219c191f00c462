from __future__ import annotations

from typing import Any

from ..db import get_conn

CategoryRow = dict[str, Any]


async def list_all_categories() -> list[CategoryRow]:
    async with get_conn() as cur:
        await cur.execute(
            """
            SELECT id, name, description, image_url, is_active
              FROM app.categories
             ORDER BY id
            """
        )
        rows = await cur.fetchall()
    return [dict(row) for row in rows]
