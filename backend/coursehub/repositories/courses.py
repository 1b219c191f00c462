from __future__ import annotations

from typing import Any

from ..db import get_conn
from ..specifications import CourseSpec

CourseRow = dict[str, Any]
SectionRow = dict[str, Any]
ReviewRow = dict[str, Any]

_COURSE_COLUMNS = """
        id,
        title,
        description,
        short_description,
        image_url,
        video_url,
        price,
        discount_price,
        duration,
        level,
        language,
        is_published,
        is_featured,
        rating,
        review_count,
        enrollment_count,
        category_id,
        instructor_id,
        created_at,
        updated_at
    """

_COURSE_COLUMNS_WITH_ALIAS = _COURSE_COLUMNS.replace(
    "\n        ",
    "\n        c.",
)

_COURSE_SELECT = f"""
    SELECT {_COURSE_COLUMNS_WITH_ALIAS},
           cat.name AS category_name,
           cat.description AS category_description,
           cat.image_url AS category_image_url,
           u.email AS instructor_email,
           u.first_name AS instructor_first_name,
           u.last_name AS instructor_last_name,
           u.profile_image_url AS instructor_profile_image_url
      FROM app.courses AS c
      JOIN app.categories AS cat ON cat.id = c.category_id
      LEFT JOIN app.users AS u ON u.id = c.instructor_id
"""


async def list_courses(spec: CourseSpec) -> list[CourseRow]:
    where_clause, params, order_by = spec.to_sql("c")
    query = f"""
        {_COURSE_SELECT}
         WHERE {where_clause}
         ORDER BY {order_by or "c.id"}
    """
    async with get_conn() as cur:
        await cur.execute(query, params)
        rows = await cur.fetchall()
    return [dict(row) for row in rows]


async def find_course(spec: CourseSpec) -> CourseRow | None:
    where_clause, params, order_by = spec.to_sql("c")
    query = f"""
        {_COURSE_SELECT}
         WHERE {where_clause}
         ORDER BY {order_by or "c.id"}
         LIMIT 1
    """
    async with get_conn() as cur:
        await cur.execute(query, params)
        row = await cur.fetchone()
    return dict(row) if row else None


async def list_all_courses() -> list[CourseRow]:
    """Full-table read, published or not. Callers filter what they expose."""

    async with get_conn() as cur:
        await cur.execute(
            f"""
            SELECT {_COURSE_COLUMNS}
              FROM app.courses
             ORDER BY id
            """
        )
        rows = await cur.fetchall()
    return [dict(row) for row in rows]


async def list_course_sections(course_id: int) -> list[SectionRow]:
    """Sections with their lessons and lesson resources nested in order."""

    async with get_conn() as cur:
        await cur.execute(
            """
            SELECT id, course_id, title, description, "order"
              FROM app.course_sections
             WHERE course_id = %s
             ORDER BY "order", id
            """,
            (course_id,),
        )
        sections = [dict(row) for row in await cur.fetchall()]
        if not sections:
            return []

        section_ids = [section["id"] for section in sections]
        await cur.execute(
            """
            SELECT id, section_id, title, description, video_url, content,
                   duration, "order", is_free
              FROM app.course_lessons
             WHERE section_id = ANY(%s)
             ORDER BY "order", id
            """,
            (section_ids,),
        )
        lessons = [dict(row) for row in await cur.fetchall()]

        resources: list[dict[str, Any]] = []
        lesson_ids = [lesson["id"] for lesson in lessons]
        if lesson_ids:
            await cur.execute(
                """
                SELECT id, lesson_id, title, description, file_url, file_type,
                       file_size, is_free
                  FROM app.course_resources
                 WHERE lesson_id = ANY(%s)
                 ORDER BY id
                """,
                (lesson_ids,),
            )
            resources = [dict(row) for row in await cur.fetchall()]

    resources_by_lesson: dict[int, list[dict[str, Any]]] = {}
    for resource in resources:
        resources_by_lesson.setdefault(resource["lesson_id"], []).append(resource)

    lessons_by_section: dict[int, list[dict[str, Any]]] = {}
    for lesson in lessons:
        lesson["resources"] = resources_by_lesson.get(lesson["id"], [])
        lessons_by_section.setdefault(lesson["section_id"], []).append(lesson)

    for section in sections:
        section["lessons"] = lessons_by_section.get(section["id"], [])
    return sections


async def list_course_reviews(course_id: int) -> list[ReviewRow]:
    async with get_conn() as cur:
        await cur.execute(
            """
            SELECT r.id,
                   r.course_id,
                   r.user_id,
                   r.rating,
                   r.comment,
                   r.created_at,
                   u.email AS user_email,
                   u.first_name AS user_first_name,
                   u.last_name AS user_last_name,
                   u.profile_image_url AS user_profile_image_url
              FROM app.course_reviews AS r
              JOIN app.users AS u ON u.id = r.user_id
             WHERE r.course_id = %s
             ORDER BY r.created_at DESC, r.id DESC
            """,
            (course_id,),
        )
        rows = await cur.fetchall()
    return [dict(row) for row in rows]
