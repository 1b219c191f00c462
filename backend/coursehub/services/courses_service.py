from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from .. import metrics, schemas, specifications
from ..errors import NotFoundError
from ..logging_context import tag_course_query
from ..repositories import categories as categories_repo
from ..repositories import courses as courses_repo
from . import course_query

logger = logging.getLogger(__name__)

CoursePayload = Mapping[str, Any]

RATING_OPTIONS: tuple[tuple[str, str], ...] = (
    ("4.5 & up", "4.5"),
    ("4.0 & up", "4.0"),
    ("3.5 & up", "3.5"),
    ("3.0 & up", "3.0"),
)

DURATION_OPTIONS: tuple[tuple[str, str], ...] = (
    ("0-1 Hour", "short"),
    ("1-3 Hours", "medium"),
    ("3-6 Hours", "long"),
    ("6+ Hours", "extra-long"),
)

LEVEL_OPTIONS: tuple[tuple[str, str], ...] = tuple(
    (level.value.replace("_", " ").title(), level.value.lower()) for level in schemas.CourseLevel
)

PRICE_OPTIONS: tuple[tuple[str, str], ...] = (
    ("Paid", "price-paid"),
    ("Free", "price-free"),
)


def _instructor(row: CoursePayload) -> schemas.UserPublic | None:
    instructor_id = row.get("instructor_id")
    if instructor_id is None:
        return None
    return schemas.UserPublic(
        id=str(instructor_id),
        email=row.get("instructor_email") or "",
        first_name=row.get("instructor_first_name") or "",
        last_name=row.get("instructor_last_name") or "",
        profile_image_url=row.get("instructor_profile_image_url"),
    )


def _summary_fields(row: CoursePayload) -> dict[str, Any]:
    return {
        "id": row["id"],
        "title": row["title"],
        "description": row.get("description") or "",
        "short_description": row.get("short_description") or "",
        "image_url": row.get("image_url"),
        "video_url": row.get("video_url"),
        "price": row["price"],
        "discount_price": row.get("discount_price"),
        "duration": row.get("duration") or 0,
        "level": row.get("level") or "",
        "language": row.get("language") or "",
        "is_featured": bool(row.get("is_featured")),
        "rating": row.get("rating") or 0,
        "review_count": row.get("review_count") or 0,
        "enrollment_count": row.get("enrollment_count") or 0,
        "created_at": row["created_at"],
        "category": schemas.Category(
            id=row["category_id"],
            name=row.get("category_name") or "",
            description=row.get("category_description") or "",
            image_url=row.get("category_image_url"),
        ),
        "instructor": _instructor(row),
    }


def to_course_summary(row: CoursePayload) -> schemas.CourseSummary:
    return schemas.CourseSummary(**_summary_fields(row))


def _to_review(row: CoursePayload) -> schemas.CourseReview:
    return schemas.CourseReview(
        id=row["id"],
        rating=row["rating"],
        comment=row.get("comment") or "",
        created_at=row["created_at"],
        user=schemas.UserPublic(
            id=str(row["user_id"]),
            email=row.get("user_email") or "",
            first_name=row.get("user_first_name") or "",
            last_name=row.get("user_last_name") or "",
            profile_image_url=row.get("user_profile_image_url"),
        ),
    )


def to_course_detail(
    row: CoursePayload,
    sections: Sequence[CoursePayload],
    reviews: Sequence[CoursePayload],
) -> schemas.CourseDetail:
    return schemas.CourseDetail(
        **_summary_fields(row),
        sections=[schemas.CourseSection.model_validate(section) for section in sections],
        reviews=[_to_review(review) for review in reviews],
    )


def to_category(row: CoursePayload) -> schemas.Category:
    return schemas.Category(
        id=row["id"],
        name=row["name"],
        description=row.get("description") or "",
        image_url=row.get("image_url"),
    )


async def list_courses(
    request: schemas.CourseListRequest,
) -> schemas.PagedResponse[schemas.CourseSummary]:
    spec = course_query.select_base_spec(request)
    tag_course_query(spec.kind.value)
    rows = await courses_repo.list_courses(spec)

    filtered = course_query.apply_filters(rows, request)
    ordered = course_query.sort_courses(filtered, request.sort_by, request.sort_direction)
    page_rows, page, total_count = course_query.paginate(ordered, request.page, request.page_size)

    metrics.course_list_requests_total.inc()
    logger.debug(
        "Course listing served",
        extra={
            "base_count": len(rows),
            "total_count": total_count,
            "page": page,
        },
    )
    return schemas.PagedResponse[schemas.CourseSummary](
        data=[to_course_summary(row) for row in page_rows],
        page=page,
        page_size=request.page_size,
        total_count=total_count,
    )


async def get_course(course_id: int) -> schemas.CourseDetail:
    row = await courses_repo.find_course(specifications.by_id_detail(course_id))
    if not row:
        raise NotFoundError("Course not found")
    sections = await courses_repo.list_course_sections(course_id)
    reviews = await courses_repo.list_course_reviews(course_id)
    return to_course_detail(row, sections, reviews)


async def list_featured_courses() -> list[schemas.CourseSummary]:
    rows = await courses_repo.list_courses(specifications.featured())
    return [to_course_summary(row) for row in rows]


async def list_categories() -> list[schemas.Category]:
    rows = await categories_repo.list_all_categories()
    return [to_category(row) for row in rows]


def _bucket(label: str, value: str, count: int | None = None) -> schemas.FilterBucket:
    return schemas.FilterBucket(label=label, value=value, is_selected=False, count=count)


async def list_filters() -> list[schemas.FilterOption]:
    """Facet metadata for the catalogue sidebar, with published-course counts."""

    all_courses = await courses_repo.list_all_courses()
    all_categories = await categories_repo.list_all_categories()
    published = [course for course in all_courses if course.get("is_published")]

    per_category: dict[Any, int] = {}
    for course in published:
        per_category[course.get("category_id")] = per_category.get(course.get("category_id"), 0) + 1

    category_options = [
        _bucket(category["name"], str(category["id"]), per_category.get(category["id"], 0))
        for category in all_categories
    ]

    rating_options = [
        _bucket(
            label,
            value,
            len(course_query.filter_by_min_rating(published, [value])),
        )
        for label, value in RATING_OPTIONS
    ]

    duration_options = []
    for label, value in DURATION_OPTIONS:
        in_bucket = course_query.DURATION_BUCKETS[value]
        count = sum(1 for course in published if in_bucket(int(course.get("duration") or 0)))
        duration_options.append(_bucket(label, value, count))

    level_options = [
        _bucket(
            label,
            value,
            len(course_query.filter_by_levels(published, [value])),
        )
        for label, value in LEVEL_OPTIONS
    ]

    free_count = sum(1 for course in published if not course.get("price"))
    price_counts = {"price-paid": len(published) - free_count, "price-free": free_count}
    price_options = [
        _bucket(label, value, price_counts[value]) for label, value in PRICE_OPTIONS
    ]

    return [
        schemas.FilterOption(label="Category", key="category", options=category_options),
        schemas.FilterOption(label="Ratings", key="ratings", options=rating_options),
        schemas.FilterOption(label="Video Duration", key="duration", options=duration_options),
        schemas.FilterOption(label="Level", key="level_filter", options=level_options),
        schemas.FilterOption(label="Price", key="price", options=price_options),
    ]
