"""In-memory stages of the course listing query.

The store applies one base :class:`~coursehub.specifications.CourseSpec`;
everything after that narrows, orders and slices the returned rows here.
Malformed filter values are dropped silently: query strings from the
catalogue frontend are noisy and a bad entry must never fail the listing.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Iterable, Mapping, Sequence

from .. import schemas, specifications
from ..specifications import CourseSpec

CourseRow = Mapping[str, Any]

DURATION_BUCKETS: dict[str, Callable[[int], bool]] = {
    "short": lambda minutes: minutes <= 60,
    "medium": lambda minutes: 60 < minutes <= 180,
    "long": lambda minutes: 180 < minutes <= 360,
    "extra-long": lambda minutes: minutes > 360,
}

DEFAULT_SORT = "most-popular"

# key -> (field, descending)
_FIXED_SORTS: dict[str, tuple[str, bool]] = {
    "most-popular": ("enrollment_count", True),
    "highest-rated": ("rating", True),
    "newest": ("created_at", True),
    "price-low-to-high": ("price", False),
    "price-high-to-low": ("price", True),
}

_DIRECTIONAL_SORTS: dict[str, str] = {
    "title": "title",
    "price": "price",
    "rating": "rating",
    "enrollmentcount": "enrollment_count",
}


def select_base_spec(request: schemas.CourseListRequest) -> CourseSpec:
    """Pick the single store-side selection: search > category > level > all."""

    if request.search:
        return specifications.by_search(request.search)
    if request.category_id is not None:
        return specifications.by_category(request.category_id)
    if request.level:
        return specifications.by_level(request.level)
    return specifications.all_published()


def _parse_int(value: str) -> int | None:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _parse_float(value: str) -> float | None:
    try:
        parsed = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    # float() accepts "nan" and "inf"; neither is a usable threshold.
    return parsed if math.isfinite(parsed) else None


def filter_by_categories(
    courses: list[CourseRow], category_values: Sequence[str] | None
) -> list[CourseRow]:
    if not category_values:
        return courses
    wanted = {parsed for parsed in map(_parse_int, category_values) if parsed and parsed > 0}
    if not wanted:
        return courses
    return [course for course in courses if course.get("category_id") in wanted]


def filter_by_min_rating(
    courses: list[CourseRow], rating_values: Sequence[str] | None
) -> list[CourseRow]:
    if not rating_values:
        return courses
    threshold = max((_parse_float(value) or 0.0) for value in rating_values)
    if threshold <= 0:
        return courses
    return [course for course in courses if float(course.get("rating") or 0) >= threshold]


def filter_by_duration(
    courses: list[CourseRow], duration_values: Sequence[str] | None
) -> list[CourseRow]:
    """Union the courses of every recognised bucket tag.

    When no tag is recognised, or no course falls in any named bucket, the
    working set is returned unchanged rather than emptied.
    """

    if not duration_values:
        return courses

    matched: list[CourseRow] = []
    for tag in duration_values:
        in_bucket = DURATION_BUCKETS.get(str(tag).strip().lower())
        if in_bucket is None:
            continue
        matched.extend(course for course in courses if in_bucket(int(course.get("duration") or 0)))

    if not matched:
        return courses
    return _dedupe(matched)


def _dedupe(courses: Iterable[CourseRow]) -> list[CourseRow]:
    seen: set[Any] = set()
    unique: list[CourseRow] = []
    for course in courses:
        key = course.get("id", id(course))
        if key in seen:
            continue
        seen.add(key)
        unique.append(course)
    return unique


def filter_by_levels(
    courses: list[CourseRow], level_values: Sequence[str] | None
) -> list[CourseRow]:
    if not level_values:
        return courses
    wanted = {str(level).casefold() for level in level_values}
    return [course for course in courses if str(course.get("level") or "").casefold() in wanted]


def apply_scalar_filters(
    courses: list[CourseRow],
    *,
    language: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
) -> list[CourseRow]:
    if language is not None:
        courses = [course for course in courses if course.get("language") == language]
    if min_price is not None:
        courses = [course for course in courses if course.get("price") is not None and course["price"] >= min_price]
    if max_price is not None:
        courses = [course for course in courses if course.get("price") is not None and course["price"] <= max_price]
    return courses


def apply_filters(
    courses: list[CourseRow], request: schemas.CourseListRequest
) -> list[CourseRow]:
    """Run the frontend multi-select filters, then the legacy scalar ones."""

    courses = filter_by_categories(courses, request.category)
    courses = filter_by_min_rating(courses, request.ratings)
    courses = filter_by_duration(courses, request.duration)
    courses = filter_by_levels(courses, request.level_filter)
    return apply_scalar_filters(
        courses,
        language=request.language,
        min_price=request.min_price,
        max_price=request.max_price,
    )


def _sort_key(field: str) -> Callable[[CourseRow], Any]:
    return lambda course: course.get(field)


def sort_courses(
    courses: list[CourseRow],
    sort_by: str | None,
    sort_direction: str | None = "desc",
) -> list[CourseRow]:
    # sorted() is stable and reverse=True keeps equal keys in input order.
    key = (sort_by or "").strip().lower()
    if key in _DIRECTIONAL_SORTS:
        descending = (sort_direction or "desc").strip().lower() == "desc"
        return sorted(courses, key=_sort_key(_DIRECTIONAL_SORTS[key]), reverse=descending)

    field, descending = _FIXED_SORTS.get(key, _FIXED_SORTS[DEFAULT_SORT])
    return sorted(courses, key=_sort_key(field), reverse=descending)


def paginate(
    courses: Sequence[CourseRow], page: int, page_size: int
) -> tuple[list[CourseRow], int, int]:
    """Return ``(page_items, clamped_page, total_count)``."""

    page = max(0, page)
    start = page * page_size
    return list(courses[start : start + page_size]), page, len(courses)
