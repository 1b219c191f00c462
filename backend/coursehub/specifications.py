"""Course query descriptors shared by the store and the in-memory pipeline.

A :class:`CourseSpec` names one base selection over the course table. The
repository turns it into SQL with :meth:`CourseSpec.to_sql`; fakes and
callers holding rows already can evaluate the same predicate with
:meth:`CourseSpec.matches`. Every kind implies ``is_published``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class CourseSpecKind(str, Enum):
    ALL = "all"
    BY_SEARCH = "by_search"
    BY_CATEGORY = "by_category"
    BY_LEVEL = "by_level"
    BY_ID_DETAIL = "by_id_detail"
    FEATURED = "featured"


@dataclass(frozen=True)
class CourseSpec:
    kind: CourseSpecKind
    value: Any = None

    def to_sql(self, alias: str = "c") -> tuple[str, list[Any], str | None]:
        """Return ``(where_clause, params, order_by)`` for this spec."""

        prefix = f"{alias}." if alias else ""
        clauses = [f"{prefix}is_published"]
        params: list[Any] = []
        order_by: str | None = None

        if self.kind is CourseSpecKind.BY_SEARCH:
            pattern = f"%{_escape_like(str(self.value))}%"
            clauses.append(
                f"({prefix}title ILIKE %s OR {prefix}description ILIKE %s"
                f" OR {prefix}short_description ILIKE %s)"
            )
            params.extend([pattern, pattern, pattern])
        elif self.kind is CourseSpecKind.BY_CATEGORY:
            clauses.append(f"{prefix}category_id = %s")
            params.append(int(self.value))
        elif self.kind is CourseSpecKind.BY_LEVEL:
            clauses.append(f"{prefix}level = %s")
            params.append(str(self.value))
        elif self.kind is CourseSpecKind.BY_ID_DETAIL:
            clauses.append(f"{prefix}id = %s")
            params.append(int(self.value))
        elif self.kind is CourseSpecKind.FEATURED:
            clauses.append(f"{prefix}is_featured")
            order_by = f"{prefix}created_at DESC"

        return " AND ".join(clauses), params, order_by

    def matches(self, course: Mapping[str, Any]) -> bool:
        if not course.get("is_published"):
            return False
        if self.kind is CourseSpecKind.BY_SEARCH:
            needle = str(self.value).casefold()
            return any(
                needle in str(course.get(field) or "").casefold()
                for field in ("title", "description", "short_description")
            )
        if self.kind is CourseSpecKind.BY_CATEGORY:
            return course.get("category_id") == int(self.value)
        if self.kind is CourseSpecKind.BY_LEVEL:
            return course.get("level") == self.value
        if self.kind is CourseSpecKind.BY_ID_DETAIL:
            return course.get("id") == int(self.value)
        if self.kind is CourseSpecKind.FEATURED:
            return bool(course.get("is_featured"))
        return True


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def all_published() -> CourseSpec:
    return CourseSpec(CourseSpecKind.ALL)


def by_search(term: str) -> CourseSpec:
    return CourseSpec(CourseSpecKind.BY_SEARCH, term)


def by_category(category_id: int) -> CourseSpec:
    return CourseSpec(CourseSpecKind.BY_CATEGORY, category_id)


def by_level(level: str) -> CourseSpec:
    return CourseSpec(CourseSpecKind.BY_LEVEL, level)


def by_id_detail(course_id: int) -> CourseSpec:
    return CourseSpec(CourseSpecKind.BY_ID_DETAIL, course_id)


def featured() -> CourseSpec:
    return CourseSpec(CourseSpecKind.FEATURED)
