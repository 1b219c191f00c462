from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from psycopg import errors as pg_errors

from coursehub.auth import hash_password

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)

_course_ids = itertools.count(1)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def make_course(**overrides: Any) -> dict[str, Any]:
    course_id = overrides.pop("id", None) or next(_course_ids)
    category_id = overrides.pop("category_id", 1)
    row: dict[str, Any] = {
        "id": course_id,
        "title": f"Course {course_id}",
        "description": "A course",
        "short_description": "Short",
        "image_url": None,
        "video_url": None,
        "price": Decimal("49.99"),
        "discount_price": None,
        "duration": 120,
        "level": "BEGINNER",
        "language": "English",
        "is_published": True,
        "is_featured": False,
        "rating": Decimal("4.20"),
        "review_count": 10,
        "enrollment_count": 100,
        "category_id": category_id,
        "instructor_id": None,
        "created_at": BASE_TIME + timedelta(days=course_id),
        "updated_at": None,
        "category_name": f"Category {category_id}",
        "category_description": "",
        "category_image_url": None,
    }
    row.update(overrides)
    return row


class FakeCatalog:
    """In-memory stand-in for the course and category repositories."""

    def __init__(self) -> None:
        self.courses: list[dict[str, Any]] = []
        self.categories: list[dict[str, Any]] = [
            {"id": 1, "name": "Programming", "description": "Code", "image_url": None, "is_active": True},
            {"id": 2, "name": "Web Development", "description": "Web", "image_url": None, "is_active": True},
            {"id": 3, "name": "Data Science", "description": "Data", "image_url": None, "is_active": True},
        ]
        self.sections: dict[int, list[dict[str, Any]]] = {}
        self.reviews: dict[int, list[dict[str, Any]]] = {}
        self.specs_seen: list[Any] = []

    def add(self, **overrides: Any) -> dict[str, Any]:
        course = make_course(**overrides)
        self.courses.append(course)
        return course

    async def list_courses(self, spec):
        self.specs_seen.append(spec)
        rows = [dict(course) for course in self.courses if spec.matches(course)]
        _, _, order_by = spec.to_sql()
        if order_by and "created_at DESC" in order_by:
            rows.sort(key=lambda row: row["created_at"], reverse=True)
        return rows

    async def find_course(self, spec):
        rows = await self.list_courses(spec)
        return rows[0] if rows else None

    async def list_all_courses(self):
        return [dict(course) for course in self.courses]

    async def list_course_sections(self, course_id):
        return self.sections.get(course_id, [])

    async def list_course_reviews(self, course_id):
        return self.reviews.get(course_id, [])

    async def list_all_categories(self):
        return [dict(category) for category in self.categories]

    def install(self, monkeypatch) -> "FakeCatalog":
        for name in (
            "list_courses",
            "find_course",
            "list_all_courses",
            "list_course_sections",
            "list_course_reviews",
        ):
            monkeypatch.setattr(f"coursehub.repositories.courses.{name}", getattr(self, name))
        monkeypatch.setattr(
            "coursehub.repositories.categories.list_all_categories",
            self.list_all_categories,
        )
        return self


class FakeUserStore:
    """In-memory stand-in for the user repository, unique on email."""

    def __init__(self) -> None:
        self.users: dict[int, dict[str, Any]] = {}
        self._ids = itertools.count(1)

    def add(self, *, email: str, password: str = "Passw0rd!", **overrides: Any) -> dict[str, Any]:
        user_id = next(self._ids)
        row = {
            "id": user_id,
            "email": email,
            "password_hash": hash_password(password),
            "first_name": "Ada",
            "last_name": "Lovelace",
            "profile_image_url": None,
            "date_of_birth": None,
            "bio": None,
            "is_active": True,
            "created_at": BASE_TIME,
            "updated_at": None,
        }
        row.update(overrides)
        self.users[user_id] = row
        return row

    async def get_user_by_email(self, email):
        for row in self.users.values():
            if row["email"].lower() == email.lower():
                return dict(row)
        return None

    async def get_user_by_id(self, user_id):
        row = self.users.get(user_id)
        return dict(row) if row else None

    async def insert_user(self, *, email, password_hash, first_name, last_name, created_at, is_active=True):
        if await self.get_user_by_email(email):
            raise pg_errors.UniqueViolation("duplicate key value violates unique constraint")
        user_id = next(self._ids)
        row = {
            "id": user_id,
            "email": email,
            "password_hash": password_hash,
            "first_name": first_name,
            "last_name": last_name,
            "profile_image_url": None,
            "date_of_birth": None,
            "bio": None,
            "is_active": is_active,
            "created_at": created_at,
            "updated_at": None,
        }
        self.users[user_id] = row
        return dict(row)

    async def update_user(self, user_id, **fields):
        row = self.users.get(user_id)
        if not row:
            return None
        row.update(fields)
        return dict(row)

    def install(self, monkeypatch) -> "FakeUserStore":
        for name in ("get_user_by_email", "get_user_by_id", "insert_user", "update_user"):
            monkeypatch.setattr(f"coursehub.repositories.users.{name}", getattr(self, name))
        return self
