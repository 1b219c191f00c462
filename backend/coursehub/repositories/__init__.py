from .categories import list_all_categories
from .courses import (
    find_course,
    list_all_courses,
    list_course_reviews,
    list_course_sections,
    list_courses,
)
from .users import get_user_by_email, get_user_by_id, insert_user, update_user

__all__ = [
    "find_course",
    "get_user_by_email",
    "get_user_by_id",
    "insert_user",
    "list_all_categories",
    "list_all_courses",
    "list_course_reviews",
    "list_course_sections",
    "list_courses",
    "update_user",
]
