import contextvars
import json
import logging

import pytest

from coursehub import schemas
from coursehub.logging_context import (
    RequestContextFilter,
    current_log_context,
    pop_request_context,
    push_request_context,
    set_user_context,
)
from coursehub.logging_utils import JSONFormatter
from coursehub.services import courses_service


def _render(record: logging.LogRecord) -> dict:
    RequestContextFilter().filter(record)
    return json.loads(JSONFormatter().format(record))


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.makeLogRecord({"name": "coursehub.test", "msg": message, "levelname": "INFO"})
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def _in_fresh_context(func):
    return contextvars.Context().run(func)


def test_formatter_splits_request_fields_from_extras():
    def emit():
        push_request_context("req-1", method="GET", path="/api/v1/courses")
        set_user_context("7")
        return _render(_record("listing served", total_count=3))

    line = _in_fresh_context(emit)

    assert line["message"] == "listing served"
    assert line["logger"] == "coursehub.test"
    assert line["request"] == {
        "request_id": "req-1",
        "method": "GET",
        "path": "/api/v1/courses",
        "user_id": "7",
    }
    assert line["context"] == {"total_count": 3}


def test_formatter_omits_empty_sections_outside_requests():
    line = _in_fresh_context(lambda: _render(_record("startup")))

    assert "request" not in line
    assert "context" not in line


def test_user_context_without_middleware_starts_fresh_context():
    def tag_user():
        set_user_context("42")
        return current_log_context()

    context = _in_fresh_context(tag_user)

    assert context.user_id == "42"
    assert context.request_id is None
    assert current_log_context().user_id != "42"


@pytest.mark.anyio("asyncio")
async def test_course_listing_tags_its_base_selection(catalog):
    catalog.add(title="Python Basics")
    token = push_request_context("req-3", method="GET", path="/api/v1/courses")
    try:
        await courses_service.list_courses(
            schemas.CourseListRequest(page=0, page_size=10, search="python")
        )
        tagged = current_log_context()
    finally:
        pop_request_context(token)

    assert tagged.course_query == "by_search"
    assert tagged.path == "/api/v1/courses"
