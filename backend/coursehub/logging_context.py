from __future__ import annotations

import dataclasses
import logging
from contextvars import ContextVar, Token
from dataclasses import dataclass

import sentry_sdk


@dataclass(frozen=True)
class RequestLogContext:
    """What every log line emitted while serving a request is tagged with."""

    request_id: str | None = None
    method: str | None = None
    path: str | None = None
    user_id: str | None = None
    course_query: str | None = None


REQUEST_FIELDS = tuple(field.name for field in dataclasses.fields(RequestLogContext))

_EMPTY = RequestLogContext()
_log_context: ContextVar[RequestLogContext] = ContextVar("coursehub_log_context", default=_EMPTY)


class RequestContextFilter(logging.Filter):
    """Copy the current request context onto each record as attributes."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = current_log_context()
        for name in REQUEST_FIELDS:
            setattr(record, name, getattr(context, name))
        return True


def current_log_context() -> RequestLogContext:
    return _log_context.get()


def push_request_context(request_id: str, *, method: str, path: str) -> Token:
    return _log_context.set(RequestLogContext(request_id=request_id, method=method, path=path))


def pop_request_context(token: Token) -> None:
    _log_context.reset(token)


def _update(**changes: str | None) -> None:
    # Outside the middleware (tests, scripts) this starts a fresh context.
    _log_context.set(dataclasses.replace(_log_context.get(), **changes))


def set_user_context(user_id: str | None) -> None:
    _update(user_id=user_id)
    sentry_sdk.set_user({"id": user_id} if user_id else None)


def tag_course_query(kind: str) -> None:
    """Record which base selection served the current course listing."""

    _update(course_query=kind)
    sentry_sdk.set_tag("course_query", kind)
