from __future__ import annotations


class ServiceError(Exception):
    """Failure raised by a service and translated to HTTP by the routes."""

    status_code = 500

    def __init__(self, detail: str, *, status_code: int | None = None) -> None:
        super().__init__(detail)
        if status_code is not None:
            self.status_code = status_code
        self.detail = detail


class NotFoundError(ServiceError):
    status_code = 404


class AuthenticationFailedError(ServiceError):
    status_code = 401


class ValidationFailedError(ServiceError):
    status_code = 400


class UnauthorizedError(ServiceError):
    status_code = 401


__all__ = [
    "ServiceError",
    "NotFoundError",
    "AuthenticationFailedError",
    "ValidationFailedError",
    "UnauthorizedError",
]
