from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from psycopg import errors as pg_errors

from .. import metrics, schemas
from ..auth import burn_password_check, hash_password, token_issuer, verify_password
from ..errors import AuthenticationFailedError, ValidationFailedError
from ..repositories import users as users_repo
from ..tokens import TokenIssuer

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

_INVALID_CREDENTIALS = "Invalid email or password"
_EMAIL_TAKEN = "User with this email already exists"


def to_user_public(row: Mapping[str, Any]) -> schemas.UserPublic:
    return schemas.UserPublic(
        id=str(row["id"]),
        email=row["email"],
        first_name=row.get("first_name") or "",
        last_name=row.get("last_name") or "",
        profile_image_url=row.get("profile_image_url"),
    )


def _auth_response(
    user: Mapping[str, Any], issuer: TokenIssuer
) -> schemas.AuthResponse:
    issued = issuer.issue(user)
    return schemas.AuthResponse(
        token=issued.token,
        refresh_token=issued.refresh_token,
        expires_at=issued.expires_at,
        user=to_user_public(user),
    )


async def login(
    email: str,
    password: str,
    *,
    issuer: TokenIssuer | None = None,
) -> schemas.AuthResponse:
    user = await users_repo.get_user_by_email(email)
    if not user or not user.get("is_active"):
        burn_password_check()
        metrics.auth_login_total.labels(outcome="rejected").inc()
        logger.warning("Login rejected: unknown or inactive account")
        raise AuthenticationFailedError(_INVALID_CREDENTIALS)

    if not verify_password(password, user.get("password_hash") or ""):
        metrics.auth_login_total.labels(outcome="rejected").inc()
        logger.warning("Login rejected: bad password", extra={"target_user_id": user["id"]})
        raise AuthenticationFailedError(_INVALID_CREDENTIALS)

    metrics.auth_login_total.labels(outcome="success").inc()
    logger.info("User logged in", extra={"target_user_id": user["id"]})
    return _auth_response(user, issuer or token_issuer)


async def register(
    payload: schemas.RegisterRequest,
    *,
    issuer: TokenIssuer | None = None,
) -> schemas.AuthResponse:
    if payload.password != payload.confirm_password:
        metrics.auth_register_total.labels(outcome="invalid").inc()
        raise ValidationFailedError("Password and confirm password do not match")

    if len(payload.password) < MIN_PASSWORD_LENGTH:
        metrics.auth_register_total.labels(outcome="invalid").inc()
        raise ValidationFailedError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )

    existing = await users_repo.get_user_by_email(payload.email)
    if existing and existing.get("is_active"):
        metrics.auth_register_total.labels(outcome="duplicate").inc()
        raise ValidationFailedError(_EMAIL_TAKEN)

    try:
        user = await users_repo.insert_user(
            email=payload.email,
            password_hash=hash_password(payload.password),
            first_name=payload.first_name,
            last_name=payload.last_name,
            is_active=True,
            created_at=datetime.now(timezone.utc),
        )
    except pg_errors.UniqueViolation as exc:
        metrics.auth_register_total.labels(outcome="duplicate").inc()
        raise ValidationFailedError(_EMAIL_TAKEN) from exc

    metrics.auth_register_total.labels(outcome="success").inc()
    logger.info("User registered", extra={"target_user_id": user["id"]})
    return _auth_response(user, issuer or token_issuer)
