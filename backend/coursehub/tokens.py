from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from jose import JWTError, jwt

from .config import JwtConfig
from .errors import AuthenticationFailedError


@dataclass(frozen=True)
class IssuedTokens:
    token: str
    refresh_token: str
    expires_at: datetime


class TokenIssuer:
    """Signs session tokens for verified users and checks them on the way back in."""

    def __init__(self, config: JwtConfig) -> None:
        if not config.secret:
            raise ValueError("JWT secret must not be empty")
        self._config = config

    @property
    def lifetime(self) -> timedelta:
        return timedelta(days=self._config.expires_days)

    def create_access_token(
        self,
        user: Mapping[str, Any],
        *,
        now: datetime | None = None,
    ) -> tuple[str, datetime]:
        issued_at = now or datetime.now(timezone.utc)
        expires_at = issued_at + self.lifetime
        first_name = user.get("first_name") or ""
        last_name = user.get("last_name") or ""
        claims: dict[str, Any] = {
            "sub": str(user["id"]),
            "email": user["email"],
            "name": f"{first_name} {last_name}",
            "first_name": first_name,
            "last_name": last_name,
            "iss": self._config.issuer,
            "aud": self._config.audience,
            "iat": issued_at,
            "exp": expires_at,
        }
        token = jwt.encode(claims, self._config.secret, algorithm=self._config.algorithm)
        return token, expires_at

    @staticmethod
    def create_refresh_token() -> str:
        return str(uuid.uuid4())

    def issue(self, user: Mapping[str, Any], *, now: datetime | None = None) -> IssuedTokens:
        token, expires_at = self.create_access_token(user, now=now)
        return IssuedTokens(
            token=token,
            refresh_token=self.create_refresh_token(),
            expires_at=expires_at,
        )

    def decode(self, token: str) -> dict[str, Any]:
        try:
            payload = jwt.decode(
                token,
                self._config.secret,
                algorithms=[self._config.algorithm],
                audience=self._config.audience,
                issuer=self._config.issuer,
            )
        except JWTError as exc:
            raise AuthenticationFailedError("Invalid or expired token") from exc
        if not payload.get("sub"):
            raise AuthenticationFailedError("Token is missing a subject")
        return payload
