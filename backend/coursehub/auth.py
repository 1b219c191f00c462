from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext

from .config import settings
from .errors import AuthenticationFailedError
from .logging_context import set_user_context
from .repositories import users as users_repo
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

token_issuer = TokenIssuer(settings.jwt_config())


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def burn_password_check() -> None:
    """Spend one bcrypt verify so unknown accounts cost as much as real ones."""

    pwd_context.dummy_verify()


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        # Unrecognised or corrupt hash in the store.
        logger.warning("Stored password hash could not be parsed")
        return False


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_issuer() -> TokenIssuer:
    return token_issuer


async def get_current_user_id(
    token: Annotated[str, Depends(oauth2_scheme)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> int:
    """Verify the bearer token and return the user id it was issued for."""

    try:
        payload = issuer.decode(token)
        user_id = int(payload["sub"])
    except AuthenticationFailedError as exc:
        raise _credentials_exception(exc.detail) from exc
    except (TypeError, ValueError) as exc:
        raise _credentials_exception() from exc
    set_user_context(str(user_id))
    return user_id


async def get_current_user(
    user_id: Annotated[int, Depends(get_current_user_id)],
) -> dict[str, Any]:
    row = await users_repo.get_user_by_id(user_id)
    if not row or not row.get("is_active"):
        raise _credentials_exception("User not found")
    return row


CurrentUserId = Annotated[int, Depends(get_current_user_id)]
CurrentUser = Annotated[dict, Depends(get_current_user)]
