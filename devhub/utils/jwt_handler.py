# jwt_handler.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from devhub.config import settings


ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenError(Exception):
    """Raised when a token cannot be trusted."""


class TokenExpiredError(TokenError):
    pass


class MissingSecretError(TokenError):
    pass


def _secret() -> str:
    if not settings.jwt_secret:
        raise MissingSecretError("JWT_SECRET is not configured")
    return settings.jwt_secret


def _encode(claims: dict[str, Any], expires_delta: timedelta) -> str:
    to_encode = claims.copy()
    now = datetime.now(timezone.utc)
    to_encode.update(
        {
            "iat": now,
            "exp": now + expires_delta,
            "iss": settings.jwt_issuer,
            "aud": settings.jwt_audience,
        }
    )
    return jwt.encode(to_encode, _secret(), algorithm=settings.jwt_algorithm)


def create_access_token(user_id: int, email: str, expires_delta: timedelta | None = None) -> str:
    expires_delta = expires_delta or timedelta(days=settings.jwt_expire_days)
    return _encode({"userId": user_id, "email": email}, expires_delta)


def create_refresh_token(user_id: int, email: str, expires_delta: timedelta | None = None) -> str:
    expires_delta = expires_delta or timedelta(days=settings.jwt_refresh_expire_days)
    return _encode({"userId": user_id, "email": email, "type": REFRESH_TOKEN_TYPE}, expires_delta)


def create_token_pair(user_id: int, email: str) -> tuple[str, str]:
    return create_access_token(user_id, email), create_refresh_token(user_id, email)


def decode_token(token: str) -> dict[str, Any]:
    secret = _secret()
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except ExpiredSignatureError as exc:
        raise TokenExpiredError("Token expired") from exc
    except JWTError as exc:
        raise TokenError("Token failed verification") from exc

    if not isinstance(payload.get("userId"), int):
        raise TokenError("Token is missing userId")
    return payload


def decode_access_token(token: str) -> dict[str, Any]:
    payload = decode_token(token)
    if payload.get("type", ACCESS_TOKEN_TYPE) != ACCESS_TOKEN_TYPE:
        raise TokenError("Refresh tokens cannot authorize requests")
    return payload


def decode_refresh_token(token: str) -> dict[str, Any]:
    payload = decode_token(token)
    if payload.get("type") != REFRESH_TOKEN_TYPE:
        raise TokenError("Not a refresh token")
    return payload
