# dependencies.py
from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from devhub.config import settings
from devhub.database import get_db
from devhub.models.user import User
from devhub.utils.jwt_handler import MissingSecretError, TokenError, TokenExpiredError, decode_access_token


logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

TOKEN_COOKIE = "token"
REFRESH_COOKIE = "refreshToken"


def extract_token(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(TOKEN_COOKIE) or None


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    token = extract_token(request, credentials)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authorized, no token")

    try:
        payload = decode_access_token(token)
    except MissingSecretError:
        logger.error("auth.protect JWT_SECRET is not configured")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server configuration error")
    except TokenExpiredError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except TokenError as exc:
        logger.info("auth.protect rejected token path=%s reason=%s", request.url.path, exc)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authorized, token failed")

    user = db.get(User, payload["userId"])
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authorized, user not found")
    if user.is_suspended:
        logger.info("auth.protect suspended user_id=%s", user.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is suspended")

    request.state.user = user
    return user


def get_optional_user(
    request: Request,
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User | None:
    token = extract_token(request, credentials)
    if not token:
        return None
    try:
        payload = decode_access_token(token)
    except TokenError:
        return None

    user = db.get(User, payload["userId"])
    if user is None or user.is_suspended:
        return None
    request.state.user = user
    return user


def require_roles(*roles: str) -> Callable[..., User]:
    allowed = tuple(roles)

    def _role_gate(user: User | None = Depends(get_optional_user)) -> User:
        if user is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {' or '.join(allowed)}",
            )
        return user

    return _role_gate


admin_only = require_roles("admin")
user_or_admin = require_roles("user", "admin")


def is_owner_or_admin(user: User, owner_id: int) -> bool:
    return user.id == owner_id or user.role == "admin"


def set_auth_cookies(response: Response, token: str, refresh_token: str) -> None:
    common = {"httponly": True, "samesite": "strict", "secure": settings.is_production, "path": "/"}
    response.set_cookie(TOKEN_COOKIE, token, max_age=settings.jwt_expire_days * 24 * 60 * 60, **common)
    response.set_cookie(REFRESH_COOKIE, refresh_token, max_age=settings.jwt_refresh_expire_days * 24 * 60 * 60, **common)


def clear_auth_cookies(response: Response) -> None:
    response.delete_cookie(TOKEN_COOKIE, path="/")
    response.delete_cookie(REFRESH_COOKIE, path="/")
