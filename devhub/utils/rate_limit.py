# rate_limit.py
import logging
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from limits import parse
from limits.storage import storage_from_string
from limits.strategies import FixedWindowRateLimiter
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from devhub.config import settings


logger = logging.getLogger(__name__)

GENERAL_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.rate_limit_storage_uri,
    strategy="fixed-window",
    enabled=settings.rate_limit_enabled,
)

# The general class covers every /api route, so it is counted in its own
# window instead of per endpoint.
_general_storage = storage_from_string(settings.rate_limit_storage_uri)
_general_window = FixedWindowRateLimiter(_general_storage)


class GeneralRateLimitExceeded(Exception):
    def __init__(self, retry_after: int) -> None:
        super().__init__(GENERAL_LIMIT_MESSAGE)
        self.retry_after = retry_after


def general_limit(request: Request) -> None:
    """Router dependency applying RATE_LIMIT_GENERAL to the /api surface."""
    if not limiter.enabled:
        return
    item = parse(settings.rate_limit_general)
    client = get_remote_address(request)
    if _general_window.hit(item, "general", client):
        return
    reset_at, _ = _general_window.get_window_stats(item, "general", client)
    raise GeneralRateLimitExceeded(max(1, int(reset_at - time.time())))


def reset_limits() -> None:
    limiter.reset()
    _general_storage.reset()


def register_limit():
    return limiter.limit(
        settings.rate_limit_register,
        error_message="Too many registration attempts, please try again later.",
    )


def auth_limit():
    return limiter.limit(
        settings.rate_limit_auth,
        error_message="Too many authentication attempts, please try again later.",
    )


def upload_limit():
    return limiter.limit(
        settings.rate_limit_upload,
        error_message="Too many upload attempts, please try again later.",
    )


def comment_limit():
    return limiter.limit(
        settings.rate_limit_comment,
        error_message="Too many comments, please try again later.",
    )


def sensitive_limit():
    return limiter.limit(
        settings.rate_limit_sensitive,
        error_message="Too many attempts for this operation, please try again later.",
    )


def _retry_after_seconds(exc: RateLimitExceeded) -> int:
    item = getattr(getattr(exc, "limit", None), "limit", None)
    if item is None:
        return 60
    return int(item.get_expiry())


def _too_many_requests(message: str, retry_after: int) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"success": False, "message": message, "retryAfter": retry_after},
        headers={"Retry-After": str(retry_after)},
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    retry_after = _retry_after_seconds(exc)
    logger.warning("rate_limit.exceeded client=%s path=%s limit=%s", get_remote_address(request), request.url.path, exc.detail)

    message = getattr(getattr(exc, "limit", None), "error_message", None) or GENERAL_LIMIT_MESSAGE
    return _too_many_requests(message, retry_after)


async def general_limit_exceeded_handler(request: Request, exc: GeneralRateLimitExceeded) -> JSONResponse:
    logger.warning("rate_limit.exceeded client=%s path=%s limit=%s", get_remote_address(request), request.url.path, settings.rate_limit_general)
    return _too_many_requests(GENERAL_LIMIT_MESSAGE, exc.retry_after)
