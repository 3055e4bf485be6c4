"""
Rate limiting for the HRIS API.
Uses SlowAPI with a Redis backend when REDIS_URL is configured.
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from hris.core.config import settings

logger = logging.getLogger("hris.rate_limiter")


def get_real_client_ip(request: Request) -> str:
    """
    Get the real client IP, accounting for reverse proxies.
    Checks X-Forwarded-For header first, then falls back to direct IP.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def get_user_identifier(request: Request) -> str:
    """Authenticated user id when known, otherwise client IP."""
    user = getattr(request.state, "user", None)
    if user is not None and hasattr(user, "id"):
        return f"user:{user.id}"
    return f"ip:{get_real_client_ip(request)}"


storage_uri = settings.REDIS_URL or "memory://"

if settings.REDIS_URL:
    logged_url = settings.REDIS_URL.split("@")[-1]
    logger.info(f"Rate limiter using Redis backend: {logged_url}")
elif settings.ENVIRONMENT.lower() == "production":
    logger.warning(
        "PRODUCTION WARNING: Rate limiting is using in-memory storage. "
        "Limits won't sync across instances. Configure REDIS_URL for distributed rate limiting."
    )

limiter = Limiter(
    key_func=get_user_identifier,
    default_limits=["1000/hour", "200/minute"],
    storage_uri=storage_uri,
    strategy="fixed-window",
    headers_enabled=False,
    enabled=settings.RATE_LIMIT_ENABLED,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render a rate limit hit in the standard error envelope."""
    logger.warning(
        f"Rate limit exceeded for {get_user_identifier(request)} "
        f"on {request.method} {request.url.path}"
    )
    retry_after = getattr(exc, "retry_after", 60)

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": {
                "message": f"Too many requests. Please retry after {retry_after} seconds.",
                "code": "RATE_LIMIT_EXCEEDED",
            },
        },
        headers={"Retry-After": str(retry_after)},
    )


class RateLimits:
    """Pre-configured rate limits for different endpoint types."""

    AUTH_LOGIN = "5/minute"
    AUTH_PASSWORD_RESET = "3/minute"
    AUTH_REFRESH = "30/minute"

    API_WRITE = "60/minute"

    FILE_UPLOAD = "10/minute"
