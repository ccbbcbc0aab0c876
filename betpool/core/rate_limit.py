"""
Rate limiting shared by the app and its routers (slowapi).
"""
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from betpool.core.config import settings


def get_rate_limit_key(request: Request) -> str:
    """
    Get the rate limit key for a request.

    Uses IP address, with fallback to X-Forwarded-For for proxied requests.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_rate_limit_key,
    default_limits=["120/minute"],
    storage_uri="memory://",
    enabled=settings.RATE_LIMIT_ENABLED
)
