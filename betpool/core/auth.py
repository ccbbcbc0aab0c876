"""
Admin authentication dependencies.

The pool has a single shared admin secret. Admin endpoints expect it in the
X-Admin-Key header; the login endpoint lets the front end check a secret before
storing it.
"""
import hmac
from typing import Optional

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader
from starlette.requests import Request

from betpool.core.config import settings
from betpool.core.logging import get_logger

logger = get_logger(__name__)

ADMIN_KEY_NAME = "X-Admin-Key"

admin_key_header = APIKeyHeader(name=ADMIN_KEY_NAME, auto_error=False)


def _secret_matches(candidate: str) -> bool:
    return hmac.compare_digest(candidate.encode("utf-8"), settings.ADMIN_SECRET.encode("utf-8"))


def require_admin(request: Request, admin_key: Optional[str] = Security(admin_key_header)) -> str:
    """
    Validate the admin key from the request header.

    Raises:
        HTTPException: 500 if no secret is configured, 401 if the key is missing or wrong
    """
    if not settings.ADMIN_SECRET:
        logger.error("ADMIN_SECRET is not configured - rejecting admin request")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="ADMIN_SECRET is not configured on the server."
        )

    if not admin_key or not _secret_matches(admin_key):
        logger.warning(f"Rejected admin request from {request.client.host if request.client else 'unknown'}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin authentication required."
        )

    return admin_key


def verify_admin_secret(secret: Optional[str]) -> bool:
    """
    Check a secret submitted through the login form.

    Raises:
        HTTPException: 500 if no secret is configured, 400 if none was given, 401 if wrong
    """
    if not settings.ADMIN_SECRET:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="ADMIN_SECRET is not configured on the server."
        )

    if not secret:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Secret is required."
        )

    if not _secret_matches(secret):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin code."
        )

    return True
