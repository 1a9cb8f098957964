"""API key authentication and rate limiting for the reference API."""

import os
import secrets
import logging
from typing import Optional

from fastapi import HTTPException, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from slowapi import Limiter
from slowapi.util import get_remote_address

logger = logging.getLogger(__name__)

# Missing credentials are reported by verify_api_key so every rejection is a 401
security = HTTPBearer(auto_error=False)

# Per-client limit applied to every payment endpoint
PAYMENT_RATE_LIMIT = os.getenv("PAYHUB_API_RATE_LIMIT", "60/minute")

limiter = Limiter(key_func=get_remote_address)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


def configured_api_key() -> bytes:
    """The key clients must present, read from ``API_KEY`` on every request."""
    expected = os.getenv("API_KEY")
    if not expected:
        logger.error("API_KEY environment variable is not configured")
        raise HTTPException(status_code=500, detail="Server configuration error")
    return expected.encode()


async def verify_api_key(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> str:
    """Reject callers that do not present ``Authorization: Bearer <API_KEY>``.

    Raises:
        HTTPException: 500 if API_KEY is unset, 401 if the key is missing or wrong.
    """
    expected = configured_api_key()
    if credentials is None:
        raise _unauthorized("Missing API key")
    presented = credentials.credentials
    if not secrets.compare_digest(presented.encode(), expected):
        logger.warning("Rejected payment request with an invalid API key")
        raise _unauthorized("Invalid API key")
    return presented
