"""
API key protection for the /api/v1 routes

Disabled when no API_KEY is configured (single-device installs).
"""

import secrets
from typing import Optional

from fastapi import HTTPException, Request, Security
from fastapi.security import APIKeyHeader
import structlog

logger = structlog.get_logger(__name__)

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def check_api_key(provided: Optional[str], expected: Optional[str]) -> bool:
    """Constant-time comparison; any key passes when none is expected"""
    if not expected:
        return True
    if not provided:
        return False
    return secrets.compare_digest(provided, expected)


async def verify_api_key(
    request: Request,
    api_key: Optional[str] = Security(api_key_header),
) -> Optional[str]:
    """
    Dependency to verify the X-API-Key header

    Usage:
        router = APIRouter(dependencies=[Depends(verify_api_key)])
    """
    expected = request.app.state.services.config.api_key

    if expected and not api_key:
        logger.warning("api_key_missing", path=request.url.path)
        raise HTTPException(
            status_code=401,
            detail="API key required",
            headers={"WWW-Authenticate": "ApiKey"}
        )

    if not check_api_key(api_key, expected):
        logger.warning("api_key_invalid", path=request.url.path)
        raise HTTPException(
            status_code=401,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"}
        )

    return api_key
