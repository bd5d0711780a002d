"""
Health Check Router
"""

from fastapi import APIRouter, Depends

from ...utils.dates import utcnow
from ..dependencies import ServiceContainer, get_services
from ..schemas import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
async def health_check(services: ServiceContainer = Depends(get_services)):
    """Checks that the record store answers"""
    checks = {"storage": await services.store.health_check()}
    return HealthResponse(
        status="healthy" if all(checks.values()) else "degraded",
        version=services.config.api_version,
        services=checks,
        timestamp=utcnow(),
    )
