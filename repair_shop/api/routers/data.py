"""
Data Router - export and wipe
"""

from fastapi import APIRouter, Depends, Response
import structlog

from ...models.reports import DataExport
from ..dependencies import ServiceContainer, get_services

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get("/export", response_model=DataExport)
async def export_data(services: ServiceContainer = Depends(get_services)):
    """{"tickets": [...], "settings": {...}, "exportDate": "..."}"""
    return await services.data.export_all()


@router.delete("", status_code=204)
async def clear_data(services: ServiceContainer = Depends(get_services)):
    await services.data.clear_all()
    return Response(status_code=204)
