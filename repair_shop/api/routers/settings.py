"""
Settings Router
"""

from fastapi import APIRouter, Depends

from ...models.settings import AppSettings, AppSettingsUpdate
from ..dependencies import ServiceContainer, get_services
from ..schemas import SendResultResponse, SyncResponse

router = APIRouter()


@router.get("", response_model=AppSettings)
async def get_settings(services: ServiceContainer = Depends(get_services)):
    return await services.settings.get()


@router.patch("", response_model=AppSettings)
async def update_settings(body: AppSettingsUpdate, services: ServiceContainer = Depends(get_services)):
    return await services.settings.update(body)


@router.post("/telegram/test", response_model=SendResultResponse)
async def test_telegram(services: ServiceContainer = Depends(get_services)):
    result = await services.notifier.test_connection()
    return SendResultResponse(success=result.success, message_id=result.message_id, error=result.error)


@router.post("/telegram/sync", response_model=SyncResponse)
async def sync_telegram(services: ServiceContainer = Depends(get_services)):
    result = await services.notifier.sync_from_telegram()
    return SyncResponse(success=result.success, count=result.count, error=result.error)
