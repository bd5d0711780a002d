"""
FastAPI application factory
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
import structlog

from ..config import Settings, settings as default_settings
from ..storage import RecordStore, StorageError
from .dependencies import ServiceContainer
from .routers import data, health, labels, links, reports, settings, tickets
from .security import verify_api_key

logger = structlog.get_logger(__name__)

API_PREFIX = "/api/v1"


def create_app(
    config: Optional[Settings] = None,
    store: Optional[RecordStore] = None,
    telegram_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the API with its services

    Args:
        config: Settings (defaults to the environment)
        store: Record store override (defaults to config.storage_backend)
        telegram_transport: httpx transport override for the Bot API
    """
    config = config or default_settings
    services = ServiceContainer.build(config, store=store, telegram_transport=telegram_transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "repair_shop_starting",
            version=config.api_version,
            storage_backend=config.storage_backend,
        )
        await services.store.connect()
        yield
        await services.telegram.close()
        await services.store.close()
        logger.info("repair_shop_shutting_down")

    app = FastAPI(
        title=config.api_title,
        version=config.api_version,
        description="Service tickets, reports and labels for an electronics repair shop",
        lifespan=lifespan,
    )
    app.state.services = services

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        # Write failures reach the user; there is no retry queue
        logger.error("storage_error", path=request.url.path, key=exc.key, error=str(exc))
        return JSONResponse(status_code=503, content={"detail": f"Storage unavailable: {exc}"})

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    protected = [Depends(verify_api_key)]
    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(tickets.router, prefix=f"{API_PREFIX}/tickets", tags=["Tickets"], dependencies=protected)
    app.include_router(reports.router, prefix=f"{API_PREFIX}/reports", tags=["Reports"], dependencies=protected)
    app.include_router(settings.router, prefix=f"{API_PREFIX}/settings", tags=["Settings"], dependencies=protected)
    app.include_router(data.router, prefix=f"{API_PREFIX}/data", tags=["Data"], dependencies=protected)
    app.include_router(labels.router, prefix=f"{API_PREFIX}/labels", tags=["Labels"], dependencies=protected)
    app.include_router(links.router, prefix=f"{API_PREFIX}/links", tags=["Links"], dependencies=protected)

    return app
