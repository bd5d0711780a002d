"""
Repair Shop Manager - API entry point

    uvicorn repair_shop.main:app
"""

import logging

import structlog

from .api import create_app
from .config import settings

# Logging
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.JSONRenderer() if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    ),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "repair_shop.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )
