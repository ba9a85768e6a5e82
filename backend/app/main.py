"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import FastAPI

from app.api.dependencies.dashboard import get_dashboard_refresher
from app.api.routes import api_router
from app.config import get_settings
from app.core.logging import setup_logging
from app.core.telemetry import setup_telemetry

logger = logging.getLogger(__name__)

settings = get_settings()
app = FastAPI(title=settings.app_name, version="0.1.0")
setup_logging()
setup_telemetry(app, settings)
app.include_router(api_router)


@app.on_event("startup")
async def startup() -> None:
    logger.info("Starting %s with settings %s", settings.app_name, settings.dict_for_logging())


@app.on_event("shutdown")
async def shutdown() -> None:
    """Close the outbound HTTP clients held by the price service."""

    await get_dashboard_refresher().prices.aclose()


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    """Return service readiness metadata."""

    return {
        "status": "ok",
        "timestamp": datetime.now(ZoneInfo(settings.timezone)).isoformat(),
        "timezone": settings.timezone,
    }
