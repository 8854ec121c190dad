"""Application lifespan: startup and shutdown of shared infrastructure.

app.state carries what request dependencies read: ``cache`` (None when Redis
is disabled) and ``oauth_http_client``. No business logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from lms.core.config import Settings, get_settings
from lms.infrastructure.persistence.database import dispose_engine, get_engine
from lms.shared.telemetry.telemetry import Telemetry, get_telemetry, set_telemetry

logger = logging.getLogger(__name__)

OAUTH_HTTP_TIMEOUT_SECONDS = 30.0


async def _start_cache(settings: Settings):
    if not settings.redis_enabled:
        logger.info("Redis cache disabled; every read goes to the database")
        return None
    from lms.infrastructure.cache.redis_cache import CacheService

    cache = CacheService()
    await cache.connect()
    return cache


def _start_tracing(app: FastAPI, settings: Settings) -> None:
    if not settings.telemetry_enabled:
        return
    telemetry = Telemetry.from_settings(settings)
    if telemetry is None:
        return
    telemetry.instrument_app(app)
    telemetry.instrument_engine(get_engine())
    if settings.redis_enabled:
        telemetry.instrument_redis()
    set_telemetry(telemetry)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the OAuth HTTP client, cache and tracing; tear them down in reverse."""
    settings = get_settings()
    app.state.oauth_http_client = httpx.AsyncClient(timeout=OAUTH_HTTP_TIMEOUT_SECONDS)
    app.state.cache = await _start_cache(settings)
    _start_tracing(app, settings)

    yield

    telemetry = get_telemetry()
    if telemetry is not None:
        telemetry.shutdown()
        set_telemetry(None)
    if app.state.cache is not None:
        await app.state.cache.disconnect()
        app.state.cache = None
    await app.state.oauth_http_client.aclose()
    await dispose_engine()
    logger.info("Shutdown complete")
