"""FastAPI application entry point (``uvicorn lms.main:app``).

Wiring only: logging, lifespan, error handlers, middleware, routers and the
local media mount. Settings are read inside create_app() so tests can set
the environment and clear the get_settings cache before the import.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from lms.api.v1 import api_router
from lms.core.config import Settings, get_settings
from lms.core.exception_handlers import register_exception_handlers
from lms.core.lifespan import create_lifespan
from lms.core.limiter import limiter
from lms.infrastructure.external.storage import MEDIA_MOUNT_PATH
from lms.middleware import (
    RequestIDMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
    TimeoutMiddleware,
)
from lms.shared.telemetry.logging import setup_logging


def _install_middleware(app: FastAPI, settings: Settings) -> None:
    # Last added runs first: timeout, size limit, request id, security headers, CORS.
    origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_upload_size)
    app.add_middleware(TimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    register_exception_handlers(app)
    _install_middleware(app, settings)
    app.include_router(api_router, prefix="/api/v1")

    # Uploaded images are served by the API itself only with the local backend.
    if settings.storage_backend == "local":
        app.mount(
            MEDIA_MOUNT_PATH,
            StaticFiles(directory=settings.storage_root, check_dir=False),
            name="media",
        )
    return app


app = create_app()
