"""FastAPI application entry point for the download-info caching proxy."""

import logging
import sys

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, settings
from errors import register_error_handlers
from services.cache import TTLCache
from services.cache_report import TIME_FORMATS
from services.lookup import LookupService

# Structured logging: JSON for production, human-readable for local
if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the app. The cache lives on app.state for the process lifetime."""
    app_settings = app_settings or settings
    app = FastAPI(title="YTDL Cache Proxy", version="1.0.0")
    app.state.settings = app_settings

    problems = app_settings.validate()
    if problems:
        logger.warning("Invalid configuration: %s", "; ".join(problems))
    if app_settings.remaining_time_format not in TIME_FORMATS:
        raise ValueError(
            f"Unknown REMAINING_TIME_FORMAT: {app_settings.remaining_time_format}. "
            f"Supported: {sorted(TIME_FORMATS)}"
        )

    app.state.cache = TTLCache(
        max_entries=app_settings.cache_max_entries,
        ttl_seconds=app_settings.cache_ttl_seconds,
    )
    app.state.lookup_service = LookupService(
        app.state.cache,
        base_url=app_settings.upstream_base_url,
        transport=transport,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if app_settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.health import router as health_router
    from routes.proxy import router as proxy_router

    app.include_router(health_router)
    app.include_router(proxy_router)

    logger.info(
        "Cache ready: max_entries=%d ttl=%ss upstream=%s",
        app_settings.cache_max_entries,
        app_settings.cache_ttl_seconds,
        app_settings.upstream_base_url,
    )
    return app


app = create_app()


def main() -> None:
    """Listen locally; in production a function host invokes the app instead."""
    if settings.is_production:
        logger.info("Production mode: not binding a listener, app is served by the function host")
        return

    import uvicorn

    logger.info("Server is running on http://localhost:%d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
