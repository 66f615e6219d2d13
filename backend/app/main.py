"""
FastAPI application entry point.

Uses structured logging from core.logging module.
Validates configuration and creates the schema on startup.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import Settings, get_settings
from core.db import db
from core.logging import RequestLoggingMiddleware, configure_logging, get_logger
from core.security import get_credential_codec

from .error_handlers import register_exception_handlers
from .middleware.request_id import RequestIDMiddleware
from .middleware.security import SecurityHeadersMiddleware
from .routers import auth as auth_router

logger = get_logger("api")


def validate_config_on_startup(settings: Settings) -> None:
    """
    Log configuration problems. Errors are fatal in production only.
    """
    errors, warnings = settings.validate_production_config()
    for warning in warnings:
        logger.warning("config_warning", message=warning)

    if not errors:
        logger.info("config_validation_passed")
        return

    for error in errors:
        logger.error("config_error", error=error)
    if settings.is_production:
        raise RuntimeError("Invalid configuration: " + "; ".join(errors))
    logger.warning(
        "config_validation_skipped",
        message="Configuration errors tolerated outside production",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    logger.info("app_startup", app_name=settings.app_name, env=settings.env)

    validate_config_on_startup(settings)

    db.initialize(settings.database_url)
    db.create_all_tables()
    logger.info("database_initialized")

    if get_credential_codec().is_available:
        logger.info("credential_codec_initialized")
    else:
        logger.warning("credential_codec_unavailable")

    yield

    logger.info("app_shutdown")


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(level="DEBUG" if settings.debug else "INFO")

    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

    # The client sends the session cookie cross-origin, so credentials are allowed
    # and origins must be explicit.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With", "X-Request-ID"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    # Added last so it runs first: the request ID must be bound before
    # anything logs.
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    def health_check():
        """Liveness probe."""
        return {"status": "ok"}

    @app.get("/health/ready", tags=["health"])
    def readiness_check():
        """Readiness probe: 503 until the database answers."""
        result = db.health_check()
        if not result["healthy"]:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready"},
            )
        return {"status": "ready"}

    app.include_router(auth_router.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("backend.app.main:app", host="0.0.0.0", port=settings.port, log_config=None)
