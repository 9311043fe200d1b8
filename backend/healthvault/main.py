"""
HealthVault FastAPI Backend Application

Main application entry point for the personal health-record API.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from healthvault.api import router
from healthvault.core.config import Settings, get_settings
from healthvault.core.database import build_engine, build_session_factory, init_db
from healthvault.core.exceptions import HealthVaultError
from healthvault.core.logging import configure_logging
from healthvault.schemas.common import ErrorResponse, HealthCheck

logger = logging.getLogger(__name__)


def _error_body(status_code: int, error: str, detail=None) -> dict:
    body = ErrorResponse(error=error, detail=detail, status_code=status_code)
    return jsonable_encoder(body.model_dump(by_alias=True))


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as an ``ErrorResponse`` body."""

    @app.exception_handler(HealthVaultError)
    async def handle_domain_error(request: Request, exc: HealthVaultError):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                exc.status_code,
                exc.error_code,
                exc.detail if exc.detail is not None else exc.message,
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(err.get("loc", [])), "msg": err.get("msg")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=422,
            content=_error_body(422, "validation_error", errors),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        # Store and driver errors stay in the log, never in the response
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=_error_body(500, "server_error", "Internal server error"),
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration; defaults to the environment/.env settings

    Returns:
        FastAPI app with settings, engine and session factory on ``app.state``
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Personal health records: accounts, Health ID, emergency info, records and reminders",
        version=settings.app_version,
        debug=settings.debug,
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_exception_handlers(app)

    # Include API routes
    app.include_router(router, prefix="/api")

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "message": settings.app_name,
            "version": settings.app_version,
            "status": "running",
            "docs": "/docs",
            "api_v1": "/api/v1",
        }

    @app.get("/health", response_model=HealthCheck, tags=["health"])
    async def health_check():
        """Health check endpoint."""
        return HealthCheck(
            status="healthy", version=settings.app_version, timestamp=datetime.now()
        )

    @app.on_event("startup")
    async def startup_event():
        """Actions to perform on application startup."""
        if settings.auto_create_tables:
            init_db(engine)
        logger.info(
            "%s v%s (%s) listening on http://%s:%s",
            settings.app_name,
            settings.app_version,
            settings.environment,
            settings.host,
            settings.port,
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        """Actions to perform on application shutdown."""
        engine.dispose()
        logger.info("Shutting down %s", settings.app_name)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "healthvault.main:app",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.debug,
    )
