"""FastAPI application setup and configuration."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from issuetrack.api.middleware import RequestTracingMiddleware
from issuetrack.api.state import AppState
from issuetrack.config import Settings, get_settings
from issuetrack.errors import AppError, ErrorKind, internal_error, validation_error
from issuetrack.models.base import Database, DatabaseConfig, open_database
from issuetrack.utils.observability import get_correlation_id, setup_logging

logger = logging.getLogger(__name__)

# Leading location parts that name where a value came from, not a field
_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}


def validation_details(errors: list) -> dict[str, list[str]]:
    """
    Group request validation errors by field.

    Fields are keyed by their dotted wire name (``labelIds.0``); errors that
    concern the body as a whole are keyed ``_root``.
    """
    details: dict[str, list[str]] = {}
    for error in errors:
        parts = list(error.get("loc", ()))
        if parts and parts[0] in _LOCATION_ROOTS:
            parts = parts[1:]
        key = ".".join(str(part) for part in parts) or "_root"
        details.setdefault(key, []).append(error.get("msg", "Invalid value"))
    return details


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Application settings (default: loaded from the environment)
        database: Store handle to use; one is opened from settings if None

    Returns:
        The configured FastAPI application
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    if database is None:
        database = open_database(DatabaseConfig.from_settings(settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager for startup and shutdown."""
        logger.info(f"Starting {settings.app_name}...")
        try:
            if settings.database_auto_create:
                await database.create_all()
            await database.ping()
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}", exc_info=True)
            raise
        logger.info(f"{settings.app_name} ready ({settings.environment})")

        yield

        logger.info(f"Shutting down {settings.app_name}...")
        await database.close()
        logger.info("Database connections closed")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Multi-tenant issue tracking API",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.resources = AppState(database, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    app.add_middleware(
        RequestTracingMiddleware,
        header_name=settings.correlation_id_header,
        record_metrics=settings.enable_metrics,
    )

    # Exception handlers
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Render typed application errors."""
        if exc.kind == ErrorKind.INTERNAL:
            logger.error(f"Internal error for {request.url.path}: {exc.message}")
        else:
            logger.info(f"{exc.kind.value} for {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request schema errors as ValidationError with per-field details."""
        details = validation_details(exc.errors())
        logger.warning(f"Validation error for {request.url.path}: {details}")
        error = validation_error("Validation failed", details)
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        correlation_id = get_correlation_id()
        logger.error(
            f"Unhandled exception for {request.url.path}: {exc}",
            exc_info=True,
            extra={"correlation_id": correlation_id} if correlation_id else {},
        )
        error = internal_error(str(exc) if settings.debug else "Internal server error")
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    # Include API routers
    from issuetrack.api.routes import (
        auth,
        comments,
        health,
        issues,
        labels,
        metrics,
        teams,
        workflow_states,
        workspaces,
    )

    app.include_router(auth.router, prefix=settings.api_prefix)
    app.include_router(workspaces.router, prefix=settings.api_prefix)
    app.include_router(labels.router, prefix=settings.api_prefix)
    app.include_router(teams.router, prefix=settings.api_prefix)
    app.include_router(workflow_states.router, prefix=settings.api_prefix)
    app.include_router(issues.router, prefix=settings.api_prefix)
    app.include_router(comments.router, prefix=settings.api_prefix)
    app.include_router(health.router)  # No prefix for health checks
    if settings.enable_metrics:
        app.include_router(metrics.router)  # No prefix for metrics

    return app

