"""
Main Application Entry Point
============================

Responsibilities:
- Build the FastAPI application (``create_app``)
- Own the Database handle for the application's lifetime
- Configure middleware stack
- Register API routers
- Set up exception handlers
- Provide health check endpoints

IMPORTANT:
    Production schemas are managed via Alembic migrations.
    DB_AUTO_CREATE only exists for local SQLite development.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from incident_tracker.core.config import Settings, get_settings
from incident_tracker.core.exceptions import IncidentTrackerException
from incident_tracker.core.logging import configure_logging, get_logger
from incident_tracker.db.init_db import init_db
from incident_tracker.db.session import Database
from incident_tracker.api.incidents import router as incidents_router
from incident_tracker.middleware.request_context import (
    RequestContextMiddleware,
    SecurityHeadersMiddleware,
)
from incident_tracker.schemas.incident import FieldError

# Initialize logger
logger = get_logger(__name__)


# =====================================
# Application Lifespan Handler
# =====================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler for startup and shutdown events.

    Startup:
    - Create tables when DB_AUTO_CREATE is set
    - Check database connection

    Shutdown:
    - Dispose of the connection pool
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    logger.info(
        "application_starting",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    if settings.DB_AUTO_CREATE:
        init_db(database)

    if not database.check_connection():
        logger.error("database_connection_failed_on_startup")
    else:
        logger.info("database_connection_established")

    try:
        yield
    except asyncio.CancelledError:
        logger.debug("application_shutdown_requested")
        raise
    finally:
        database.dispose()
        logger.info("application_shutdown_complete")


# =====================================
# Exception Handlers
# =====================================

async def incident_tracker_exception_handler(
    request: Request, exc: IncidentTrackerException
):
    """
    Handle application exceptions.

    Converts custom exceptions to proper HTTP responses.
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "application_exception",
        exception_type=type(exc).__name__,
        message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "message": exc.message,
            "details": exc.details,
        },
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle request validation errors.

    Reports every failing field; nothing reaches the store.
    """
    errors = [
        FieldError(
            field=".".join(str(loc) for loc in error["loc"]),
            message=error["msg"],
            type=error["type"],
        ).model_dump()
        for error in exc.errors()
    ]

    logger.warning(
        "request_validation_error",
        path=request.url.path,
        errors=errors,
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Validation error",
            "details": {"errors": errors},
        },
    )


def build_general_exception_handler(settings: Settings):
    async def general_exception_handler(request: Request, exc: Exception):
        """
        Handle unexpected exceptions.

        Logs the error and returns a generic error message.
        """
        logger.error(
            "unhandled_exception",
            exception_type=type(exc).__name__,
            message=str(exc),
            path=request.url.path,
            method=request.method,
            exc_info=True,
        )

        # Don't expose internal errors in production
        if settings.is_production:
            content = {"message": "An unexpected error occurred", "details": {}}
        else:
            content = {"message": str(exc), "details": {"type": type(exc).__name__}}

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=content,
        )

    return general_exception_handler


# =====================================
# Application Factory
# =====================================

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Explicit settings; defaults to the process settings
        database: Explicit Database handle; built from settings if omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Incident tracking API: list, filter, create and edit incidents.",
        version=settings.APP_VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
    )
    app.state.settings = settings
    app.state.database = database or Database(settings)

    # CORS Configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.cors_methods_list,
        allow_headers=settings.cors_headers_list,
        max_age=3600,  # Cache preflight requests for 1 hour
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(IncidentTrackerException, incident_tracker_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, build_general_exception_handler(settings))

    app.include_router(incidents_router, prefix=settings.API_PREFIX)

    register_health_routes(app)
    return app


# =====================================
# Health Check Endpoints
# =====================================

def register_health_routes(app: FastAPI) -> None:
    settings: Settings = app.state.settings

    @app.get("/", tags=["Health"], summary="Basic Health Check")
    def health_check():
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/health", tags=["Health"], summary="Detailed Health Check")
    def detailed_health_check(request: Request):
        """Service status including database connectivity."""
        db_healthy = request.app.state.database.check_connection()

        return {
            "status": "healthy" if db_healthy else "degraded",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "checks": {
                "database": "healthy" if db_healthy else "unhealthy",
            },
        }


app = create_app()
