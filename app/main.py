"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.api.error_handlers import general_exception_handler, service_error_handler, validation_error_handler
from app.api.middleware import request_logging_middleware
from app.api.v1.router import api_router
from app.core.config import settings
from app.core.errors import ServiceError, ServiceUnavailableError
from app.core.logging import setup_logging
from app.db.session import engine
from app.schemas.response import Envelope, success

logger = structlog.get_logger(__name__)


def create_app() -> FastAPI:
    setup_logging(settings.DEBUG, settings.LOG_LEVEL)

    application = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="User registration, authentication and session management.",
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_url="/openapi.json")

    if settings.CORS_ORIGINS:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    application.middleware("http")(request_logging_middleware)

    application.add_exception_handler(ServiceError, service_error_handler)
    application.add_exception_handler(RequestValidationError, validation_error_handler)
    application.add_exception_handler(Exception, general_exception_handler)

    # Include API router
    application.include_router(api_router, prefix="/api/v1")

    @application.get("/", response_model=Envelope[dict])
    def root():
        """Root endpoint."""
        return success({ "message": settings.PROJECT_NAME, "version": settings.VERSION })

    @application.get("/health", response_model=Envelope[dict])
    def health_check():
        """Health check endpoint for monitoring."""
        return success({ "status": "healthy", "service": "userauth-api", "version": settings.VERSION })

    @application.get("/live", response_model=Envelope[dict])
    def live():
        """Liveness check: the process is serving requests."""
        return success({ "status": "alive" })

    @application.get("/ready", response_model=Envelope[dict])
    def ready():
        """Readiness check: the storage backend answers."""
        if settings.STORAGE_BACKEND == "sql":
            try:
                with engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
            except SQLAlchemyError as e:
                logger.error("readiness_check_failed", error=str(e))
                raise ServiceUnavailableError("Database unavailable") from e
        return success({ "status": "ready", "storage": settings.STORAGE_BACKEND })

    logger.info("app_created", environment=settings.ENVIRONMENT, storage=settings.STORAGE_BACKEND)
    return application


app = create_app()
