"""AI File Library API - Main Application Module.

This module initializes the FastAPI application with proper configuration,
middleware, routing, and lifecycle management for the AI-tagged file library.
"""

import logging
import sys
import uuid
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path

# Add the project root to Python path if running directly
if __name__ == "__main__":
    project_root = Path(__file__).parent.parent
    sys.path.insert(0, str(project_root))

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import ConfigValidator, EnvironmentEnum, settings
from app.core.dependencies import get_tagging_service
from app.core.logging_config import request_id_var, setup_logging
from app.database import AsyncSessionLocal, engine
from models import Base

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifecycle events."""
    # Startup
    setup_logging()
    logger.info(f"Starting {settings.app_name} ({settings.environment.value})")

    # Development mode: Auto-create tables if they don't exist
    # Production: Use Alembic migrations (alembic upgrade head)
    if settings.environment == EnvironmentEnum.development:
        logger.info("Development mode: creating/updating database tables")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    else:
        ConfigValidator.validate_required_settings()
        logger.info("Use 'alembic upgrade head' to manage the database schema")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")
    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="File library with AI-generated tags, folder suggestions and auto-organization",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # Add middleware
    setup_middleware(app)

    # Add exception handlers
    setup_exception_handlers(app)

    # Include routers
    setup_routers(app)

    return app


def setup_middleware(app: FastAPI):
    """Configure application middleware."""
    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response


def error_response(status_code: int, message: str, details=None) -> JSONResponse:
    content = {"error": message}
    if details is not None:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content)


def setup_exception_handlers(app: FastAPI):
    """Configure global exception handlers.

    Every error body is ``{"error": str}`` plus ``details`` when there are any.
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Handle custom exceptions that have structured detail
        if isinstance(exc.detail, dict) and "message" in exc.detail:
            message = exc.detail["message"]
            details = exc.detail.get("details")
        else:
            message = str(exc.detail) if exc.detail else "An error occurred"
            details = None

        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {message}")
        return error_response(exc.status_code, message, details)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError):
        # Convert errors to JSON-serializable format
        errors = []
        for error in exc.errors():
            error_dict = {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "Validation error")),
                "type": error.get("type", "value_error"),
            }
            errors.append(error_dict)

        return error_response(400, "Validation error", errors)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"{request.method} {request.url.path} database error: {str(exc)}")
        return error_response(500, f"Database error: {str(exc)}")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"{request.method} {request.url.path} failed: {str(exc)}")
        return error_response(500, str(exc) or "Internal server error")


def setup_routers(app: FastAPI):
    """Configure application routers."""
    # Import routers
    from app.domains.files.controller import router as files_router
    from app.domains.folders.controller import router as folders_router
    from app.domains.library.controller import router as library_router
    from app.domains.organizer.controller import router as organizer_router

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Comprehensive health check endpoint."""
        db_status = "healthy"
        try:
            async with AsyncSessionLocal() as db:
                await db.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning(f"Health check database probe failed: {str(e)}")
            db_status = "unhealthy"

        tagging_status = get_tagging_service().get_service_status()

        return {
            "status": "healthy" if db_status == "healthy" else "degraded",
            "version": settings.version,
            "environment": settings.environment.value,
            "timestamp": datetime.now(UTC).isoformat(),
            "services": {
                "database": db_status,
                "tagging": "ai" if tagging_status["ai_configured"] else "rule_based",
            },
        }

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "description": "File library with AI tagging",
            "docs_url": "/docs" if settings.is_development else None,
        }

    # Include domain routers
    app.include_router(files_router)
    app.include_router(folders_router)
    app.include_router(library_router)
    app.include_router(organizer_router)


# Create the application instance
app = create_app()


def main():
    """Entry point for running the application directly."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
