"""
Forum Categorization API - FastAPI application entry point
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy import text
from starlette.responses import Response

from apps.api.middleware.admin_auth import AdminTokenMiddleware, admin_guard_required
from apps.api.routers import categories, posts
from packages.common.config import get_settings
from packages.common.database import sessionmanager

settings = get_settings()

# Configure structured logging
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.getLevelName(settings.log_level)
    ),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager"""
    logger.info("starting_forum_categorization_api",
                environment=settings.environment,
                ai_enabled=bool(settings.anthropic_api_key),
                version=VERSION)

    # Initialize database connection pool
    await sessionmanager.init(settings.database_url)

    yield

    logger.info("shutting_down_forum_categorization_api")
    await sessionmanager.close()


# Create FastAPI application
app = FastAPI(
    title="Forum Categorization API",
    description="AI-assisted post categorization for the community forum",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
)


# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.environment != "production" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


if admin_guard_required(settings):
    app.add_middleware(AdminTokenMiddleware, token=settings.admin_token)


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with structured logging"""
    logger.warning("validation_error",
                   path=request.url.path,
                   errors=exc.errors())
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.error("unhandled_exception",
                 path=request.url.path,
                 error=str(exc),
                 exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "request_id": request.headers.get("x-request-id"),
        },
    )


# Include routers
app.include_router(posts.router, prefix="/api/v1/posts", tags=["Posts"])
app.include_router(categories.router, prefix="/api/v1/categories", tags=["Categories"])
app.include_router(categories.admin_router, prefix="/api/v1/admin/categories", tags=["Admin"])


# Health check endpoint
@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint for Docker and monitoring"""
    try:
        async with sessionmanager.session() as session:
            await session.execute(text("SELECT 1"))

        return {
            "status": "healthy",
            "environment": settings.environment,
            "version": VERSION,
            "services": {
                "database": "connected",
                "ai": "configured" if settings.anthropic_api_key else "disabled",
            }
        }
    except Exception as e:
        logger.error("health_check_failed", error=str(e))
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "error": str(e),
            }
        )


# Metrics endpoint (Prometheus)
@app.get("/metrics", tags=["System"])
async def metrics():
    """Prometheus metrics endpoint"""
    if not settings.metrics_enabled:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "Metrics disabled"}
        )

    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


# Root endpoint
@app.get("/", tags=["System"])
async def root():
    """API root endpoint"""
    return {
        "name": "Forum Categorization API",
        "version": VERSION,
        "environment": settings.environment,
        "docs": "/docs" if settings.environment != "production" else None,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "apps.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
