"""FastAPI application for Late Edition.

This module provides the main FastAPI application with health endpoints,
API routes, and lifecycle management.

Run with:
    uvicorn lateedition.main:app --reload

Examples:
    >>> # Health check
    >>> curl http://localhost:8000/health

    >>> # Public post listing, bypassing the CDN cache
    >>> curl "http://localhost:8000/api/v1/posts?fresh=1"

Tests:
    - tests/integration/test_api_content.py
    - tests/integration/test_api_auth.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from lateedition import __version__
from lateedition.api import v1_router
from lateedition.auth.tokens import AuthConfigError
from lateedition.config import get_settings
from lateedition.database import check_db_connection, close_db, init_db
from lateedition.storage.service import StorageService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    database: bool
    storage: bool


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Startup initializes the database and opens blob storage; shutdown closes
    both.
    """
    logger.info(f"Starting Late Edition v{__version__}")

    try:
        await init_db()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")

    app.state.storage = StorageService.from_config(settings.get_storage_config())

    yield

    logger.info("Shutting down Late Edition")
    await app.state.storage.close()
    await close_db()


settings = get_settings()

app = FastAPI(
    title="Late Edition",
    description="Content API for the Late Edition site",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.DEBUG else settings.CORS_ORIGINS,
    allow_credentials=not settings.DEBUG,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router)


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions with consistent response format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "detail": None},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    """Malformed request bodies and parameters are client errors (400)."""
    detail = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "detail": detail},
    )


@app.exception_handler(AuthConfigError)
async def auth_config_exception_handler(request, exc: AuthConfigError):
    logger.error(f"Auth misconfigured: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Server misconfigured", "detail": None},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")

    detail = str(exc) if settings.DEBUG else None

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "detail": detail},
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Check application health.

    Returns:
        HealthResponse with database and blob storage reachability.
    """
    db_healthy = await check_db_connection()
    storage = getattr(app.state, "storage", None)
    storage_healthy = storage is not None and await storage.check_health()

    return HealthResponse(
        status="healthy" if db_healthy and storage_healthy else "degraded",
        version=__version__,
        database=db_healthy,
        storage=storage_healthy,
    )


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint with basic info."""
    return {
        "name": "Late Edition",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


# Entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "lateedition.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
