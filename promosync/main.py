"""
Main FastAPI application entry point
"""
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import traceback

from promosync.core.config import settings
from promosync.core.exceptions import (
    FeatureLimitReached,
    FeatureLocked,
    PersistenceUnavailable,
    UnknownTier,
)
from promosync.api.v1.api import api_router
from promosync.db.session import engine
from promosync.db.base import Base
import promosync.models  # noqa: F401  registers tables on Base.metadata

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events
    """
    # Startup
    logger.info("Starting up PromoSync API...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[-1] if '@' in settings.DATABASE_URL else 'SQLite'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")

    yield

    # Shutdown
    logger.info("Shutting down PromoSync API...")
    await engine.dispose()


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Creator deal management: plan entitlements, usage quotas and dashboard metrics",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.exception_handler(PersistenceUnavailable)
async def persistence_exception_handler(request: Request, exc: PersistenceUnavailable):
    """
    Storage failures on the entitlement path surface as a retryable error
    """
    logger.error(f"Persistence unavailable: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage temporarily unavailable", "retryable": True},
    )


@app.exception_handler(FeatureLocked)
async def feature_locked_handler(request: Request, exc: FeatureLocked):
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={
            "detail": exc.message,
            "feature": exc.feature,
            "sub_feature": exc.sub_feature,
            "upgrade_required": True,
        },
    )


@app.exception_handler(FeatureLimitReached)
async def feature_limit_handler(request: Request, exc: FeatureLimitReached):
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={
            "detail": exc.message,
            "feature": exc.feature,
            "limit": exc.check.model_dump(),
            "upgrade_required": True,
        },
    )


@app.exception_handler(UnknownTier)
async def unknown_tier_handler(request: Request, exc: UnknownTier):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": str(exc)},
    )


# Global exception handler for debugging
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler to log and return detailed errors in development
    """
    error_detail = str(exc)
    error_traceback = traceback.format_exc()

    logger.error(f"Unhandled exception: {error_detail}")
    logger.error(f"Traceback: {error_traceback}")

    if settings.ENVIRONMENT == "development":
        return JSONResponse(
            status_code=500,
            content={
                "detail": error_detail,
                "type": type(exc).__name__,
                "traceback": error_traceback
            }
        )
    else:
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )


@app.get("/health")
async def health_check():
    """
    Health check endpoint
    """
    return {
        "status": "healthy",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
    }
