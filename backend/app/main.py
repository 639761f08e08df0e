"""
ThreatLens API Application

Main FastAPI application entry point.
"""

# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import get_api_router
from app.config import get_settings
from app.services.detection import get_threat_detector, init_threat_detector
from app.utils.exceptions import (
    BatchTooLargeError,
    ClassifierError,
    DatasetError,
    ThreatLensBaseException,
)

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def _warm_up(detector) -> None:
    try:
        await detector.initialize()
    except ClassifierError as e:
        logger.warning(f"Classifier warm-up failed, serving rule-based fallback: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(f"Starting {settings.app_name} API...")

    logger.info("=== Classifier Configuration ===")
    logger.info(f"  Model: {settings.classifier_model_id}")
    logger.info(f"  Task: {settings.classifier_task}")
    logger.info(f"  Device: {settings.classifier_device or 'auto'}")
    logger.info(f"  Timeout: {settings.classifier_timeout_seconds}s")
    logger.info(f"  Cache size: {settings.cache_max_size}")

    detector = init_threat_detector(settings)

    # Load the classifier without blocking startup; predictions use the
    # fallback until it is ready
    warm_up_task = None
    if settings.warm_up_on_startup:
        warm_up_task = asyncio.create_task(_warm_up(detector))

    logger.info(f"{settings.app_name} API started successfully")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name} API...")

    if warm_up_task is not None and not warm_up_task.done():
        warm_up_task.cancel()

    logger.info(f"{settings.app_name} API shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Threat detection for short cybersecurity chatter messages",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

logger.info(f"CORS allowed origins: {settings.cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Include API routes
app.include_router(get_api_router())


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint - API info."""
    return {
        "name": f"{settings.app_name} API",
        "description": "Threat detection for short cybersecurity chatter messages",
        "version": settings.app_version,
        "docs": "/docs",
    }


# Root-level health check (for Docker/K8s)
@app.get("/health")
async def health():
    """Basic health check."""
    return {
        "status": "healthy",
        "service": "threatlens-api",
        "version": settings.app_version,
        "model_ready": get_threat_detector().is_ready,
    }


# Error handlers
@app.exception_handler(BatchTooLargeError)
async def batch_too_large_handler(request, exc: BatchTooLargeError):
    """Batch above the configured limit."""
    return JSONResponse(status_code=413, content={"detail": exc.message})


@app.exception_handler(DatasetError)
async def dataset_error_handler(request, exc: DatasetError):
    """Dataset could not be built or parsed."""
    return JSONResponse(status_code=422, content={"detail": exc.message})


@app.exception_handler(ThreatLensBaseException)
async def threatlens_exception_handler(request, exc: ThreatLensBaseException):
    """Other application errors."""
    logger.error(f"Unhandled application error: {exc.message}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": exc.message if settings.debug else "An error occurred",
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if settings.debug else "An error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
