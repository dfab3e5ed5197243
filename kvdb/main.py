"""
kvdb Application Entry Point

FastAPI application main entry, including router registration and application configuration.
"""

import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kvdb.api.keys import router as keys_router
from kvdb.common.cors import build_cors_options
from kvdb.common.errors import AppError
from kvdb.config import get_settings
from kvdb.db.session import init_db
from kvdb.logging_config import setup_logging
from kvdb.middleware.rate_limit import RateLimitMiddleware, TokenBucket
from kvdb.scheduler import shutdown_scheduler, start_scheduler

logger = logging.getLogger(__name__)

# Initialize logging configuration
setup_logging()


# Application Lifecycle Management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application Lifecycle Management

    Initialize database and the cleanup scheduler on startup, stop the scheduler on shutdown.
    """
    # Startup
    logger.info(f"Starting server with configuration: {get_settings().sanitized()}")
    await init_db()
    start_scheduler()
    yield
    # Shutdown
    shutdown_scheduler()


# Create FastAPI application
settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    description="Database-backed key value store",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/",
    redoc_url=None,
    openapi_url="/api-doc/openapi.json",
)

# One bucket shared by every request handled by this process
rate_limiter = TokenBucket(
    rate=settings.RATE_LIMIT_PER_SECOND,
    burst=settings.RATE_LIMIT_BURST_SIZE,
)
app.add_middleware(RateLimitMiddleware, limiter=rate_limiter)
logger.info(f"Rate limiting enabled: {settings.RATE_LIMIT_ENABLED}")

# Configure CORS (outermost, so rate limited responses also carry CORS headers)
app.add_middleware(CORSMiddleware, **build_cors_options(settings.cors_origins))


# Global Exception Handler
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """
    Handle application custom exceptions

    In production mode, error details are hidden to prevent information leakage.
    """
    settings = get_settings()
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(include_details=settings.DEBUG),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """
    Handle malformed requests (missing parameters, wrong body types)

    Rendered in the same error envelope as application errors.
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": {
                "message": "Invalid request",
                "type": "validation_error",
                "code": "invalid_request",
                "details": {"errors": jsonable_encoder(exc.errors())},
            },
            "success": False,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions

    In production mode, stack traces and error details are logged but not returned to clients.
    """
    settings = get_settings()
    logger.error(
        "Uncaught exception: %s\nPath: %s\nTraceback:\n%s",
        str(exc),
        request.url.path,
        traceback.format_exc(),
    )

    if settings.DEBUG:
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "message": str(exc),
                    "type": type(exc).__name__,
                    "code": "internal_error",
                    "traceback": traceback.format_exc().split("\n"),
                },
                "success": False,
            },
        )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "message": "Internal server error",
                "type": "internal_error",
                "code": "internal_error",
            },
            "success": False,
        },
    )


# Health Check Endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health Check

    Used for service liveness probe.
    """
    return {"status": "healthy"}


app.include_router(keys_router)


def run() -> None:
    """Console entry point: serve the app on LISTEN_ON"""
    import uvicorn

    uvicorn.run(
        "kvdb.main:app",
        host=settings.listen_host,
        port=settings.listen_port,
        reload=settings.DEBUG,
        log_config=None,
    )


if __name__ == "__main__":
    run()
