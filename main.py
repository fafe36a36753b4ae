"""
Hume Connect Forms - Backend Application

FastAPI application serving the dynamic form validation engine.
Provides endpoints for form configuration management and application
submission.

Features:
    - Configurable forms per application type
    - Conditional field visibility and rule-based validation
    - Fuzzy correction of near-miss option values
    - Default form provisioning on startup and on first use

Run:
    python main.py
    # or
    uvicorn main:app --reload
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
import uvicorn

from config.settings import settings
from core import models, database
from core.schemas import HealthResponse
from services.forms import initialize_default_forms
from utils.logging import setup_logging, get_logger
from utils.exceptions import HumeConnectError
from utils.rate_limit import limiter, rate_limit_exceeded_handler

# Import Routers
from routers import applications_router, form_configurations_router

# Initialize logging
setup_logging()
logger = get_logger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events:
        - Startup: Initialize database tables and default forms
        - Shutdown: Dispose of the connection pool
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}, debug mode: {settings.DEBUG}")

    async with database.engine.begin() as conn:
        await conn.run_sync(models.Base.metadata.create_all)
        logger.info("Database tables initialized")

    if settings.INITIALIZE_DEFAULT_FORMS_ON_STARTUP:
        await initialize_default_forms()

    yield

    logger.info("Shutting down application")
    await database.engine.dispose()


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title=settings.APP_NAME,
    description="Dynamic form configuration and application validation API",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Attach rate limiter to app state
app.state.limiter = limiter


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=500)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(HumeConnectError)
async def hume_connect_exception_handler(request: Request, exc: HumeConnectError):
    """
    Handle application exceptions.

    Returns the exception's own error body with its status code.
    """
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__}: {exc.message}", extra={"details": exc.details})
    else:
        logger.warning(f"{exc.__class__.__name__}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render malformed request bodies in the shared 400 error shape."""
    details = [
        f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Validation failed", "details": details}
    )


# Rate limit exceeded handler
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


# =============================================================================
# Routers
# =============================================================================

app.include_router(form_configurations_router)
app.include_router(applications_router)


# =============================================================================
# Health Check Endpoints
# =============================================================================

@app.get("/", tags=["Health"], response_model=HealthResponse)
async def root():
    """
    Root endpoint - basic health check.

    Returns:
        dict: Simple status message
    """
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Detailed health check endpoint.

    Checks database connectivity.

    Returns:
        dict: Health status with component details
    """
    db_healthy = await database.check_database_health()

    return {
        "status": "healthy" if db_healthy else "degraded",
        "components": {
            "database": db_healthy,
        },
        "environment": settings.ENVIRONMENT,
        "version": settings.APP_VERSION
    }


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
