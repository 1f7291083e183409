"""FastAPI application setup and configuration."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession

from padmasambhava_trips.config import settings
from padmasambhava_trips.api import api_router
from padmasambhava_trips.database import get_db, init_database, close_database
from padmasambhava_trips.middleware import (
    ErrorHandlerMiddleware,
    ValidationMiddleware,
    LoggingMiddleware,
    register_exception_handlers,
)
from padmasambhava_trips.utils.health_check import get_health_status
from padmasambhava_trips.utils.logging_config import setup_logging

# Set up logging
setup_logging(
    log_level="DEBUG" if settings.debug else settings.log_level,
    log_file=settings.log_file,
    enable_json_logging=settings.enable_json_logging or settings.environment == "production",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger.info("Starting Padmasambhava Trips API")
    await init_database()
    yield
    logger.info("Shutting down Padmasambhava Trips API")
    await close_database()


app = FastAPI(
    title="Padmasambhava Trips API",
    description="""
    ## Padmasambhava Trips

    Booking backend for the travel storefront and its admin console.

    ### Key Features

    * **Bookings**: public booking form submissions with sequential `BK######` codes
    * **Booking console**: filtered, searchable, paginated booking lists, status updates and deletion
    * **Dashboard statistics**: booking counts per status and revenue
    * **Custom trips**: "design my trip" inquiries with quotes and admin notes

    ### Authentication

    Admin endpoints accept a JWT either as `Authorization: Bearer <token>` or
    in the `jwt` cookie set by `POST /api/v1/auth/login`.

    ### Responses

    Successful responses use `{"status": "success", "data": {...}}`. Failures use:

    ```json
    {"status": "fail", "message": "Booking not found"}
    ```

    `fail` marks client errors and `error` marks server errors.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {
            "name": "authentication",
            "description": "Admin login, logout and profile"
        },
        {
            "name": "bookings",
            "description": "Trip booking lifecycle and dashboard statistics"
        },
        {
            "name": "custom-trips",
            "description": "Custom trip inquiries"
        },
        {
            "name": "health",
            "description": "System health and monitoring endpoints"
        }
    ],
    lifespan=lifespan,
)

register_exception_handlers(app)

# Middleware added last runs first

# 1. Error handling (innermost, so the responses it builds still get logged and tagged)
app.add_middleware(
    ErrorHandlerMiddleware,
    debug=settings.debug
)

# 2. Request validation
app.add_middleware(
    ValidationMiddleware,
    max_request_size=settings.max_request_size
)

# 3. Logging
if settings.enable_request_logging:
    app.add_middleware(
        LoggingMiddleware,
        log_requests=True,
        log_responses=True,
    )

# 4. CORS (outermost)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
    expose_headers=settings.cors_expose_headers
)

# Include API routes
app.include_router(api_router)


@app.get("/", tags=["health"])
async def root():
    """Root endpoint for API information."""
    return {
        "message": "Padmasambhava Trips API",
        "version": "1.0.0",
        "docs_url": "/docs",
        "status": "operational"
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Basic health check endpoint.

    Use this endpoint for simple uptime monitoring.
    """
    return {"status": "healthy", "service": "padmasambhava-trips"}


@app.get("/health/detailed", tags=["health"])
async def detailed_health_check(db: AsyncSession = Depends(get_db)):
    """
    Detailed health check with service dependencies.

    Reports database connectivity and the Redis statistics cache.
    """
    return await get_health_status(db)
