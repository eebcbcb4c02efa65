"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from airgo_accounts.adapters.otp.memory import InMemoryOtpStore
from airgo_accounts.adapters.repository.postgres import run_migrations
from airgo_accounts.api.dependencies import build_email_sender
from airgo_accounts.api.errors import account_error_handler
from airgo_accounts.api.v1 import router as v1_router
from airgo_accounts.config.settings import get_settings
from airgo_accounts.domain.exceptions import AccountError
from airgo_accounts.domain.otp import OtpLedger

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "AirGo Accounts API v1 - Email-verified registration, "
        "bearer-token sessions and saved addresses",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Creates the OTP ledger and email sender for this process
    - Closes connection pool on shutdown
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    # Create connection pool with explicit sizing
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    # Run migrations
    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store shared collaborators in app state for dependency injection
    app.state.pool = pool
    app.state.otp_ledger = OtpLedger(
        InMemoryOtpStore(),
        ttl_seconds=settings.otp_ttl_seconds,
        code_length=settings.otp_length,
        lock_stripes=settings.otp_lock_stripes,
    )
    app.state.email_sender = build_email_sender(settings)

    logger.info("Application startup complete (email backend: %s)", settings.email_backend)

    yield

    # Shutdown
    logger.info("Shutting down application...")
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="airgo-accounts",
    description="AirGo Accounts API - Email-verified registration and session authentication",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.add_exception_handler(AccountError, account_error_handler)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    # Validate database connectivity
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
