"""
FastAPI application entry point.

Run with: uvicorn sharesphere.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sharesphere._version import VERSION
from sharesphere.database import init_db

# Import models to ensure they're registered with SQLAlchemy
from sharesphere.models import (  # noqa: F401
    Broker,
    Company,
    Holding,
    Share,
    Shareholder,
    StockExchange,
    Trade,
)
from sharesphere.routers import admin_router, portfolio_router, trading_router
from sharesphere import telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    Startup: Create database tables if they don't exist, initialize telemetry.
    """
    logging.basicConfig(level=logging.INFO)

    await init_db()
    logger.info("Database initialized")

    if telemetry.setup_telemetry():
        # Attach OTLP handler to root logger for log export
        handler = telemetry.get_log_handler()
        if handler:
            logging.getLogger().addHandler(handler)
        logger.info("Telemetry initialized (OTLP metrics + logs enabled)")
    else:
        logger.info("Telemetry disabled")

    yield

    logger.info("Application shutting down")


app = FastAPI(
    title="ShareSphere API",
    description="Share trading for shareholders through licensed brokers",
    version=VERSION,
    lifespan=lifespan,
)


# Admin routes stay at /admin (no API versioning for admin)
app.include_router(admin_router, prefix="/admin", tags=["admin"])
app.include_router(trading_router, prefix="/api/v1", tags=["trading"])
app.include_router(portfolio_router, prefix="/api/v1", tags=["portfolio"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/api/version")
async def get_version():
    """Get API version information."""
    return {
        "version": VERSION,
        "api_version": "v1",
    }
