"""
Gated API - Main FastAPI Application.

Exposes the wardrobe, order-tracking and drop actions of the frontend on top
of the optimistic sync layer.
"""

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gated.utils.logging import setup_logging

# Load environment variables
load_dotenv()

# Configure logging early
setup_logging("gated-api")

logger = logging.getLogger(__name__)


def _init_database() -> bool:
    """Initialize the store connection; tables are created when missing."""
    from gated.db import DatabaseConnection

    try:
        DatabaseConnection.initialize(create_tables=True)
        logger.info("Database: connected")
        return True
    except Exception as e:
        logger.error("Database: failed to connect - %s", e)
        return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    from gated.db import DatabaseConnection, SqlRemoteStore
    from gated.sync.session import SessionRegistry
    from gated.tracking.settings import LocalSettings

    logger.info("Starting Gated API...")
    db_initialized = _init_database()

    app.state.sessions = SessionRegistry(SqlRemoteStore())
    app.state.settings = LocalSettings()

    yield

    # Let in-flight store writes settle before the pool goes away
    await app.state.sessions.close()

    if db_initialized:
        DatabaseConnection.close()
        logger.info("Database: connection closed")

    logger.info("Shutting down Gated API...")


# OpenAPI tag descriptions (shown in /docs and /openapi.json)
OPENAPI_TAGS = [
    {
        "name": "session",
        "description": "Sign in/out and one-time notices (requires X-User-ID header)",
    },
    {
        "name": "garments",
        "description": "Wardrobe collection (requires an active session)",
    },
    {
        "name": "orders",
        "description": "Tracked orders with live or simulated carrier status",
    },
    {
        "name": "drops",
        "description": "Followed product releases",
    },
    {
        "name": "settings",
        "description": "Client-local settings such as the tracking webhook",
    },
    {
        "name": "system",
        "description": "System health and information endpoints",
    },
]

app = FastAPI(
    title="Gated API",
    description=(
        "Wardrobe, package tracking and release calendar.\n\n"
        "**User scoping:** every collection endpoint requires an `X-User-ID` header "
        "(UUID) and an active session (`POST /api/v1/session`).\n\n"
        "**Writes are optimistic:** create endpoints answer 202 with a temporary "
        "id; failures surface later through `GET /api/v1/notices`."
    ),
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["system"], operation_id="getServiceInfo")
async def root():
    """Return basic information about the API service."""
    return {
        "service": "Gated API",
        "version": "0.1.0",
        "status": "operational",
    }


@app.get("/health", tags=["system"], operation_id="healthCheck")
async def health_check():
    """Check service health status."""
    from gated.db import DatabaseConnection

    return {
        "status": "healthy",
        "service": "gated-api",
        "environment": os.getenv("GATED_ENV", "local"),
        "database": (
            "connected" if DatabaseConnection.is_initialized() else "disconnected"
        ),
    }


# Import and include routers
from gated.api.routes import drops, garments, orders, session, settings

app.include_router(session.router, prefix="/api/v1", tags=["session"])
app.include_router(garments.router, prefix="/api/v1", tags=["garments"])
app.include_router(orders.router, prefix="/api/v1", tags=["orders"])
app.include_router(drops.router, prefix="/api/v1", tags=["drops"])
app.include_router(settings.router, prefix="/api/v1", tags=["settings"])
