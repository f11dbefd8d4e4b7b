"""
Moodlog FastAPI Application

Main entry point for the Moodlog API: the public check-in feed, the
profile summary and the mood analytics dashboard.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Common library imports
from common.database import MongoDB, get_main_database, set_main_database
from common.utils import success_response

# App-specific imports
from moodlog.config import settings
from moodlog.database import DOCUMENT_MODELS
from moodlog.errors import register_exception_handlers

# Import routers
from moodlog.routers import (
    feed_router,
    map_router,
    profile_router,
    user_router,
)

# Import service initialization
from moodlog.dependencies import init_all_services


APP_VERSION = "1.0.0"

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


# =============================================================================
# Database Instance
# =============================================================================
main_db = MongoDB()


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown tasks like database connections
    and service initialization.
    """
    # Startup
    print("Starting Moodlog API...")
    settings.validate_required()

    await main_db.connect(
        uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
        document_models=DOCUMENT_MODELS,
    )
    set_main_database(main_db)
    print(f"Connected to database: {settings.MONGODB_DATABASE}")

    init_all_services(db=get_main_database().db)
    print("All services initialized successfully!")

    print("Moodlog API started successfully!")

    yield

    # Shutdown
    print("Shutting down Moodlog API...")
    await main_db.disconnect()
    print("Moodlog API shut down complete.")


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="Moodlog API",
    description="Mood check-in feed and personal mood analytics",
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

# =============================================================================
# CORS Middleware
# =============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# Error Envelope
# =============================================================================
register_exception_handlers(app)

# =============================================================================
# Include Routers
# =============================================================================
app.include_router(feed_router, tags=["Feed"])
app.include_router(map_router, tags=["Map"])
app.include_router(profile_router, tags=["Profile"])
app.include_router(user_router, tags=["User"])


# =============================================================================
# Health Check Endpoint
# =============================================================================
@app.get("/health", tags=["Health"])
async def health():
    """
    Health check endpoint.

    Returns the status of the API and database connection.
    """
    return success_response({
        "status": "ok",
        "version": APP_VERSION,
        "database": main_db.is_connected,
    })


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )
