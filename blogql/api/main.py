"""
BlogQL API - Main FastAPI Application.

Provides:
- GraphQL endpoint (/graphql) for accounts and posts
- Post image upload (/post-image) and static serving (/images)
- Health check
"""

import logging
import os
from datetime import datetime, timezone
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from blogql import __version__
from blogql.api.dependencies import cleanup, get_db, get_image_store
from blogql.api.middleware import AuthMiddleware, RequestLoggingMiddleware
from blogql.api.routes import images_router
from blogql.api.schemas import ErrorResponse, HealthResponse
from blogql.config.settings import get_settings
from blogql.graphql import get_graphql_router


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format=settings.log_format,
)
logger = logging.getLogger(__name__)


API_VERSION = __version__


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    logger.info("Starting BlogQL API...")

    try:
        db = get_db()
        logger.info(f"Database connected: {db.db_name}")
    except RuntimeError as e:
        logger.warning(f"Database not available: {e}")

    if not get_settings().jwt_secret:
        logger.warning("JWT_SECRET not configured: log in will fail and all callers are anonymous")

    yield

    logger.info("Shutting down BlogQL API...")
    cleanup()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title="BlogQL API",
        description="GraphQL API for accounts and blog posts.",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Order matters - last added is outermost, so the caller is known when logging
    app.add_middleware(AuthMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(images_router)

    graphql_router = get_graphql_router(get_db=get_db, get_images=get_image_store)
    app.include_router(graphql_router, prefix="/graphql")

    app.mount(
        "/images",
        StaticFiles(directory=settings.images_dir, check_dir=False),
        name="images",
    )

    @app.get("/", tags=["root"])
    async def root():
        """API root - returns basic info."""
        return {
            "name": "BlogQL API",
            "version": API_VERSION,
            "graphql": "/graphql",
            "health": "/health",
        }

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["health"]
    )
    async def health_check():
        """
        Health check endpoint.

        Returns the API status and database connection state.
        """
        try:
            db = get_db()
            db_connected = db.ping()
        except RuntimeError:
            db_connected = False

        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            database_connected=db_connected,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        error = ErrorResponse(
            error="Internal server error",
            detail=str(exc) if os.getenv("DEBUG") else None,
            code="INTERNAL_ERROR",
        )
        return JSONResponse(status_code=500, content=error.model_dump())

    return app


app = create_app()


# Entry point for running with uvicorn
if __name__ == "__main__":
    import uvicorn

    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    reload = os.getenv("DEBUG", "false").lower() == "true"

    uvicorn.run(
        "blogql.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower()
    )
