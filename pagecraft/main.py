"""
PageCraft - Main Application Entry Point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pagecraft import __version__
from pagecraft.api import preview, public, websockets
from pagecraft.api.admin import admin_router, page_components
from pagecraft.core.config import Settings, get_settings
from pagecraft.core.context import AppContext
from pagecraft.middleware.security import setup_security_middleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application for the given (or environment) settings."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        # Startup
        logger.info(f"Starting {settings.app_name}...")
        logger.info(f"Environment: {settings.environment}")
        logger.info(f"Debug mode: {settings.debug}")
        context = AppContext.create(settings)
        await context.startup()
        app.state.context = context
        yield
        # Shutdown
        logger.info(f"Shutting down {settings.app_name}...")
        await context.shutdown()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Component-based page builder with live preview",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_security_middleware(app)

    # Include routers
    app.include_router(public.router)
    app.include_router(preview.router)
    app.include_router(page_components.router)
    app.include_router(websockets.router, prefix="/api")

    # Admin router
    app.include_router(admin_router, prefix="/api/admin", tags=["Admin"])

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint."""
        return {
            "name": settings.app_name,
            "version": __version__,
            "docs": "/docs",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "pagecraft.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
