"""
TaskFlow API - Main Application Entry Point

FastAPI application serving the task tracker REST API under /api.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from .database import Database
from .integrations.telegram import TelegramNotifier
from .middleware.slowapi_limiter import setup_rate_limiting
from .monitoring import metrics_middleware
from .utils.background_tasks import wait_for_background_tasks
from .web import api_router, health_routes, metrics_router
from .web.errors import register_exception_handlers

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


def check_token_secret():
    """Refuse the built-in token secret in production, warn elsewhere."""
    if not settings.uses_insecure_token_secret:
        return

    if settings.environment == "production":
        raise RuntimeError("TOKEN_SECRET must be set in production")

    logger.warning("TOKEN_SECRET not set - using an insecure development secret")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown."""
    # Startup
    logger.info(f"Starting {settings.app_name} ({settings.environment})...")
    check_token_secret()

    if getattr(app.state, "database", None) is None:
        app.state.database = Database.from_settings()

    if await app.state.database.initialize():
        logger.info("Database initialized")
    else:
        logger.error("Database failed to initialize (will retry on first request)")

    yield

    # Shutdown
    logger.info("Shutting down...")

    try:
        await wait_for_background_tasks()
    except Exception as e:
        logger.warning(f"Failed to drain background tasks during shutdown: {e}")

    try:
        await app.state.database.close()
    except Exception as e:
        logger.warning(f"Failed to close database during shutdown: {e}")

    logger.info("Shutdown complete")


def create_app(
    database: Optional[Database] = None,
    notifier: Optional[TelegramNotifier] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        database: Database handle to use instead of one built from settings
        notifier: Telegram notifier to use instead of the default client
    """
    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant task tracker with Telegram notifications",
        version=settings.app_version,
        lifespan=lifespan
    )

    app.state.database = database
    app.state.notifier = notifier or TelegramNotifier()

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request metrics
    app.middleware("http")(metrics_middleware)

    setup_rate_limiting(app)
    register_exception_handlers(app)

    app.include_router(api_router(), prefix=settings.api_prefix)
    app.include_router(health_routes())
    app.include_router(health_routes(settings.api_prefix))
    app.include_router(metrics_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
