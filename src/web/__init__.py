"""
HTTP API routers.
"""

from fastapi import APIRouter

from . import auth, bot_config, employees, stats, tasks
from .health import health_routes, router as metrics_router


def api_router() -> APIRouter:
    """All authenticated resource routers, to be mounted under the API prefix."""
    router = APIRouter()
    router.include_router(auth.router)
    router.include_router(employees.router)
    router.include_router(tasks.router)
    router.include_router(bot_config.router)
    router.include_router(stats.router)
    return router


__all__ = ["api_router", "health_routes", "metrics_router"]
