"""
Health and metrics endpoints (no authentication).
"""

from fastapi import APIRouter, Request, Response

from config import settings
from ..monitoring import render_metrics
from ..utils.datetime_utils import utcnow

router = APIRouter(tags=["health"])


async def health_check(request: Request):
    """Liveness plus a database round trip."""
    database = getattr(request.app.state, "database", None)
    db_health = {"status": "not_configured"}
    if database is not None:
        db_health = await database.health_check()

    return {
        "status": "OK",
        "service": settings.app_name,
        "version": settings.app_version,
        "timestamp": utcnow().isoformat() + "Z",
        "database": db_health.get("status", "unknown"),
    }


@router.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    body, content_type = render_metrics()
    return Response(content=body, media_type=content_type)


def health_routes(prefix: str = "") -> APIRouter:
    """Router serving the health check under a prefix."""
    health_router = APIRouter(prefix=prefix, tags=["health"])
    health_router.add_api_route("/health", health_check, methods=["GET"])
    return health_router
