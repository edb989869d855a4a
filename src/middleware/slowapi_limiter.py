"""
Slowapi-based rate limiting.

Applied to the credential endpoints (register/login) to slow down password
guessing. Toggled via the RATE_LIMIT_ENABLED setting.
"""
from typing import Optional

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse
import logging

from config import settings
from ..monitoring import rate_limit_violations_total, normalize_endpoint

logger = logging.getLogger(__name__)


def get_request_identifier(request: Request) -> str:
    """
    Get unique identifier for rate limiting.

    Priority:
    1. First address in X-Forwarded-For, only when TRUST_FORWARDED_FOR is set
    2. Client IP address
    """
    forwarded = request.headers.get("X-Forwarded-For") if settings.trust_forwarded_for else None
    if forwarded:
        client_ip = forwarded.split(",")[0].strip()
        if client_ip:
            return client_ip

    return get_remote_address(request)


def create_limiter(
    storage_uri: Optional[str] = None,
    enabled: Optional[bool] = None,
) -> Limiter:
    """
    Create and configure slowapi Limiter.

    Args:
        storage_uri: limits storage URI, e.g. memory:// or redis://host:6379
        enabled: Whether limits are enforced (defaults to settings)

    Returns:
        Configured Limiter instance
    """
    storage_uri = storage_uri or settings.rate_limit_storage_uri
    enabled = settings.rate_limit_enabled if enabled is None else enabled

    limiter = Limiter(
        key_func=get_request_identifier,
        storage_uri=storage_uri,
        enabled=enabled,
        headers_enabled=False,
    )

    if storage_uri.startswith("memory://"):
        logger.info("Rate limiting using in-memory storage (not distributed)")
    return limiter


# Shared limiter used by the route decorators
limiter = create_limiter()


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render a 429 in the API's error format."""
    endpoint = normalize_endpoint(request.url.path)
    rate_limit_violations_total.labels(endpoint=endpoint).inc()
    logger.warning(f"Rate limit exceeded on {endpoint} by {get_request_identifier(request)}")

    return JSONResponse(
        status_code=429,
        content={"error": f"Too many requests: {exc.detail}"},
    )


def setup_rate_limiting(app, app_limiter: Optional[Limiter] = None) -> Limiter:
    """
    Setup slowapi rate limiting on FastAPI app.

    Args:
        app: FastAPI application instance
        app_limiter: Limiter to install (defaults to the shared one)
    """
    app_limiter = app_limiter or limiter

    app.state.limiter = app_limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    if app_limiter.enabled:
        logger.info("Slowapi rate limiting enabled")
    else:
        logger.info("Slowapi rate limiting disabled")
    return app_limiter
