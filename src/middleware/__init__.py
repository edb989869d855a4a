"""
HTTP middleware: rate limiting.
"""
from .slowapi_limiter import (
    limiter,
    create_limiter,
    get_request_identifier,
    rate_limit_exceeded_handler,
    setup_rate_limiting,
)

__all__ = [
    "limiter",
    "create_limiter",
    "get_request_identifier",
    "rate_limit_exceeded_handler",
    "setup_rate_limiting",
]
