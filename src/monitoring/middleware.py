"""
Metrics collection middleware.

Tracks HTTP request counts, response times and error responses.
"""
import time
import logging
from fastapi import Request
from .prometheus import (
    http_requests_total,
    http_request_duration,
    errors_total,
)

logger = logging.getLogger(__name__)


async def metrics_middleware(request: Request, call_next):
    """
    Collect HTTP metrics for all requests.

    Tracks:
    - Request counts by method, endpoint, status code
    - Request duration by method, endpoint
    - Error counts by status class
    """
    start_time = time.time()

    try:
        response = await call_next(request)
    except Exception as e:
        _record_error_metrics(e)
        raise

    duration = time.time() - start_time

    # Normalize endpoint path (replace IDs with placeholders)
    normalized_path = normalize_endpoint(request.url.path)

    http_requests_total.labels(
        method=request.method,
        endpoint=normalized_path,
        status=response.status_code
    ).inc()

    http_request_duration.labels(
        method=request.method,
        endpoint=normalized_path
    ).observe(duration)

    if response.status_code >= 400:
        _record_error_metrics(None, response.status_code)

    return response


def _record_error_metrics(exception: Exception = None, status_code: int = None):
    """
    Record an error in Prometheus metrics.

    Args:
        exception: Exception that occurred, if any
        status_code: HTTP status code, if applicable
    """
    error_type = "http_error"
    severity = "unknown"

    if exception:
        error_type = type(exception).__name__
        severity = "critical"
    elif status_code:
        if 400 <= status_code < 500:
            error_type = "http_4xx"
            severity = "warning"
        elif 500 <= status_code < 600:
            error_type = "http_5xx"
            severity = "critical"

    errors_total.labels(type=error_type, severity=severity).inc()


def normalize_endpoint(path: str) -> str:
    """
    Normalize endpoint paths to reduce cardinality.

    Examples:
    - /api/tasks/42 -> /api/tasks/{id}
    - /api/employees/7 -> /api/employees/{id}
    """
    normalized = []
    for part in path.split('/'):
        if part.isdigit():
            normalized.append('{id}')
        else:
            normalized.append(part)

    return '/'.join(normalized)
