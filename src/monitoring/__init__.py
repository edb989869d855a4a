"""
Monitoring module for Prometheus metrics.
"""
from .prometheus import (
    http_requests_total,
    http_request_duration,
    tasks_created_total,
    tasks_completed_total,
    notifications_sent_total,
    errors_total,
    rate_limit_violations_total,
    record_notification,
    render_metrics,
)

from .middleware import metrics_middleware, normalize_endpoint

__all__ = [
    'http_requests_total',
    'http_request_duration',
    'tasks_created_total',
    'tasks_completed_total',
    'notifications_sent_total',
    'errors_total',
    'rate_limit_violations_total',
    'record_notification',
    'render_metrics',
    'metrics_middleware',
    'normalize_endpoint',
]
