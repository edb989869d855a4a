"""
Prometheus metrics for monitoring.

Exposed on ``GET /metrics`` in the Prometheus text exposition format.
"""
from prometheus_client import Counter, Histogram, CONTENT_TYPE_LATEST, generate_latest
import logging

logger = logging.getLogger(__name__)

# HTTP Metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration',
    ['method', 'endpoint']
)

# Task Metrics
tasks_created_total = Counter(
    'tasks_created_total',
    'Total tasks created',
    ['priority']
)

tasks_completed_total = Counter(
    'tasks_completed_total',
    'Total task transitions into completed'
)

# Notification Metrics
notifications_sent_total = Counter(
    'telegram_notifications_total',
    'Telegram sendMessage attempts',
    ['kind', 'status']  # created/completed/test, success/failure
)

# Error Metrics
errors_total = Counter(
    'errors_total',
    'Total errors',
    ['type', 'severity']
)

# Rate Limiting Metrics
rate_limit_violations_total = Counter(
    'rate_limit_violations_total',
    'Total rate limit violations by endpoint',
    ['endpoint']
)


def record_notification(kind: str, success: bool):
    """Count one notification attempt."""
    notifications_sent_total.labels(
        kind=kind,
        status="success" if success else "failure"
    ).inc()


def render_metrics():
    """Current metrics as (body, content type)."""
    return generate_latest(), CONTENT_TYPE_LATEST
