"""
Prometheus metrics configuration
"""
from prometheus_client import (CONTENT_TYPE_LATEST, REGISTRY, Counter, Gauge,
                               Histogram, Info, generate_latest)

# ============================================================================
# HTTP Request Metrics
# ============================================================================

http_requests_total = Counter(
    'reflect_http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'reflect_http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint', 'status_code'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
)

http_errors_total = Counter(
    'reflect_http_errors_total',
    'Total number of HTTP errors',
    ['method', 'endpoint', 'status_code', 'error_type']
)

# ============================================================================
# Database Metrics
# ============================================================================

db_queries_total = Counter(
    'reflect_db_queries_total',
    'Total number of database queries',
    ['operation']
)

db_query_duration_seconds = Histogram(
    'reflect_db_query_duration_seconds',
    'Database query duration in seconds',
    ['operation'],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0)
)

db_connections_checked_out = Gauge(
    'reflect_db_connections_checked_out',
    'Database connections currently checked out of the pool'
)

# ============================================================================
# Journal Metrics
# ============================================================================

journal_entries_total = Counter(
    'reflect_journal_entries_total',
    'Journal entry operations',
    ['operation']  # created, updated, deleted
)

journal_entries_by_mood_total = Counter(
    'reflect_journal_entries_by_mood_total',
    'Journal entries created per mood',
    ['mood']
)

collections_total = Counter(
    'reflect_collections_total',
    'Collection operations',
    ['operation']  # created, deleted
)

auth_events_total = Counter(
    'reflect_auth_events_total',
    'Authentication events',
    ['event']  # register, login, login_failed, logout
)

active_sessions = Gauge(
    'reflect_active_sessions',
    'Unexpired login sessions, refreshed on each scrape'
)

# ============================================================================
# System Info
# ============================================================================

app_info = Info(
    'reflect_app',
    'Application information'
)


def set_app_info(app_name: str, app_env: str, version: str):
    """Publish application name, environment and version"""
    app_info.info({
        'app_name': app_name,
        'app_env': app_env,
        'version': version,
    })


def get_metrics() -> bytes:
    """
    Get Prometheus metrics in text format

    Returns:
        bytes: Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get content type for Prometheus metrics"""
    return CONTENT_TYPE_LATEST
