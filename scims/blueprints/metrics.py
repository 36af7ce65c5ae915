"""
Prometheus metrics blueprint for observability.

Exposes /metrics with per-endpoint request metrics and the database cleanup
counters. Not authenticated: restrict it to the monitoring network.
"""
from flask import Blueprint, Response, request, g
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CollectorRegistry, CONTENT_TYPE_LATEST
from prometheus_client import multiprocess, REGISTRY
import time
import os

metrics_bp = Blueprint('metrics', __name__)

# Gunicorn workers share metrics through PROMETHEUS_MULTIPROC_DIR
MULTIPROCESS_MODE = os.environ.get('PROMETHEUS_MULTIPROC_DIR') is not None

if MULTIPROCESS_MODE:
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
    # Workers write to the shared directory, not to a registry
    _metric_registry = None
else:
    registry = REGISTRY
    _metric_registry = REGISTRY

# Admin requests are few and a cleanup can run for minutes
ADMIN_LATENCY_BUCKETS = (0.05, 0.1, 0.5, 1.0, 5.0, 15.0, 30.0, 60.0, 120.0, 300.0, 600.0)

admin_requests_total = Counter(
    'admin_requests_total',
    'HTTP requests handled, by endpoint and status',
    ['method', 'endpoint', 'http_status'],
    registry=_metric_registry
)

admin_request_duration_seconds = Histogram(
    'admin_request_duration_seconds',
    'HTTP request latency in seconds',
    ['endpoint'],
    registry=_metric_registry,
    buckets=ADMIN_LATENCY_BUCKETS
)

admin_requests_in_progress = Gauge(
    'admin_requests_in_progress',
    'HTTP requests currently being processed',
    registry=_metric_registry
)

cleanup_records_deleted_total = Counter(
    'cleanup_records_deleted_total',
    'Rows removed by database cleanup runs',
    ['step'],
    registry=_metric_registry
)

cleanup_step_errors_total = Counter(
    'cleanup_step_errors_total',
    'Database cleanup steps that reported an error',
    ['step'],
    registry=_metric_registry
)


def record_cleanup_metrics(report):
    """Add one cleanup report's per-step results to the cleanup counters."""
    for step, result in report.get('results', {}).items():
        if result.get('error'):
            cleanup_step_errors_total.labels(step=step).inc()
        if result.get('deleted'):
            cleanup_records_deleted_total.labels(step=step).inc(result['deleted'])


def setup_metrics_instrumentation(app):
    """
    Register request hooks that feed the request metrics.

    The in-progress gauge is released in teardown so a request that
    raises does not leave it incremented.
    """

    @app.before_request
    def start_request_timer():
        g.metrics_started_at = time.perf_counter()
        admin_requests_in_progress.inc()

    @app.after_request
    def observe_response(response):
        started_at = g.get('metrics_started_at')
        if started_at is None:
            return response

        endpoint = request.endpoint or 'unknown'
        admin_request_duration_seconds.labels(endpoint=endpoint).observe(time.perf_counter() - started_at)
        admin_requests_total.labels(
            method=request.method,
            endpoint=endpoint,
            http_status=response.status_code
        ).inc()
        return response

    @app.teardown_request
    def release_in_progress(exception=None):
        if g.pop('metrics_started_at', None) is not None:
            admin_requests_in_progress.dec()


@metrics_bp.route('/metrics')
def metrics():
    """Prometheus exposition of every registered metric."""
    return Response(generate_latest(registry), mimetype=CONTENT_TYPE_LATEST)
