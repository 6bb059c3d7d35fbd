"""
Prometheus metrics for Courtside.

HTTP metrics are fed by ``PrometheusMiddleware``; service metrics by the
``@BaseService.measure_operation`` decorator. Domain counters track bookings,
payments and outbound email. Everything lives in a dedicated registry exposed
at ``/metrics/prometheus``.
"""

from typing import Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Custom registry so tests and reloads never collide with the default one
REGISTRY = CollectorRegistry()

http_request_duration_seconds = Histogram(
    "courtside_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

http_requests_total = Counter(
    "courtside_http_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
)

http_requests_in_progress = Gauge(
    "courtside_http_requests_in_progress",
    "Number of HTTP requests currently being processed",
    ["method", "endpoint"],
    registry=REGISTRY,
)

service_operation_duration_seconds = Histogram(
    "courtside_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "courtside_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "courtside_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

bookings_total = Counter(
    "courtside_bookings_total",
    "Sessions booked, by initial status",
    ["status"],  # SCHEDULED | CONFIRMED
    registry=REGISTRY,
)

payments_total = Counter(
    "courtside_payments_total",
    "PayPal payment operations by outcome",
    ["operation", "outcome"],  # create_order|capture_order, success|failed
    registry=REGISTRY,
)

emails_sent_total = Counter(
    "courtside_emails_sent_total",
    "Outbound emails by provider and outcome",
    ["provider", "outcome"],
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Thin facade over the module-level collectors."""

    @staticmethod
    def record_http_request(method: str, endpoint: str, duration: float, status_code: int) -> None:
        labels = {"method": method, "endpoint": endpoint, "status_code": str(status_code)}
        http_request_duration_seconds.labels(**labels).observe(duration)
        http_requests_total.labels(**labels).inc()

    @staticmethod
    def track_http_request_start(method: str, endpoint: str) -> None:
        http_requests_in_progress.labels(method=method, endpoint=endpoint).inc()

    @staticmethod
    def track_http_request_end(method: str, endpoint: str) -> None:
        http_requests_in_progress.labels(method=method, endpoint=endpoint).dec()

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record a measured service call.

        Args:
            service: Service class name (e.g. 'SessionService')
            operation: Operation name (e.g. 'create_session')
            duration: Seconds spent
            status: 'success' or 'error'
            error_type: Exception class name when status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def inc_booking(status: str) -> None:
        bookings_total.labels(status=status).inc()

    @staticmethod
    def inc_payment(operation: str, outcome: str) -> None:
        payments_total.labels(operation=operation, outcome=outcome).inc()

    @staticmethod
    def inc_email(provider: str, outcome: str) -> None:
        emails_sent_total.labels(provider=provider, outcome=outcome).inc()

    @staticmethod
    def get_metrics() -> bytes:
        """Metrics in Prometheus text exposition format."""
        return cast(bytes, generate_latest(REGISTRY))

    @staticmethod
    def get_content_type() -> str:
        return cast(str, CONTENT_TYPE_LATEST)


# Singleton instance
prometheus_metrics = PrometheusMetrics()
