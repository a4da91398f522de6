"""
Prometheus metrics for calendar optimization.

Service operation timings are fed by the @measure_operation decorator on
service methods. Metrics use a dedicated registry to avoid clashing with
a host application's default registry.
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "calendar_optimizer_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "calendar_optimizer_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "calendar_optimizer_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

suggestion_transitions_total = Counter(
    "calendar_optimizer_suggestion_transitions_total",
    "Suggestion lifecycle transitions",
    ["status"],
    registry=REGISTRY,
)


class PrometheusMetrics:
    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'CalendarOptimizationService')
            operation: Operation/method name (e.g., 'detect_gaps')
            duration: Operation duration in seconds
            status: Operation status ('success' or 'error')
            error_type: Type of error if status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()

        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def record_suggestion_transition(status: str, count: int = 1) -> None:
        if count > 0:
            suggestion_transitions_total.labels(status=status).inc(count)

    @staticmethod
    def get_metrics() -> bytes:
        return generate_latest(REGISTRY)


prometheus_metrics = PrometheusMetrics()
