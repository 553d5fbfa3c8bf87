"""Prometheus metrics for the checkout engine."""

from prometheus_client import Counter, Histogram

from checkout.app.orchestration.hooks import CheckoutMetrics

# Step machine metrics
checkout_transitions_total = Counter(
    "checkout_transitions_total",
    "Total successful checkout step transitions",
    ["from_step", "to_step"],
)

checkout_blocked_transitions_total = Counter(
    "checkout_blocked_transitions_total",
    "Total checkout transitions blocked by a violation",
    ["step", "code"],
)

# Submission metrics
reservation_submissions_total = Counter(
    "reservation_submissions_total",
    "Total reservation submission attempts by outcome",
    ["outcome"],
)

reservation_submission_latency_ms = Histogram(
    "reservation_submission_latency_ms",
    "Reservation submission latency in milliseconds",
    ["outcome"],
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 4000, 8000],
)


class PrometheusCheckoutMetrics(CheckoutMetrics):
    """Prometheus-based checkout metrics implementation."""

    def inc_transition(self, from_step: str, to_step: str) -> None:
        """Count a successful step transition."""
        checkout_transitions_total.labels(from_step=from_step, to_step=to_step).inc()

    def inc_blocked(self, step: str, code: str) -> None:
        """Count a blocked transition."""
        checkout_blocked_transitions_total.labels(step=step, code=code).inc()

    def record_submission(self, outcome: str, latency_ms: float) -> None:
        """Record submission outcome and latency."""
        reservation_submissions_total.labels(outcome=outcome).inc()
        reservation_submission_latency_ms.labels(outcome=outcome).observe(latency_ms)
