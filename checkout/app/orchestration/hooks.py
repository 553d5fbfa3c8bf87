"""No-op telemetry interfaces for the checkout engine.

Concrete implementations live in ``checkout.app.utils`` (prometheus metrics,
structured logging); the engine defaults to these no-ops.
"""

from uuid import UUID


# Metrics interface (to be implemented by actual metrics system)
class CheckoutMetrics:
    """Interface for checkout metrics."""

    def inc_transition(self, from_step: str, to_step: str) -> None:
        """Count a successful step transition."""
        pass

    def inc_blocked(self, step: str, code: str) -> None:
        """Count a transition blocked by a violation."""
        pass

    def record_submission(self, outcome: str, latency_ms: float) -> None:
        """Record a reservation submission outcome and its latency."""
        pass


# Logging interface
class CheckoutLogger:
    """Interface for structured logging."""

    def log_transition(
        self,
        draft_id: UUID,
        from_step: str,
        to_step: str,
        outcome: str,
        violation_codes: list[str] | None = None,
    ) -> None:
        """Log a step transition attempt."""
        pass

    def log_submission(
        self,
        draft_id: UUID,
        outcome: str,
        latency_ms: float,
        amount_cents: int | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log a reservation submission attempt."""
        pass
