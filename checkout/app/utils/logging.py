"""Structured logging for checkout transitions and submissions."""

import logging
from typing import Any
from uuid import UUID

from checkout.app.orchestration.hooks import CheckoutLogger

logger = logging.getLogger(__name__)


class StructuredCheckoutLogger(CheckoutLogger):
    """Structured logger for the checkout engine."""

    def log_transition(
        self,
        draft_id: UUID,
        from_step: str,
        to_step: str,
        outcome: str,
        violation_codes: list[str] | None = None,
    ) -> None:
        """Log step transition with structured data."""
        log_data: dict[str, Any] = {
            "draft_id": str(draft_id),
            "from_step": from_step,
            "to_step": to_step,
            "outcome": outcome,
        }

        if violation_codes:
            log_data["violations"] = violation_codes

        log_msg = f"Checkout transition: {from_step} -> {to_step} - {outcome}"

        if outcome == "moved":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

    def log_submission(
        self,
        draft_id: UUID,
        outcome: str,
        latency_ms: float,
        amount_cents: int | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log reservation submission with structured data."""
        log_data: dict[str, Any] = {
            "draft_id": str(draft_id),
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if amount_cents is not None:
            log_data["amount_cents"] = amount_cents
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Reservation submission - {outcome}"

        if outcome == "succeeded":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
