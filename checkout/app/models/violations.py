"""Violation models - reasons a checkout step cannot complete."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from checkout.app.models.common import BookingStep

# JSON-serializable value types for violation details
JsonValue = str | int | float | bool | None | dict[str, Any] | list[Any]


class ViolationSeverity(str, Enum):
    """Severity levels for step violations."""

    ADVISORY = "advisory"
    BLOCKING = "blocking"


class ViolationKind(str, Enum):
    """Categories of checkout constraints."""

    DATES = "dates"
    GUEST = "guest"
    AGREEMENT = "agreement"
    PAYMENT = "payment"
    SPLIT = "split"


class Violation(BaseModel):
    """A constraint violation detected while validating a step.

    Blocking violations stop the machine from advancing; advisory ones are
    surfaced to the guest but never gate a transition.
    """

    kind: ViolationKind
    step: BookingStep | None = None
    code: str  # Machine-usable short code, e.g., "QUOTE_MISSING"
    message: str  # Human-readable description (1-2 sentences)
    severity: ViolationSeverity = ViolationSeverity.BLOCKING
    details: dict[str, JsonValue] = Field(default_factory=dict)
