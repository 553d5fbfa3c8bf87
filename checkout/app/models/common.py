"""Common types and enums shared across all models."""

from enum import Enum


class BookingStep(str, Enum):
    """Checkout steps in their strict forward order."""

    dates = "dates"
    addons = "addons"
    guests = "guests"
    protection = "protection"
    agreement = "agreement"
    payment = "payment"


STEP_ORDER: tuple[BookingStep, ...] = (
    BookingStep.dates,
    BookingStep.addons,
    BookingStep.guests,
    BookingStep.protection,
    BookingStep.agreement,
    BookingStep.payment,
)


class PaymentOption(str, Enum):
    """How the grand total is collected."""

    full = "full"
    deposit = "deposit"
    split3 = "split3"


class PriceType(str, Enum):
    """Add-on pricing basis."""

    flat = "flat"
    per_night = "per_night"
    per_day = "per_day"


class DemandLevel(str, Enum):
    """Display-only demand classification for calendar days."""

    low = "low"
    medium = "medium"
    high = "high"


class SplitStrategy(str, Enum):
    """Allocation strategy for split payments."""

    equal = "equal"
    custom = "custom"
    percentage = "percentage"


class ParticipantStatus(str, Enum):
    """Split participant lifecycle."""

    pending = "pending"
    invited = "invited"
    accepted = "accepted"
    paid = "paid"
