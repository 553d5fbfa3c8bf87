"""Models package - re-exports for convenience."""

from checkout.app.models.agreement import Addendum, Agreement, AgreementTerms
from checkout.app.models.calendar import DayPrice, RangeSummary
from checkout.app.models.common import (
    STEP_ORDER,
    BookingStep,
    DemandLevel,
    ParticipantStatus,
    PaymentOption,
    PriceType,
    SplitStrategy,
)
from checkout.app.models.extras import AddonCatalogEntry, AddonLine, AddonSelection, InsurancePlan
from checkout.app.models.guest import Address, GuestInfo, PartyComposition
from checkout.app.models.payment import Installment, PaymentAuthorization, PaymentPlan
from checkout.app.models.property import Property
from checkout.app.models.quote import DateRange, NightlyRate, PricingQuote, minimum_checkout
from checkout.app.models.reservation import (
    AgreementPayload,
    InsuranceLine,
    PaymentPayload,
    ReservationRequest,
    SubmissionFailed,
    SubmissionResult,
    SubmissionSucceeded,
    SubmissionSuppressed,
)
from checkout.app.models.split import SplitParticipant
from checkout.app.models.violations import Violation, ViolationKind, ViolationSeverity

__all__ = [
    # Common
    "BookingStep",
    "STEP_ORDER",
    "PaymentOption",
    "PriceType",
    "DemandLevel",
    "SplitStrategy",
    "ParticipantStatus",
    # Calendar
    "DayPrice",
    "RangeSummary",
    # Quote
    "DateRange",
    "NightlyRate",
    "PricingQuote",
    "minimum_checkout",
    # Property
    "Property",
    # Extras
    "AddonCatalogEntry",
    "AddonSelection",
    "AddonLine",
    "InsurancePlan",
    # Guest
    "GuestInfo",
    "Address",
    "PartyComposition",
    # Agreement
    "Addendum",
    "Agreement",
    "AgreementTerms",
    # Payment
    "Installment",
    "PaymentPlan",
    "PaymentAuthorization",
    # Split
    "SplitParticipant",
    # Reservation
    "ReservationRequest",
    "InsuranceLine",
    "AgreementPayload",
    "PaymentPayload",
    "SubmissionResult",
    "SubmissionSucceeded",
    "SubmissionFailed",
    "SubmissionSuppressed",
    # Violations
    "Violation",
    "ViolationKind",
    "ViolationSeverity",
]
