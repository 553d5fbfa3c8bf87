"""Reservation request payload and submission outcomes."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from checkout.app.models.common import PaymentOption
from checkout.app.models.extras import AddonSelection
from checkout.app.models.guest import GuestInfo, PartyComposition


class InsuranceLine(BaseModel):
    """Selected protection plan and its premium."""

    plan_id: str
    amount_cents: int


class AgreementPayload(BaseModel):
    """Signed lease agreement as sent to the backend."""

    signature: str
    accepted_addendum_ids: list[str]
    signed_at: datetime


class PaymentPayload(BaseModel):
    """Charge request: token plus amount collected now."""

    token: str
    amount_cents: int
    type: PaymentOption


class ReservationRequest(BaseModel):
    """Everything the reservation-creation collaborator needs."""

    property_id: str
    check_in: date
    check_out: date
    party: PartyComposition
    guest: GuestInfo
    addons: list[AddonSelection] = Field(default_factory=list)
    insurance: InsuranceLine | None = None
    agreement: AgreementPayload
    payment: PaymentPayload
    grand_total_cents: int


FailureKind = Literal["validation", "unavailable", "network", "rejected", "payment"]


class SubmissionSucceeded(BaseModel):
    """Reservation created; the checkout is over."""

    status: Literal["succeeded"] = "succeeded"
    reservation_id: str


class SubmissionFailed(BaseModel):
    """Reservation not created; the draft is kept for a retry."""

    status: Literal["failed"] = "failed"
    kind: FailureKind
    message: str
    retryable: bool


class SubmissionSuppressed(BaseModel):
    """A submission for the same draft is already in flight."""

    status: Literal["suppressed"] = "suppressed"
    message: str = "A submission for this booking is already in progress"


SubmissionResult = SubmissionSucceeded | SubmissionFailed | SubmissionSuppressed
