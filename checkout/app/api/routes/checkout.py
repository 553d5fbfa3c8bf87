"""Checkout session endpoints - create, edit, navigate and submit."""

import logging
import uuid
from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from checkout.app.adapters.base import (
    BackendUnavailableError,
    BookingBackend,
    DatesUnavailableError,
    PropertyNotFoundError,
)
from checkout.app.api.deps import (
    get_addon_ledger,
    get_backend,
    get_protection,
    get_store,
    get_submitter,
)
from checkout.app.config import get_settings
from checkout.app.db.inmemory import InMemoryCheckoutStore
from checkout.app.models.agreement import Addendum
from checkout.app.models.common import STEP_ORDER, BookingStep, PaymentOption
from checkout.app.models.extras import AddonSelection
from checkout.app.models.guest import GuestInfo, PartyComposition
from checkout.app.models.payment import PaymentAuthorization, PaymentPlan
from checkout.app.models.quote import DateRange, PricingQuote
from checkout.app.models.reservation import SubmissionFailed, SubmissionSucceeded
from checkout.app.models.violations import Violation
from checkout.app.orchestration.agreement import AgreementValidationError
from checkout.app.orchestration.steps import (
    BookingStepMachine,
    CheckoutClosedError,
    InvalidDateRangeError,
    StepIncompleteError,
    StepNavigationError,
)
from checkout.app.orchestration.submitter import ReservationSubmitter
from checkout.app.pricing.addons import AddonLedger, UnknownAddonError
from checkout.app.pricing.protection import ProtectionCalculator
from checkout.app.pricing.totals import PriceBreakdown, loyalty_points
from checkout.app.utils.logging import StructuredCheckoutLogger
from checkout.app.utils.metrics import PrometheusCheckoutMetrics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/checkouts", tags=["checkouts"])


class CreateCheckoutRequest(BaseModel):
    """Request body for POST /checkouts."""

    property_slug: str = Field(..., min_length=1)
    party: PartyComposition | None = None


class DatesRequest(BaseModel):
    check_in: date
    check_out: date


class AddonsRequest(BaseModel):
    selections: list[AddonSelection] = Field(default_factory=list)


class ProtectionRequest(BaseModel):
    """Selected plan id; null declines protection."""

    plan_id: str | None = None


class AgreementRequest(BaseModel):
    signature: str
    accepted_addendum_ids: list[str] = Field(default_factory=list)


class PaymentOptionRequest(BaseModel):
    option: PaymentOption


class SubmitRequest(BaseModel):
    """Payment token from the payment form."""

    token: str | None = None


class CheckoutResponse(BaseModel):
    """Snapshot of a checkout session."""

    draft_id: str
    property_slug: str
    current_step: BookingStep
    completed_steps: list[BookingStep]
    date_range: DateRange | None
    quote: PricingQuote | None
    addons: list[AddonSelection]
    insurance_plan_id: str | None
    guest: GuestInfo
    party: PartyComposition
    addenda: list[Addendum]
    signed: bool
    payment_option: PaymentOption
    currency: str
    price: PriceBreakdown
    payment_plan: PaymentPlan
    loyalty_points: int
    violations: list[Violation]
    closed: bool


def _snapshot(machine: BookingStepMachine) -> CheckoutResponse:
    draft = machine.draft
    breakdown = machine.breakdown()
    return CheckoutResponse(
        draft_id=str(draft.draft_id),
        property_slug=draft.listing.slug,
        current_step=machine.current_step,
        completed_steps=[s for s in STEP_ORDER if machine.is_step_complete(s)],
        date_range=draft.date_range,
        quote=draft.quote,
        addons=list(draft.addons),
        insurance_plan_id=breakdown.insurance_plan_id,
        guest=draft.guest,
        party=draft.party,
        addenda=machine.addenda,
        signed=machine.agreement is not None,
        payment_option=draft.payment_option,
        currency=get_settings().currency,
        price=breakdown,
        payment_plan=machine.payment_plan(),
        loyalty_points=loyalty_points(
            breakdown.grand_total_cents, get_settings().loyalty_points_per_unit
        ),
        violations=machine.validate_step(),
        closed=machine.closed,
    )


def _error(
    status_code: int, code: str, message: str, violations: list[Violation] | None = None
) -> HTTPException:
    detail: dict[str, Any] = {"code": code, "message": message}
    if violations:
        detail["violations"] = [v.model_dump(mode="json") for v in violations]
    return HTTPException(status_code=status_code, detail=detail)


def _get_machine(draft_id: uuid.UUID, store: InMemoryCheckoutStore) -> BookingStepMachine:
    machine = store.get(draft_id)
    if machine is None:
        raise _error(status.HTTP_404_NOT_FOUND, "CHECKOUT_NOT_FOUND", f"Checkout {draft_id} not found")
    return machine


Store = Annotated[InMemoryCheckoutStore, Depends(get_store)]


@router.post("", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def create_checkout(
    request: CreateCheckoutRequest,
    store: Store,
    backend: Annotated[BookingBackend, Depends(get_backend)],
    ledger: Annotated[AddonLedger, Depends(get_addon_ledger)],
    protection: Annotated[ProtectionCalculator, Depends(get_protection)],
) -> CheckoutResponse:
    """Open a checkout for a property."""
    try:
        listing = await backend.get_property(request.property_slug)
    except PropertyNotFoundError as e:
        raise _error(status.HTTP_404_NOT_FOUND, "PROPERTY_NOT_FOUND", str(e)) from e
    except BackendUnavailableError as e:
        raise _error(status.HTTP_503_SERVICE_UNAVAILABLE, "BACKEND_UNAVAILABLE", str(e)) from e

    machine = BookingStepMachine.start(
        listing,
        addon_ledger=ledger,
        protection=protection,
        deposit_rate=get_settings().deposit_rate,
        metrics=PrometheusCheckoutMetrics(),
        logger=StructuredCheckoutLogger(),
    )
    if request.party is not None:
        machine.set_party(request.party)

    store.add(machine)
    logger.info("Checkout %s opened for %s", machine.draft.draft_id, listing.slug)
    return _snapshot(machine)


@router.get("/{draft_id}", response_model=CheckoutResponse)
async def get_checkout(draft_id: uuid.UUID, store: Store) -> CheckoutResponse:
    return _snapshot(_get_machine(draft_id, store))


@router.put("/{draft_id}/dates", response_model=CheckoutResponse)
async def put_dates(
    draft_id: uuid.UUID,
    request: DatesRequest,
    store: Store,
    backend: Annotated[BookingBackend, Depends(get_backend)],
) -> CheckoutResponse:
    """Quote the requested stay and apply it to the draft."""
    machine = _get_machine(draft_id, store)
    try:
        await machine.select_dates(backend, request.check_in, request.check_out)
    except InvalidDateRangeError as e:
        raise _error(
            status.HTTP_422_UNPROCESSABLE_ENTITY, "INVALID_DATE_RANGE", str(e), e.violations
        ) from e
    except DatesUnavailableError as e:
        raise _error(status.HTTP_409_CONFLICT, "DATES_UNAVAILABLE", str(e)) from e
    except BackendUnavailableError as e:
        raise _error(status.HTTP_503_SERVICE_UNAVAILABLE, "BACKEND_UNAVAILABLE", str(e)) from e
    except CheckoutClosedError as e:
        raise _error(status.HTTP_409_CONFLICT, "CHECKOUT_CLOSED", str(e)) from e
    return _snapshot(machine)


@router.put("/{draft_id}/party", response_model=CheckoutResponse)
async def put_party(draft_id: uuid.UUID, request: PartyComposition, store: Store) -> CheckoutResponse:
    machine = _get_machine(draft_id, store)
    try:
        machine.set_party(request)
    except CheckoutClosedError as e:
        raise _error(status.HTTP_409_CONFLICT, "CHECKOUT_CLOSED", str(e)) from e
    return _snapshot(machine)


@router.put("/{draft_id}/addons", response_model=CheckoutResponse)
async def put_addons(draft_id: uuid.UUID, request: AddonsRequest, store: Store) -> CheckoutResponse:
    machine = _get_machine(draft_id, store)
    try:
        machine.set_addons(request.selections)
    except UnknownAddonError as e:
        raise _error(status.HTTP_400_BAD_REQUEST, "UNKNOWN_ADDON", str(e)) from e
    except ValueError as e:
        raise _error(status.HTTP_400_BAD_REQUEST, "INVALID_ADDONS", str(e)) from e
    except CheckoutClosedError as e:
        raise _error(status.HTTP_409_CONFLICT, "CHECKOUT_CLOSED", str(e)) from e
    return _snapshot(machine)


@router.put("/{draft_id}/guest", response_model=CheckoutResponse)
async def put_guest(draft_id: uuid.UUID, request: GuestInfo, store: Store) -> CheckoutResponse:
    machine = _get_machine(draft_id, store)
    try:
        machine.set_guest_info(request)
    except CheckoutClosedError as e:
        raise _error(status.HTTP_409_CONFLICT, "CHECKOUT_CLOSED", str(e)) from e
    return _snapshot(machine)


@router.put("/{draft_id}/protection", response_model=CheckoutResponse)
async def put_protection(
    draft_id: uuid.UUID, request: ProtectionRequest, store: Store
) -> CheckoutResponse:
    machine = _get_machine(draft_id, store)
    try:
        machine.select_insurance(request.plan_id)
    except KeyError as e:
        raise _error(status.HTTP_400_BAD_REQUEST, "UNKNOWN_PLAN", f"Unknown plan: {request.plan_id}") from e
    except CheckoutClosedError as e:
        raise _error(status.HTTP_409_CONFLICT, "CHECKOUT_CLOSED", str(e)) from e
    return _snapshot(machine)


@router.put("/{draft_id}/agreement", response_model=CheckoutResponse)
async def put_agreement(
    draft_id: uuid.UUID, request: AgreementRequest, store: Store
) -> CheckoutResponse:
    machine = _get_machine(draft_id, store)
    try:
        machine.sign_agreement(request.signature, request.accepted_addendum_ids)
    except AgreementValidationError as e:
        raise _error(
            status.HTTP_422_UNPROCESSABLE_ENTITY, "AGREEMENT_INVALID", str(e), e.violations
        ) from e
    except CheckoutClosedError as e:
        raise _error(status.HTTP_409_CONFLICT, "CHECKOUT_CLOSED", str(e)) from e
    return _snapshot(machine)


@router.put("/{draft_id}/payment-option", response_model=CheckoutResponse)
async def put_payment_option(
    draft_id: uuid.UUID, request: PaymentOptionRequest, store: Store
) -> CheckoutResponse:
    machine = _get_machine(draft_id, store)
    try:
        machine.set_payment_option(request.option)
    except CheckoutClosedError as e:
        raise _error(status.HTTP_409_CONFLICT, "CHECKOUT_CLOSED", str(e)) from e
    return _snapshot(machine)


@router.post("/{draft_id}/next", response_model=CheckoutResponse)
async def next_step(draft_id: uuid.UUID, store: Store) -> CheckoutResponse:
    machine = _get_machine(draft_id, store)
    try:
        machine.go_next()
    except StepIncompleteError as e:
        raise _error(
            status.HTTP_422_UNPROCESSABLE_ENTITY, "STEP_INCOMPLETE", str(e), e.violations
        ) from e
    except (StepNavigationError, CheckoutClosedError) as e:
        raise _error(status.HTTP_409_CONFLICT, "NAVIGATION_REFUSED", str(e)) from e
    return _snapshot(machine)


@router.post("/{draft_id}/back", response_model=CheckoutResponse)
async def previous_step(draft_id: uuid.UUID, store: Store) -> CheckoutResponse:
    machine = _get_machine(draft_id, store)
    try:
        machine.go_back()
    except CheckoutClosedError as e:
        raise _error(status.HTTP_409_CONFLICT, "CHECKOUT_CLOSED", str(e)) from e
    return _snapshot(machine)


@router.post("/{draft_id}/goto/{step}", response_model=CheckoutResponse)
async def goto_step(draft_id: uuid.UUID, step: BookingStep, store: Store) -> CheckoutResponse:
    """Breadcrumb navigation, backwards only."""
    machine = _get_machine(draft_id, store)
    try:
        machine.go_to(step)
    except (StepNavigationError, CheckoutClosedError) as e:
        raise _error(status.HTTP_409_CONFLICT, "NAVIGATION_REFUSED", str(e)) from e
    return _snapshot(machine)


_FAILURE_STATUS = {
    "validation": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "unavailable": status.HTTP_409_CONFLICT,
    "payment": status.HTTP_402_PAYMENT_REQUIRED,
    "network": status.HTTP_503_SERVICE_UNAVAILABLE,
    "rejected": status.HTTP_400_BAD_REQUEST,
}


@router.post("/{draft_id}/submit")
async def submit_checkout(
    draft_id: uuid.UUID,
    request: SubmitRequest,
    store: Store,
    submitter: Annotated[ReservationSubmitter, Depends(get_submitter)],
) -> JSONResponse:
    """Create the reservation.

    Returns:
        201 with the reservation id on success; the session is discarded
        4xx/5xx with the failure kind otherwise; the session is kept
    """
    machine = _get_machine(draft_id, store)
    if machine.closed:
        raise _error(status.HTTP_409_CONFLICT, "CHECKOUT_CLOSED", "Checkout is already complete")

    authorization = PaymentAuthorization(token=request.token) if request.token else None
    result = await submitter.submit(machine, authorization)

    if isinstance(result, SubmissionSucceeded):
        store.discard(draft_id)
        status_code = status.HTTP_201_CREATED
    elif isinstance(result, SubmissionFailed):
        status_code = _FAILURE_STATUS[result.kind]
    else:
        status_code = status.HTTP_409_CONFLICT

    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))
