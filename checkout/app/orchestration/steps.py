"""Checkout step machine.

Drives a BookingDraft through the fixed step order
dates -> addons -> guests -> protection -> agreement -> payment.
Forward moves are gated on the current step being complete; backward moves
are free and never clear data. An edit that drops the signature while past
the agreement step sends the machine back to it. Prices are derived from
the draft on every read through ``pricing.totals``.
"""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from checkout.app.adapters.base import DatesUnavailableError, PricingLookup
from checkout.app.models.agreement import Addendum, Agreement, AgreementTerms
from checkout.app.models.common import STEP_ORDER, BookingStep, PaymentOption
from checkout.app.models.extras import AddonSelection
from checkout.app.models.guest import GuestInfo, PartyComposition
from checkout.app.models.payment import PaymentAuthorization, PaymentPlan
from checkout.app.models.property import Property
from checkout.app.models.quote import DateRange, PricingQuote
from checkout.app.models.reservation import (
    AgreementPayload,
    InsuranceLine,
    PaymentPayload,
    ReservationRequest,
)
from checkout.app.models.violations import Violation, ViolationKind, ViolationSeverity
from checkout.app.orchestration.agreement import (
    AgreementGate,
    agreement_terms,
    compute_addenda,
)
from checkout.app.orchestration.hooks import CheckoutLogger, CheckoutMetrics
from checkout.app.orchestration.state import BookingDraft
from checkout.app.pricing.addons import AddonLedger
from checkout.app.pricing.payment_plans import DEFAULT_DEPOSIT_RATE, compute_payment_plan
from checkout.app.pricing.protection import ProtectionCalculator
from checkout.app.pricing.totals import PriceBreakdown, compute_price_breakdown
from checkout.app.verification.verifiers import (
    verify_dates,
    verify_guests,
    verify_payment_authorization,
)


class StepIncompleteError(Exception):
    """Forward move attempted while the current step has blocking violations."""

    def __init__(self, step: BookingStep, violations: list[Violation]) -> None:
        self.step = step
        self.violations = violations
        codes = ", ".join(v.code for v in violations)
        super().__init__(f"Step '{step.value}' is incomplete: {codes}")


class StepNavigationError(Exception):
    """Navigation to a step that is not reachable from the current one."""

    pass


class InvalidDateRangeError(ValueError):
    """Dates rejected before any quote is requested."""

    def __init__(self, violations: list[Violation]) -> None:
        self.violations = violations
        super().__init__("; ".join(v.message for v in violations))


class CheckoutClosedError(Exception):
    """The checkout already produced a reservation."""

    pass


class BookingStepMachine:
    """Owns one BookingDraft and the step it is on."""

    def __init__(
        self,
        draft: BookingDraft,
        *,
        addon_ledger: AddonLedger,
        protection: ProtectionCalculator,
        deposit_rate: Decimal = DEFAULT_DEPOSIT_RATE,
        metrics: CheckoutMetrics | None = None,
        logger: CheckoutLogger | None = None,
    ) -> None:
        self._draft = draft
        self._addon_ledger = addon_ledger
        self._protection = protection
        self._deposit_rate = deposit_rate
        self._metrics = metrics or CheckoutMetrics()
        self._logger = logger or CheckoutLogger()
        self._gate = AgreementGate(draft)
        self._step_index = 0
        self._closed = False

    @classmethod
    def start(
        cls,
        listing: Property,
        *,
        addon_ledger: AddonLedger,
        protection: ProtectionCalculator,
        **kwargs,
    ) -> "BookingStepMachine":
        """Open a fresh checkout for a property."""
        return cls(
            BookingDraft(listing=listing),
            addon_ledger=addon_ledger,
            protection=protection,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def draft(self) -> BookingDraft:
        return self._draft

    @property
    def current_step(self) -> BookingStep:
        return STEP_ORDER[self._step_index]

    @property
    def step_index(self) -> int:
        return self._step_index

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def addon_ledger(self) -> AddonLedger:
        return self._addon_ledger

    @property
    def protection(self) -> ProtectionCalculator:
        return self._protection

    @property
    def addenda(self) -> list[Addendum]:
        return compute_addenda(self._draft.listing, self._draft.party)

    @property
    def agreement(self) -> Agreement | None:
        return self._gate.agreement

    def breakdown(self) -> PriceBreakdown:
        """Price components, recomputed from the draft."""
        return compute_price_breakdown(
            self._draft.quote,
            self._draft.addons,
            self._draft.insurance_plan,
            self._addon_ledger,
        )

    @property
    def grand_total_cents(self) -> int:
        return self.breakdown().grand_total_cents

    def payment_plan(self) -> PaymentPlan:
        return compute_payment_plan(
            self.grand_total_cents,
            self._draft.payment_option,
            deposit_rate=self._deposit_rate,
        )

    def terms(self) -> AgreementTerms:
        """Fingerprint of the current terms for signature binding."""
        return agreement_terms(self.grand_total_cents, self._draft.date_range, self._draft.party)

    # ------------------------------------------------------------------
    # Step validation
    # ------------------------------------------------------------------

    def validate_step(self, step: BookingStep | None = None) -> list[Violation]:
        """Blocking violations that keep a step from completing."""
        step = step or self.current_step
        draft = self._draft

        if step == BookingStep.dates:
            violations = verify_dates(draft.date_range, draft.quote, draft.listing.min_stay_nights)
        elif step == BookingStep.guests:
            violations = verify_guests(draft.guest)
        elif step == BookingStep.agreement:
            violations = self._gate.evaluate(self.addenda, self.terms())
        else:
            # addons, protection and payment have no completion predicate
            violations = []

        return [v for v in violations if v.severity == ViolationSeverity.BLOCKING]

    def is_step_complete(self, step: BookingStep) -> bool:
        return not self.validate_step(step)

    def submission_violations(self, authorization: PaymentAuthorization | None) -> list[Violation]:
        """Everything that must hold before a reservation may be sent."""
        if self.current_step != BookingStep.payment:
            return [
                Violation(
                    kind=ViolationKind.PAYMENT,
                    step=self.current_step,
                    code="NOT_ON_PAYMENT_STEP",
                    message="Complete the previous steps before paying.",
                    details={"current_step": self.current_step.value},
                )
            ]

        violations: list[Violation] = []
        for step in STEP_ORDER:
            violations.extend(self.validate_step(step))
        violations.extend(verify_payment_authorization(authorization))
        return violations

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def go_next(self) -> BookingStep:
        """Advance one step if the current one is complete.

        Raises:
            StepIncompleteError: Current step has blocking violations
            StepNavigationError: Already on the last step
        """
        self._ensure_open()
        from_step = self.current_step
        if self._step_index == len(STEP_ORDER) - 1:
            raise StepNavigationError(f"'{from_step.value}' is the last step")

        violations = self.validate_step(from_step)
        if violations:
            to_step = STEP_ORDER[self._step_index + 1]
            for v in violations:
                self._metrics.inc_blocked(from_step.value, v.code)
            self._logger.log_transition(
                self._draft.draft_id,
                from_step.value,
                to_step.value,
                "blocked",
                [v.code for v in violations],
            )
            raise StepIncompleteError(from_step, violations)

        return self._move_to(self._step_index + 1)

    def go_back(self) -> BookingStep:
        """Retreat one step. Data entered so far is kept."""
        self._ensure_open()
        if self._step_index == 0:
            return self.current_step
        return self._move_to(self._step_index - 1)

    def go_to(self, step: BookingStep) -> BookingStep:
        """Jump back to an earlier step.

        Raises:
            StepNavigationError: Target is the current step or later
        """
        self._ensure_open()
        target = STEP_ORDER.index(step)
        if target >= self._step_index:
            raise StepNavigationError(
                f"Cannot jump from '{self.current_step.value}' to '{step.value}'"
            )
        return self._move_to(target)

    def _move_to(self, index: int) -> BookingStep:
        from_step = self.current_step
        self._step_index = index
        to_step = self.current_step

        if to_step == BookingStep.agreement:
            # addenda are recomputed on read; a signature over old terms goes
            self._gate.refresh(self.terms())

        self._metrics.inc_transition(from_step.value, to_step.value)
        self._logger.log_transition(self._draft.draft_id, from_step.value, to_step.value, "moved")
        return to_step

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_dates(self, check_in: date, check_out: date, quote: PricingQuote) -> DateRange:
        """Replace the stay dates and their quote.

        Raises:
            InvalidDateRangeError: Range is empty, too short, or the quote
                was produced for other dates
        """
        self._ensure_open()
        date_range = self._check_range(check_in, check_out)

        violations = verify_dates(date_range, quote, self._draft.listing.min_stay_nights)
        if violations:
            raise InvalidDateRangeError(violations)

        self._draft.date_range = date_range
        self._draft.quote = quote
        self._gate.invalidate("dates_changed")
        self._return_to_agreement_if_unsigned()
        return date_range

    async def select_dates(
        self, pricing: PricingLookup, check_in: date, check_out: date
    ) -> PricingQuote:
        """Quote a range through the pricing collaborator and apply it.

        Raises:
            InvalidDateRangeError: Range rejected before quoting
            DatesUnavailableError: Pricing collaborator has no availability
            BackendUnavailableError: Pricing collaborator could not be reached
        """
        self._ensure_open()
        self._check_range(check_in, check_out)

        quote = await pricing.get_quote(self._draft.listing.id, check_in, check_out)
        if quote is None:
            raise DatesUnavailableError(
                f"{check_in.isoformat()} to {check_out.isoformat()} is not available"
            )

        self.set_dates(check_in, check_out, quote)
        return quote

    def _check_range(self, check_in: date, check_out: date) -> DateRange:
        if check_out <= check_in:
            raise InvalidDateRangeError(
                [
                    Violation(
                        kind=ViolationKind.DATES,
                        step=BookingStep.dates,
                        code="DATE_RANGE_INVALID",
                        message="Check-out must be after check-in.",
                        details={
                            "check_in": check_in.isoformat(),
                            "check_out": check_out.isoformat(),
                        },
                    )
                ]
            )

        date_range = DateRange(check_in=check_in, check_out=check_out)
        min_stay = self._draft.listing.min_stay_nights
        if date_range.nights < min_stay:
            raise InvalidDateRangeError(verify_dates(date_range, None, min_stay))
        return date_range

    def invalidate_quote(self) -> None:
        """Drop the quote after an availability conflict and return to dates."""
        self._draft.quote = None
        self._gate.invalidate("dates_unavailable")
        if self._step_index != 0:
            self._move_to(0)

    def toggle_addon(self, addon_id: str) -> None:
        self._ensure_open()
        self._draft.addons = self._addon_ledger.toggle(self._draft.addons, addon_id)
        self._gate.refresh(self.terms())
        self._return_to_agreement_if_unsigned()

    def set_addon_quantity(self, addon_id: str, quantity: int) -> None:
        self._ensure_open()
        self._draft.addons = self._addon_ledger.set_quantity(self._draft.addons, addon_id, quantity)
        self._gate.refresh(self.terms())
        self._return_to_agreement_if_unsigned()

    def set_addons(self, selections: Iterable[AddonSelection]) -> None:
        """Replace the whole add-on selection.

        Raises:
            UnknownAddonError: A selection is not in the catalog
            ValueError: The same add-on is selected twice
        """
        self._ensure_open()
        self._draft.addons = self._addon_ledger.validate(list(selections))
        self._gate.refresh(self.terms())
        self._return_to_agreement_if_unsigned()

    def set_party(self, party: PartyComposition) -> None:
        self._ensure_open()
        self._draft.party = party
        self._gate.refresh(self.terms())
        self._return_to_agreement_if_unsigned()

    def _return_to_agreement_if_unsigned(self) -> None:
        """Steps after agreement are only reachable with a signature."""
        agreement_index = STEP_ORDER.index(BookingStep.agreement)
        if self._step_index > agreement_index and not self._gate.is_signed:
            self._move_to(agreement_index)

    def set_guest_info(self, guest: GuestInfo) -> None:
        self._ensure_open()
        self._draft.guest = guest

    def select_insurance(self, plan_id: str | None) -> None:
        """Select a protection plan, replacing any previous one. None declines.

        Raises:
            KeyError: Plan is not offered
        """
        self._ensure_open()
        self._draft.insurance_plan = self._protection.get_plan(plan_id) if plan_id else None
        self._gate.refresh(self.terms())
        self._return_to_agreement_if_unsigned()

    def sign_agreement(self, signature: str, accepted_addendum_ids: Iterable[str]) -> Agreement:
        """Sign over the current terms.

        Raises:
            AgreementValidationError: Empty signature or required addendum missing
        """
        self._ensure_open()
        return self._gate.sign(signature, accepted_addendum_ids, self.addenda, self.terms())

    def set_payment_option(self, option: PaymentOption) -> PaymentPlan:
        self._ensure_open()
        self._draft.payment_option = option
        return self.payment_plan()

    # ------------------------------------------------------------------
    # Submission support
    # ------------------------------------------------------------------

    def build_reservation_request(self, authorization: PaymentAuthorization) -> ReservationRequest:
        """Assemble the reservation payload from the draft.

        Only valid after ``submission_violations`` came back empty.
        """
        draft = self._draft
        if draft.date_range is None or draft.agreement is None:
            raise StepNavigationError("Draft is not ready for submission")

        breakdown = self.breakdown()
        plan = self.payment_plan()

        insurance = None
        if draft.insurance_plan is not None:
            insurance = InsuranceLine(
                plan_id=draft.insurance_plan.id,
                amount_cents=breakdown.insurance_total_cents,
            )

        return ReservationRequest(
            property_id=draft.listing.id,
            check_in=draft.date_range.check_in,
            check_out=draft.date_range.check_out,
            party=draft.party,
            guest=draft.guest,
            addons=list(draft.addons),
            insurance=insurance,
            agreement=AgreementPayload(
                signature=draft.agreement.signature,
                accepted_addendum_ids=sorted(draft.agreement.accepted_addendum_ids),
                signed_at=draft.agreement.signed_at,
            ),
            payment=PaymentPayload(
                token=authorization.token,
                amount_cents=plan.amount_due_now_cents,
                type=draft.payment_option,
            ),
            grand_total_cents=breakdown.grand_total_cents,
        )

    def close(self) -> None:
        """Mark the checkout finished; further input is refused."""
        self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise CheckoutClosedError(f"Checkout {self._draft.draft_id} is already complete")
