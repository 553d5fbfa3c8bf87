"""Verification functions for checkout step completion."""

from collections.abc import Sequence

from checkout.app.models.agreement import Addendum, Agreement, AgreementTerms
from checkout.app.models.common import BookingStep
from checkout.app.models.guest import EMAIL_PATTERN, GuestInfo
from checkout.app.models.payment import PaymentAuthorization
from checkout.app.models.quote import DateRange, PricingQuote
from checkout.app.models.violations import Violation, ViolationKind


def verify_dates(
    date_range: DateRange | None,
    quote: PricingQuote | None,
    min_stay_nights: int,
) -> list[Violation]:
    """Verify the dates step: a quote exists for a valid range.

    Args:
        date_range: Selected stay dates
        quote: Authoritative quote for those dates
        min_stay_nights: Property minimum stay

    Returns:
        List of violations (empty if the step is complete)
    """
    if date_range is None:
        return [
            Violation(
                kind=ViolationKind.DATES,
                step=BookingStep.dates,
                code="DATE_RANGE_MISSING",
                message="Select check-in and check-out dates.",
            )
        ]

    if date_range.nights < min_stay_nights:
        return [
            Violation(
                kind=ViolationKind.DATES,
                step=BookingStep.dates,
                code="MIN_STAY_NOT_MET",
                message=f"This property requires a minimum stay of {min_stay_nights} nights.",
                details={"nights": date_range.nights, "min_stay_nights": min_stay_nights},
            )
        ]

    if quote is None:
        return [
            Violation(
                kind=ViolationKind.DATES,
                step=BookingStep.dates,
                code="QUOTE_MISSING",
                message="No price is available for the selected dates.",
            )
        ]

    if not quote.covers(date_range):
        return [
            Violation(
                kind=ViolationKind.DATES,
                step=BookingStep.dates,
                code="QUOTE_MISMATCH",
                message="The price quote does not match the selected dates.",
                details={
                    "quote_check_in": quote.check_in.isoformat(),
                    "quote_check_out": quote.check_out.isoformat(),
                    "check_in": date_range.check_in.isoformat(),
                    "check_out": date_range.check_out.isoformat(),
                },
            )
        ]

    return []


def verify_guests(guest: GuestInfo) -> list[Violation]:
    """Verify the guests step: names and a well-formed email are present."""
    violations: list[Violation] = []

    if not guest.first_name.strip():
        violations.append(
            Violation(
                kind=ViolationKind.GUEST,
                step=BookingStep.guests,
                code="GUEST_FIRST_NAME_MISSING",
                message="First name is required.",
            )
        )
    if not guest.last_name.strip():
        violations.append(
            Violation(
                kind=ViolationKind.GUEST,
                step=BookingStep.guests,
                code="GUEST_LAST_NAME_MISSING",
                message="Last name is required.",
            )
        )

    email = guest.email.strip()
    if not email:
        violations.append(
            Violation(
                kind=ViolationKind.GUEST,
                step=BookingStep.guests,
                code="GUEST_EMAIL_MISSING",
                message="Email is required.",
            )
        )
    elif not EMAIL_PATTERN.match(email):
        violations.append(
            Violation(
                kind=ViolationKind.GUEST,
                step=BookingStep.guests,
                code="GUEST_EMAIL_INVALID",
                message="Enter a valid email address.",
                details={"email": email},
            )
        )

    return violations


def verify_agreement(
    agreement: Agreement | None,
    addenda: Sequence[Addendum],
    terms: AgreementTerms,
) -> list[Violation]:
    """Verify the agreement step.

    A signature counts only if it was given over the current terms and
    covers every required addendum.

    Args:
        agreement: Captured agreement, if any
        addenda: Addenda currently in force for the draft
        terms: Current terms fingerprint

    Returns:
        List of violations (empty if the step is complete)
    """
    if agreement is None:
        return [
            Violation(
                kind=ViolationKind.AGREEMENT,
                step=BookingStep.agreement,
                code="SIGNATURE_MISSING",
                message="Sign the rental agreement to continue.",
            )
        ]

    if agreement.terms != terms:
        return [
            Violation(
                kind=ViolationKind.AGREEMENT,
                step=BookingStep.agreement,
                code="SIGNATURE_STALE",
                message="The booking changed after signing. Review and sign the agreement again.",
                details={
                    "signed_total_cents": agreement.terms.grand_total_cents,
                    "current_total_cents": terms.grand_total_cents,
                },
            )
        ]

    return verify_addenda_accepted(agreement.accepted_addendum_ids, addenda)


def verify_addenda_accepted(
    accepted_ids: Sequence[str] | frozenset[str], addenda: Sequence[Addendum]
) -> list[Violation]:
    """One violation per required addendum that was not accepted."""
    accepted = set(accepted_ids)
    return [
        Violation(
            kind=ViolationKind.AGREEMENT,
            step=BookingStep.agreement,
            code="ADDENDUM_NOT_ACCEPTED",
            message=f"You must accept the {addendum.title}.",
            details={"addendum_id": addendum.id},
        )
        for addendum in addenda
        if addendum.required and addendum.id not in accepted
    ]


def verify_payment_authorization(authorization: PaymentAuthorization | None) -> list[Violation]:
    """Verify a payment token is present before submission."""
    if authorization is None or not authorization.token.strip():
        return [
            Violation(
                kind=ViolationKind.PAYMENT,
                step=BookingStep.payment,
                code="PAYMENT_TOKEN_MISSING",
                message="Enter payment details to complete the booking.",
            )
        ]
    return []
