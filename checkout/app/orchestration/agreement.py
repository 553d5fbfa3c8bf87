"""Lease agreement gate: addenda selection and signature capture."""

import logging
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from checkout.app.models.agreement import Addendum, Agreement, AgreementTerms
from checkout.app.models.common import BookingStep
from checkout.app.models.guest import PartyComposition
from checkout.app.models.property import Property
from checkout.app.models.quote import DateRange
from checkout.app.models.violations import Violation, ViolationKind
from checkout.app.orchestration.state import BookingDraft
from checkout.app.verification.verifiers import verify_addenda_accepted, verify_agreement

logger = logging.getLogger(__name__)

POOL_AMENITIES = ("pool", "hot-tub")

PET_POLICY = Addendum(
    id="pet-policy",
    title="Pet Policy Addendum",
    content="""PET POLICY

1. AUTHORIZED PETS: Only pets registered at booking are allowed on the premises.
2. PET FEE: The pet fee is non-refundable and covers extra cleaning, not damages.
3. PET AREAS: Pets stay off furniture and beds and out of the pool area.
4. WASTE: Pet waste must be picked up and disposed of in outdoor bins.
5. SUPERVISION: Pets may not be left unattended in the property.
6. DAMAGES: The guest is responsible for any damage caused by pets.
7. NOISE: Excessive barking may end the rental without refund.""",
    required=True,
)

POOL_RULES = Addendum(
    id="pool-rules",
    title="Pool/Hot Tub Rules",
    content="""POOL AND HOT TUB RULES

1. NO LIFEGUARD: Swim at your own risk. Children must be supervised by an adult.
2. HOURS: Pool and hot tub may be used from 8:00 AM to 10:00 PM.
3. GATE: Keep the pool gate closed and latched when not in use.
4. NO GLASS: Glass containers are not permitted in the pool area.
5. NO DIVING: Diving is prohibited.
6. NO PETS: Pets are not permitted in the pool or hot tub area.
7. LIABILITY: Guests assume all risks of pool and hot tub use.""",
    required=True,
)

PARKING = Addendum(
    id="parking",
    title="Parking Agreement",
    content="""PARKING AGREEMENT

1. DESIGNATED SPACES: Park only in the property's designated areas.
2. OVERSIZED VEHICLES: Boats, trailers and RVs need prior approval.
3. TOWING: Vehicles parked in unauthorized areas may be towed.
4. LIABILITY: The owner is not responsible for damage to or theft from vehicles.""",
    required=False,
)


def compute_addenda(listing: Property, party: PartyComposition) -> list[Addendum]:
    """Addenda in force for a property and party.

    Guests travelling with pets get the full pet package. Otherwise only
    properties with a pool or hot tub carry the pool rules.
    """
    if party.pets > 0:
        return [PET_POLICY, POOL_RULES, PARKING]
    if listing.has_amenity(*POOL_AMENITIES):
        return [POOL_RULES]
    return []


def agreement_terms(
    grand_total_cents: int, date_range: DateRange | None, party: PartyComposition
) -> AgreementTerms:
    """Fingerprint of the terms a signature is given over."""
    return AgreementTerms(
        grand_total_cents=grand_total_cents,
        check_in=date_range.check_in if date_range else None,
        check_out=date_range.check_out if date_range else None,
        pets=party.pets,
    )


class AgreementValidationError(Exception):
    """Signature attempt rejected."""

    def __init__(self, violations: list[Violation]) -> None:
        self.violations = violations
        super().__init__("; ".join(v.message for v in violations))


class AgreementGate:
    """Unsigned/signed gate over the draft's agreement.

    The signed state is the draft's ``agreement`` field; the gate only
    decides when it may be set and when it must be dropped.
    """

    def __init__(self, draft: BookingDraft) -> None:
        self._draft = draft

    @property
    def agreement(self) -> Agreement | None:
        return self._draft.agreement

    @property
    def is_signed(self) -> bool:
        return self._draft.agreement is not None

    def evaluate(self, addenda: Sequence[Addendum], terms: AgreementTerms) -> list[Violation]:
        """Blocking violations for the current agreement state."""
        return verify_agreement(self._draft.agreement, addenda, terms)

    def sign(
        self,
        signature: str,
        accepted_ids: Iterable[str],
        addenda: Sequence[Addendum],
        terms: AgreementTerms,
        signed_at: datetime | None = None,
    ) -> Agreement:
        """Capture a signature over the given terms.

        Raises:
            AgreementValidationError: Empty signature or a required addendum
                not accepted
        """
        signature = signature.strip()
        offered = {a.id for a in addenda}
        accepted = frozenset(a for a in accepted_ids if a in offered)

        violations: list[Violation] = []
        if not signature:
            violations.append(
                Violation(
                    kind=ViolationKind.AGREEMENT,
                    step=BookingStep.agreement,
                    code="SIGNATURE_MISSING",
                    message="A signature is required.",
                )
            )
        violations.extend(verify_addenda_accepted(accepted, addenda))
        if violations:
            raise AgreementValidationError(violations)

        agreement = Agreement(
            signature=signature,
            accepted_addendum_ids=accepted,
            signed_at=signed_at or datetime.now(UTC),
            terms=terms,
        )
        self._draft.agreement = agreement
        return agreement

    def invalidate(self, reason: str) -> bool:
        """Drop the signature. Returns True if one was dropped."""
        if self._draft.agreement is None:
            return False
        self._draft.agreement = None
        logger.info(
            "Agreement signature invalidated",
            extra={"structured": {"draft_id": str(self._draft.draft_id), "reason": reason}},
        )
        return True

    def refresh(self, terms: AgreementTerms) -> bool:
        """Drop the signature if it was given over different terms."""
        agreement = self._draft.agreement
        if agreement is None or agreement.terms == terms:
            return False
        return self.invalidate("terms_changed")
