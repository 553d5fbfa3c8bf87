"""Split-payment ledger: divides a booking total among participants."""

import logging
import uuid
from decimal import Decimal

from checkout.app.adapters.base import InviteDispatcher, InviteOutcome
from checkout.app.models.common import ParticipantStatus, SplitStrategy
from checkout.app.models.split import SplitParticipant
from checkout.app.models.violations import Violation, ViolationKind
from checkout.app.pricing.money import allocate_equal, apply_rate, round_to_unit

logger = logging.getLogger(__name__)

PAYER_ID = "payer"

_STATUS_ORDER = (
    ParticipantStatus.pending,
    ParticipantStatus.invited,
    ParticipantStatus.accepted,
    ParticipantStatus.paid,
)


class SplitUnbalancedError(Exception):
    """Allocated amounts do not add up to the total."""

    def __init__(self, violation: Violation) -> None:
        super().__init__(violation.message)
        self.violation = violation


class ParticipantNotFoundError(LookupError):
    """No participant with the given id."""

    pass


class PayerRemovalError(Exception):
    """The payer is always part of the split."""

    pass


def _percentage_of(amount_cents: int, total_cents: int) -> float:
    if total_cents == 0:
        return 0.0
    return round(amount_cents / total_cents * 100, 2)


class SplitLedger:
    """Allocation state for one split payment.

    Participant 0 is the payer ("You"), created accepted at 100% of the total.
    """

    def __init__(
        self,
        total_cents: int,
        *,
        payer_name: str = "You",
        payer_email: str = "",
        strategy: SplitStrategy = SplitStrategy.equal,
        tolerance_cents: int = 100,
    ) -> None:
        if total_cents < 0:
            raise ValueError(f"total_cents must be >= 0, got {total_cents}")
        self._total_cents = total_cents
        self._strategy = strategy
        self._tolerance_cents = tolerance_cents
        self._participants: list[SplitParticipant] = [
            SplitParticipant(
                id=PAYER_ID,
                name=payer_name,
                email=payer_email,
                amount_cents=total_cents,
                percentage=100.0,
                status=ParticipantStatus.accepted,
            )
        ]

    @property
    def total_cents(self) -> int:
        return self._total_cents

    @property
    def strategy(self) -> SplitStrategy:
        return self._strategy

    @property
    def participants(self) -> list[SplitParticipant]:
        return list(self._participants)

    @property
    def allocated_cents(self) -> int:
        return sum(p.amount_cents for p in self._participants)

    @property
    def is_balanced(self) -> bool:
        return abs(self.allocated_cents - self._total_cents) < self._tolerance_cents

    def _index_of(self, participant_id: str) -> int:
        for i, p in enumerate(self._participants):
            if p.id == participant_id:
                return i
        raise ParticipantNotFoundError(f"No participant {participant_id}")

    def _rebalance_equal(self) -> None:
        shares = allocate_equal(self._total_cents, len(self._participants))
        pct = round(100 / len(self._participants), 2)
        self._participants = [
            p.model_copy(update={"amount_cents": share, "percentage": pct})
            for p, share in zip(self._participants, shares, strict=True)
        ]

    def set_strategy(self, strategy: SplitStrategy) -> None:
        """Switch strategy; switching to equal re-allocates immediately."""
        self._strategy = strategy
        if strategy == SplitStrategy.equal:
            self._rebalance_equal()

    def add_participant(self, name: str, email: str) -> SplitParticipant:
        """Add a participant starting at zero.

        Under the equal strategy everyone is re-allocated; custom and
        percentage values already entered are left alone.
        """
        if not name or not email:
            raise ValueError("name and email are required")

        participant = SplitParticipant(id=uuid.uuid4().hex, name=name, email=email)
        self._participants.append(participant)

        if self._strategy == SplitStrategy.equal:
            self._rebalance_equal()

        return self._participants[-1]

    def remove_participant(self, participant_id: str) -> None:
        """Remove a participant (never the payer)."""
        if participant_id == PAYER_ID:
            raise PayerRemovalError("The payer cannot be removed from a split")
        index = self._index_of(participant_id)
        del self._participants[index]

        if self._strategy == SplitStrategy.equal:
            self._rebalance_equal()

    def set_amount(self, participant_id: str, amount_cents: int) -> SplitParticipant:
        """Enter an absolute amount (custom strategy)."""
        if amount_cents < 0:
            raise ValueError(f"amount_cents must be >= 0, got {amount_cents}")
        index = self._index_of(participant_id)
        updated = self._participants[index].model_copy(
            update={
                "amount_cents": amount_cents,
                "percentage": min(100.0, _percentage_of(amount_cents, self._total_cents)),
            }
        )
        self._participants[index] = updated
        return updated

    def set_percentage(self, participant_id: str, percentage: float) -> SplitParticipant:
        """Enter a percentage; the amount is rounded half-up to a whole unit."""
        if not 0 <= percentage <= 100:
            raise ValueError(f"percentage must be within 0-100, got {percentage}")
        index = self._index_of(participant_id)
        amount = round_to_unit(apply_rate(self._total_cents, Decimal(str(percentage)) / 100))
        updated = self._participants[index].model_copy(
            update={"amount_cents": amount, "percentage": percentage}
        )
        self._participants[index] = updated
        return updated

    def check_balance(self) -> list[Violation]:
        """Return a blocking violation if the split does not add up."""
        if self.is_balanced:
            return []
        return [
            Violation(
                kind=ViolationKind.SPLIT,
                code="SPLIT_UNBALANCED",
                message="Split amounts do not add up to the booking total.",
                details={
                    "allocated_cents": self.allocated_cents,
                    "total_cents": self._total_cents,
                    "difference_cents": self.allocated_cents - self._total_cents,
                },
            )
        ]

    def confirm(self) -> list[SplitParticipant]:
        """Lock in the split.

        Raises:
            SplitUnbalancedError: If amounts are off by a currency unit or more
        """
        violations = self.check_balance()
        if violations:
            raise SplitUnbalancedError(violations[0])
        return self.participants

    async def send_invites(self, dispatcher: InviteDispatcher) -> dict[str, ParticipantStatus]:
        """Invite every pending participant other than the payer.

        Dispatch failures leave the participant pending; they are logged and
        reported, never raised.

        Args:
            dispatcher: Invite dispatch collaborator

        Returns:
            Mapping of participant id to resulting status
        """
        outcome: dict[str, ParticipantStatus] = {}
        for i, participant in enumerate(self._participants):
            if participant.id == PAYER_ID or participant.status != ParticipantStatus.pending:
                continue

            try:
                sent = await dispatcher.send_invite(participant.email) == InviteOutcome.invited
            except Exception as e:
                logger.warning("Invite dispatch to %s failed: %s", participant.email, type(e).__name__)
                sent = False

            if sent:
                self._participants[i] = participant.model_copy(
                    update={"status": ParticipantStatus.invited}
                )
            outcome[participant.id] = self._participants[i].status

        return outcome

    def mark_status(self, participant_id: str, status: ParticipantStatus) -> SplitParticipant:
        """Record an accepted/paid update from the invite flow.

        Status only moves forward: pending -> invited -> accepted -> paid.
        Repeating the current status is a no-op.

        Raises:
            ParticipantNotFoundError: Unknown participant id
            ValueError: The update would move the status backwards
        """
        index = self._index_of(participant_id)
        current = self._participants[index].status
        if _STATUS_ORDER.index(status) < _STATUS_ORDER.index(current):
            raise ValueError(
                f"Participant {participant_id} is {current.value}; "
                f"cannot move back to {status.value}"
            )
        updated = self._participants[index].model_copy(update={"status": status})
        self._participants[index] = updated
        return updated
