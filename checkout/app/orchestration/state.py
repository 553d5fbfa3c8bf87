"""Booking draft - the aggregate root of one checkout session."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from checkout.app.models.agreement import Agreement
from checkout.app.models.common import PaymentOption
from checkout.app.models.extras import AddonSelection, InsurancePlan
from checkout.app.models.guest import GuestInfo, PartyComposition
from checkout.app.models.property import Property
from checkout.app.models.quote import DateRange, PricingQuote


@dataclass
class BookingDraft:
    """Everything entered so far in one checkout.

    Owned by a single BookingStepMachine for the lifetime of the session and
    discarded on successful submission or abandonment. Nothing here is
    persisted.
    """

    listing: Property
    draft_id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    # Filled step by step
    date_range: DateRange | None = None
    quote: PricingQuote | None = None
    addons: list[AddonSelection] = field(default_factory=list)
    insurance_plan: InsurancePlan | None = None
    guest: GuestInfo = field(default_factory=GuestInfo)
    party: PartyComposition = field(default_factory=PartyComposition)
    agreement: Agreement | None = None
    payment_option: PaymentOption = PaymentOption.full

    @property
    def nights(self) -> int:
        return self.quote.nights if self.quote else 0
