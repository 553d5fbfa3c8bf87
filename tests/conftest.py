"""Shared pytest fixtures for all test suites."""

from collections.abc import Callable
from datetime import date, timedelta

import pytest

from checkout.app.adapters.fixtures import FixtureBookingApi, load_addon_catalog, load_insurance_plans
from checkout.app.models.common import BookingStep
from checkout.app.models.guest import GuestInfo
from checkout.app.models.property import Property
from checkout.app.models.quote import NightlyRate, PricingQuote
from checkout.app.orchestration.steps import BookingStepMachine
from checkout.app.pricing.addons import AddonLedger
from checkout.app.pricing.protection import ProtectionCalculator

QuoteFactory = Callable[..., PricingQuote]


def build_quote(
    check_in: date,
    nights: int,
    rate_cents: int = 30000,
    fees_cents: int = 0,
    taxes_cents: int = 0,
) -> PricingQuote:
    """Flat-rate quote with one breakdown entry per night."""
    subtotal = rate_cents * nights
    return PricingQuote(
        check_in=check_in,
        check_out=check_in + timedelta(days=nights),
        nights=nights,
        nightly_breakdown=tuple(
            NightlyRate(date=check_in + timedelta(days=i), price_cents=rate_cents)
            for i in range(nights)
        ),
        subtotal_cents=subtotal,
        fees_cents=fees_cents,
        taxes_cents=taxes_cents,
        total_cents=subtotal + fees_cents + taxes_cents,
    )


@pytest.fixture
def quote_factory() -> QuoteFactory:
    return build_quote


@pytest.fixture
def pool_property() -> Property:
    """Pool property with a three-night minimum."""
    return Property(
        id="1042",
        slug="seas-the-day",
        name="Seas the Day",
        amenities=["pool", "hot-tub", "wifi"],
        min_stay_nights=3,
        pet_friendly=True,
        base_rate_cents=30000,
    )


@pytest.fixture
def plain_property() -> Property:
    """Property without pool or hot tub."""
    return Property(
        id="2117",
        slug="sound-retreat",
        name="Sound Retreat",
        amenities=["wifi", "kayaks"],
        min_stay_nights=3,
        base_rate_cents=22500,
    )


@pytest.fixture
def addon_ledger() -> AddonLedger:
    return AddonLedger(load_addon_catalog())


@pytest.fixture
def protection() -> ProtectionCalculator:
    return ProtectionCalculator(load_insurance_plans())


@pytest.fixture
def backend() -> FixtureBookingApi:
    return FixtureBookingApi()


@pytest.fixture
def machine(
    pool_property: Property, addon_ledger: AddonLedger, protection: ProtectionCalculator
) -> BookingStepMachine:
    return BookingStepMachine.start(pool_property, addon_ledger=addon_ledger, protection=protection)


STAY_START = date(2026, 8, 10)

GUEST = GuestInfo(first_name="Dana", last_name="Reyes", email="dana@example.com")


def advance_to_payment(machine: BookingStepMachine, check_in: date = STAY_START) -> BookingStepMachine:
    """Fill every step with valid data and walk the machine to payment."""
    machine.set_dates(check_in, check_in + timedelta(days=3), build_quote(check_in, 3))
    machine.go_next()  # addons
    machine.go_next()  # guests
    machine.set_guest_info(GUEST)
    machine.go_next()  # protection
    machine.go_next()  # agreement
    machine.sign_agreement("Dana Reyes", [a.id for a in machine.addenda])
    machine.go_next()  # payment
    assert machine.current_step == BookingStep.payment
    return machine


@pytest.fixture
def payment_ready_machine(machine: BookingStepMachine) -> BookingStepMachine:
    return advance_to_payment(machine)


@pytest.fixture
def walk_to_payment() -> Callable[..., BookingStepMachine]:
    return advance_to_payment


@pytest.fixture
def guest() -> GuestInfo:
    return GUEST
