"""Fixture-based booking backend and catalog loaders."""

import json
import uuid
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any

from checkout.app.adapters.base import (
    DatesUnavailableError,
    InviteOutcome,
    PropertyNotFoundError,
    ReservationRejectedError,
)
from checkout.app.models.extras import AddonCatalogEntry, InsurancePlan
from checkout.app.models.property import Property
from checkout.app.models.quote import NightlyRate, PricingQuote
from checkout.app.models.reservation import ReservationRequest
from checkout.app.pricing.money import apply_rate, round_half_up

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


def _load(name: str) -> Any:
    with open(FIXTURES_DIR / name) as f:
        return json.load(f)


def load_addon_catalog() -> list[AddonCatalogEntry]:
    """Default add-on catalog.

    Fees may vary by property; these are the site-wide defaults.
    """
    return [AddonCatalogEntry.model_validate(item) for item in _load("addons.json")]


def load_insurance_plans() -> list[InsurancePlan]:
    """Offered trip protection plans."""
    return [InsurancePlan.model_validate(item) for item in _load("insurance_plans.json")]


def _nights(check_in: date, check_out: date) -> list[date]:
    return [check_in + timedelta(days=i) for i in range((check_out - check_in).days)]


class FixtureBookingApi:
    """In-process stand-in for the booking backend.

    Quotes a flat nightly rate plus cleaning fee and taxes. Reserved nights
    become unavailable, so a second booking of the same dates conflicts.
    """

    def __init__(self, properties: list[dict[str, Any]] | None = None) -> None:
        raw = properties if properties is not None else _load("properties.json")
        self._raw: dict[str, dict[str, Any]] = {p["slug"]: p for p in raw}
        self._unavailable: dict[str, set[date]] = {
            p["id"]: {date.fromisoformat(d) for d in p.get("unavailable_dates", [])} for p in raw
        }
        self.reservations: dict[str, ReservationRequest] = {}
        self.invites_sent: list[str] = []

    def _raw_by_id(self, property_id: str) -> dict[str, Any]:
        for p in self._raw.values():
            if p["id"] == property_id:
                return p
        raise PropertyNotFoundError(f"Property {property_id} not found")

    async def get_property(self, slug: str) -> Property:
        if slug not in self._raw:
            raise PropertyNotFoundError(f"Property {slug} not found")
        return Property.model_validate(self._raw[slug])

    async def get_quote(
        self, property_id: str, check_in: date, check_out: date
    ) -> PricingQuote | None:
        raw = self._raw_by_id(property_id)
        nights = _nights(check_in, check_out)
        if not nights or any(n in self._unavailable[property_id] for n in nights):
            return None

        rate = raw["base_rate_cents"]
        subtotal = rate * len(nights)
        fees = raw.get("cleaning_fee_cents", 0)
        taxes = round_half_up(apply_rate(subtotal + fees, Decimal(raw.get("tax_rate", "0"))))

        return PricingQuote(
            check_in=check_in,
            check_out=check_out,
            nights=len(nights),
            nightly_breakdown=tuple(NightlyRate(date=n, price_cents=rate) for n in nights),
            subtotal_cents=subtotal,
            fees_cents=fees,
            taxes_cents=taxes,
            total_cents=subtotal + fees + taxes,
        )

    async def create_reservation(self, request: ReservationRequest) -> str:
        if request.payment.amount_cents <= 0:
            raise ReservationRejectedError("Payment amount must be positive")

        nights = _nights(request.check_in, request.check_out)
        taken = self._unavailable.setdefault(request.property_id, set())
        if any(n in taken for n in nights):
            raise DatesUnavailableError("Those dates are no longer available")

        taken.update(nights)
        reservation_id = f"R-{uuid.uuid4().hex[:10].upper()}"
        self.reservations[reservation_id] = request
        return reservation_id

    async def send_invite(self, email: str) -> InviteOutcome:
        self.invites_sent.append(email)
        return InviteOutcome.invited
