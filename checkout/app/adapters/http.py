"""HTTP client for the booking backend (properties, pricing, reservations, invites)."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any

import httpx

from checkout.app.adapters.base import (
    BackendUnavailableError,
    DatesUnavailableError,
    InviteOutcome,
    PaymentDeclinedError,
    PropertyNotFoundError,
    ReservationNetworkError,
    ReservationRejectedError,
)
from checkout.app.models.property import Property
from checkout.app.models.quote import NightlyRate, PricingQuote
from checkout.app.models.reservation import ReservationRequest
from checkout.app.pricing.money import round_half_up, to_units

logger = logging.getLogger(__name__)


def _to_cents(amount: Any) -> int:
    """Backend amounts are decimal major units."""
    if amount is None:
        return 0
    return round_half_up(Decimal(str(amount)) * 100)


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        if isinstance(body.get("error"), dict):
            return str(body["error"].get("message", default))
        return str(body.get("message", default))
    return default


def parse_property(data: dict[str, Any], default_min_stay: int = 3) -> Property:
    """Map the backend property payload onto Property.

    Properties without a configured minimum stay get ``default_min_stay``.
    """
    amenities = [a["id"] if isinstance(a, dict) else str(a) for a in data.get("amenities") or []]
    base_rate = data.get("baseRate")
    return Property(
        id=str(data.get("trackId") or data["id"]),
        slug=data["slug"],
        name=data["name"],
        amenities=amenities,
        min_stay_nights=data.get("minimumStay") or default_min_stay,
        pet_friendly=bool(data.get("petFriendly", False)),
        base_rate_cents=_to_cents(base_rate) if base_rate is not None else None,
        address=data.get("address") if isinstance(data.get("address"), str) else None,
    )


def parse_quote(data: dict[str, Any], check_in: date, check_out: date) -> PricingQuote:
    """Map the backend pricing payload for a requested stay onto PricingQuote.

    Cleaning and service fees are folded into ``fees_cents``.
    """
    breakdown = tuple(
        NightlyRate(date=date.fromisoformat(n["date"][:10]), price_cents=_to_cents(n["rate"]))
        for n in data.get("nightlyRates") or []
    )
    return PricingQuote(
        check_in=check_in,
        check_out=check_out,
        nights=data["nights"],
        nightly_breakdown=breakdown,
        subtotal_cents=_to_cents(data.get("accommodationTotal")),
        fees_cents=_to_cents(data.get("cleaningFee")) + _to_cents(data.get("serviceFee")),
        taxes_cents=_to_cents(data.get("taxes")),
        total_cents=_to_cents(data["total"]),
    )


def reservation_body(request: ReservationRequest) -> dict[str, Any]:
    """Serialize a reservation request in the backend's camelCase shape."""
    guest = request.guest
    body: dict[str, Any] = {
        "propertyId": request.property_id,
        "checkIn": request.check_in.isoformat(),
        "checkOut": request.check_out.isoformat(),
        "adults": request.party.adults,
        "children": request.party.children,
        "pets": request.party.pets,
        "guest": {
            "firstName": guest.first_name,
            "lastName": guest.last_name,
            "email": guest.email,
            "phone": guest.phone,
            "address": guest.address.model_dump() if guest.address else None,
        },
        "addons": [{"id": a.addon_id, "quantity": a.quantity} for a in request.addons],
        "agreement": {
            "signature": request.agreement.signature,
            "agreedAddendums": request.agreement.accepted_addendum_ids,
            "signedAt": request.agreement.signed_at.isoformat(),
        },
        "payment": {
            "token": request.payment.token,
            "amount": str(to_units(request.payment.amount_cents)),
            "type": request.payment.type.value,
        },
    }
    if request.insurance is not None:
        body["insurance"] = {
            "planId": request.insurance.plan_id,
            "amount": str(to_units(request.insurance.amount_cents)),
        }
    return body


def _raise_unexpected(response: httpx.Response) -> None:
    if not response.is_success:
        raise BackendUnavailableError(
            _error_message(response, f"Unexpected booking service status {response.status_code}")
        )


class HttpBookingApi:
    """httpx-backed implementation of the booking collaborators."""

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient | None = None,
        timeout_s: float = 10.0,
        default_min_stay: int = 3,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Backend API root, e.g. http://localhost:5000/api/v1
            client: Optional httpx client (for testing with mocks)
            timeout_s: Request timeout when the client is created here
            default_min_stay: Minimum stay for properties that do not set one
        """
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout_s)
        self._owns_client = client is None
        self._default_min_stay = default_min_stay

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _lookup(self, path: str, params: dict[str, str] | None = None) -> httpx.Response:
        """GET a lookup endpoint. Transport errors and 5xx become BackendUnavailableError."""
        try:
            response = await self._client.get(f"{self._base_url}{path}", params=params)
        except httpx.TransportError as e:
            logger.warning("Lookup %s failed: %s", path, type(e).__name__)
            raise BackendUnavailableError(
                f"Could not reach booking service: {type(e).__name__}"
            ) from e

        if response.status_code >= 500:
            logger.warning("Lookup %s returned %s", path, response.status_code)
            raise BackendUnavailableError(
                _error_message(response, "Booking service is unavailable. Please try again.")
            )
        return response

    async def get_property(self, slug: str) -> Property:
        response = await self._lookup(f"/properties/{slug}")
        if response.status_code == 404:
            raise PropertyNotFoundError(_error_message(response, f"Property {slug} not found"))
        _raise_unexpected(response)
        return parse_property(response.json(), self._default_min_stay)

    async def get_quote(
        self, property_id: str, check_in: date, check_out: date
    ) -> PricingQuote | None:
        response = await self._lookup(
            f"/properties/{property_id}/pricing",
            params={"start": check_in.isoformat(), "end": check_out.isoformat()},
        )
        if response.status_code in (404, 409):
            logger.info("No quote for %s %s..%s", property_id, check_in, check_out)
            return None
        _raise_unexpected(response)

        data = response.json()
        if data.get("available") is False:
            return None
        try:
            return parse_quote(data, check_in, check_out)
        except (KeyError, ValueError) as e:
            logger.warning("Malformed quote for %s %s..%s: %s", property_id, check_in, check_out, e)
            raise BackendUnavailableError("Booking service returned an unusable quote") from e

    async def create_reservation(self, request: ReservationRequest) -> str:
        try:
            response = await self._client.post(
                f"{self._base_url}/reservations", json=reservation_body(request)
            )
        except httpx.TransportError as e:
            raise ReservationNetworkError(f"Could not reach reservation service: {type(e).__name__}") from e

        if response.status_code in (200, 201):
            return str(response.json()["id"])

        message = _error_message(response, "Booking failed. Please try again.")
        if response.status_code == 409:
            raise DatesUnavailableError(message)
        if response.status_code == 402:
            raise PaymentDeclinedError(message)
        if response.status_code >= 500:
            raise ReservationNetworkError(message)
        raise ReservationRejectedError(message)

    async def send_invite(self, email: str) -> InviteOutcome:
        try:
            response = await self._client.post(
                f"{self._base_url}/splits/invites", json={"email": email}
            )
        except httpx.TransportError as e:
            logger.warning("Invite to %s failed: %s", email, type(e).__name__)
            return InviteOutcome.failed

        if response.is_success:
            return InviteOutcome.invited
        logger.warning("Invite to %s rejected with %s", email, response.status_code)
        return InviteOutcome.failed
