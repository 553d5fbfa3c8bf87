"""Tests for the httpx booking backend client."""

import json
from datetime import UTC, date, datetime

import httpx
import pytest

from checkout.app.adapters.base import (
    BackendUnavailableError,
    DatesUnavailableError,
    InviteOutcome,
    PaymentDeclinedError,
    PropertyNotFoundError,
    ReservationNetworkError,
    ReservationRejectedError,
)
from checkout.app.adapters.http import HttpBookingApi
from checkout.app.models.common import PaymentOption
from checkout.app.models.guest import GuestInfo, PartyComposition
from checkout.app.models.reservation import AgreementPayload, PaymentPayload, ReservationRequest

BASE_URL = "http://booking.test/api/v1"


def _api(handler) -> HttpBookingApi:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpBookingApi(BASE_URL, client=client, default_min_stay=2)


def _request() -> ReservationRequest:
    return ReservationRequest(
        property_id="1042",
        check_in=date(2026, 8, 10),
        check_out=date(2026, 8, 13),
        party=PartyComposition(adults=2, pets=1),
        guest=GuestInfo(first_name="Dana", last_name="Reyes", email="dana@example.com"),
        agreement=AgreementPayload(
            signature="Dana Reyes",
            accepted_addendum_ids=["pet-policy", "pool-rules"],
            signed_at=datetime(2026, 6, 1, 12, 0, tzinfo=UTC),
        ),
        payment=PaymentPayload(token="tok_visa", amount_cents=61750, type=PaymentOption.deposit),
        grand_total_cents=123500,
    )


@pytest.mark.asyncio
async def test_get_property_parses_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/properties/seas-the-day"
        return httpx.Response(
            200,
            json={
                "id": "abc",
                "trackId": 1042,
                "slug": "seas-the-day",
                "name": "Seas the Day",
                "amenities": [{"id": "pool", "name": "Pool"}, "wifi"],
                "petFriendly": True,
                "baseRate": 300,
            },
        )

    listing = await _api(handler).get_property("seas-the-day")

    assert listing.id == "1042"
    assert listing.amenities == ["pool", "wifi"]
    assert listing.min_stay_nights == 2
    assert listing.base_rate_cents == 30000
    assert listing.pet_friendly is True


@pytest.mark.asyncio
async def test_get_property_not_found() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": {"message": "No such property"}})

    with pytest.raises(PropertyNotFoundError, match="No such property"):
        await _api(handler).get_property("nowhere")


@pytest.mark.asyncio
async def test_get_quote_parses_pricing() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["start"] == "2026-08-10"
        assert request.url.params["end"] == "2026-08-13"
        return httpx.Response(
            200,
            json={
                "available": True,
                "nights": 3,
                "nightlyRates": [
                    {"date": "2026-08-10T00:00:00", "rate": 300},
                    {"date": "2026-08-11T00:00:00", "rate": 300},
                    {"date": "2026-08-12T00:00:00", "rate": 325.5},
                ],
                "accommodationTotal": 925.5,
                "cleaningFee": 250,
                "serviceFee": 12.25,
                "taxes": 151.57,
                "total": 1339.32,
            },
        )

    quote = await _api(handler).get_quote("1042", date(2026, 8, 10), date(2026, 8, 13))

    assert quote is not None
    assert quote.nights == 3
    assert (quote.check_in, quote.check_out) == (date(2026, 8, 10), date(2026, 8, 13))
    assert quote.nightly_breakdown[2].price_cents == 32550
    assert quote.subtotal_cents == 92550
    assert quote.fees_cents == 26225
    assert quote.taxes_cents == 15157
    assert quote.total_cents == 133932


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(409, json={"message": "booked"}),
        httpx.Response(200, json={"available": False, "nights": 3, "total": 0}),
    ],
)
async def test_get_quote_unavailable_returns_none(response: httpx.Response) -> None:
    api = _api(lambda request: response)
    assert await api.get_quote("1042", date(2026, 7, 2), date(2026, 7, 6)) is None


@pytest.mark.asyncio
async def test_get_quote_for_other_span_is_rejected() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"available": True, "nights": 4, "total": 1200})

    with pytest.raises(BackendUnavailableError, match="unusable quote"):
        await _api(handler).get_quote("1042", date(2026, 8, 10), date(2026, 8, 13))


@pytest.mark.asyncio
async def test_lookup_transport_error_is_retryable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused")

    api = _api(handler)
    with pytest.raises(BackendUnavailableError) as exc_info:
        await api.get_quote("1042", date(2026, 8, 10), date(2026, 8, 13))
    assert exc_info.value.retryable is True

    with pytest.raises(BackendUnavailableError, match="ConnectError"):
        await api.get_property("seas-the-day")


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [500, 503, 400])
async def test_lookup_unexpected_status_raises_backend_unavailable(status_code: int) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"error": {"message": "pricing is down"}})

    api = _api(handler)
    with pytest.raises(BackendUnavailableError, match="pricing is down"):
        await api.get_quote("1042", date(2026, 8, 10), date(2026, 8, 13))
    with pytest.raises(BackendUnavailableError, match="pricing is down"):
        await api.get_property("seas-the-day")


@pytest.mark.asyncio
async def test_create_reservation_posts_camel_case_body() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return httpx.Response(201, json={"id": "R-77"})

    reservation_id = await _api(handler).create_reservation(_request())

    assert reservation_id == "R-77"
    assert seen["propertyId"] == "1042"
    assert seen["checkIn"] == "2026-08-10"
    assert seen["pets"] == 1
    assert seen["guest"]["firstName"] == "Dana"
    assert seen["agreement"]["agreedAddendums"] == ["pet-policy", "pool-rules"]
    assert seen["payment"] == {"token": "tok_visa", "amount": "617.5", "type": "deposit"}
    assert "insurance" not in seen


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status_code", "error"),
    [
        (409, DatesUnavailableError),
        (402, PaymentDeclinedError),
        (503, ReservationNetworkError),
        (422, ReservationRejectedError),
    ],
)
async def test_create_reservation_maps_errors(status_code: int, error: type[Exception]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"error": {"message": "backend says no"}})

    with pytest.raises(error, match="backend says no"):
        await _api(handler).create_reservation(_request())


@pytest.mark.asyncio
async def test_create_reservation_transport_error_is_retryable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused")

    with pytest.raises(ReservationNetworkError) as exc_info:
        await _api(handler).create_reservation(_request())
    assert exc_info.value.retryable is True


@pytest.mark.asyncio
async def test_send_invite_outcomes() -> None:
    def ok(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content) == {"email": "ana@example.com"}
        return httpx.Response(202)

    def failing(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    assert await _api(ok).send_invite("ana@example.com") == InviteOutcome.invited
    assert await _api(failing).send_invite("ana@example.com") == InviteOutcome.failed
