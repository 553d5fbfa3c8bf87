"""Availability calendar endpoint (indicative prices only)."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from checkout.app.adapters.base import BackendUnavailableError, BookingBackend, PropertyNotFoundError
from checkout.app.api.deps import get_backend, get_simulator
from checkout.app.models.calendar import DayPrice, RangeSummary
from checkout.app.pricing.simulator import DemandPricingSimulator, lowest_available, range_summary

router = APIRouter(prefix="/calendar", tags=["calendar"])


class CalendarResponse(BaseModel):
    """One month of indicative prices."""

    property_slug: str
    year: int
    month: int
    days: list[DayPrice]
    lowest_available: DayPrice | None
    selection: RangeSummary | None = None


@router.get("/{slug}", response_model=CalendarResponse)
async def get_calendar(
    slug: str,
    backend: Annotated[BookingBackend, Depends(get_backend)],
    simulator: Annotated[DemandPricingSimulator, Depends(get_simulator)],
    year: Annotated[int, Query(ge=2000, le=2100)],
    month: Annotated[int, Query(ge=1, le=12)],
    check_in: date | None = None,
    check_out: date | None = None,
) -> CalendarResponse:
    """Price a month around the property's base rate.

    When ``check_in`` and ``check_out`` are given, the indicative total for
    that span is included.
    """
    try:
        listing = await backend.get_property(slug)
    except PropertyNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "PROPERTY_NOT_FOUND", "message": str(e)},
        ) from e
    except BackendUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"code": "BACKEND_UNAVAILABLE", "message": str(e)},
        ) from e

    if listing.base_rate_cents is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"code": "BASE_RATE_MISSING", "message": f"{slug} has no base rate"},
        )

    days = simulator.price_month(year, month, listing.base_rate_cents)
    selection = None
    if check_in is not None and check_out is not None and check_out > check_in:
        selection = range_summary(days, check_in, check_out)

    return CalendarResponse(
        property_slug=slug,
        year=year,
        month=month,
        days=days,
        lowest_available=lowest_available(days),
        selection=selection,
    )
