"""Calendar display models (advisory pricing only)."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from checkout.app.models.common import DemandLevel


class DayPrice(BaseModel):
    """Indicative price for one night on the calendar."""

    date: date
    price_cents: int
    available: bool
    is_weekend: bool
    is_holiday: bool
    demand_level: DemandLevel
    multiplier: Decimal


class RangeSummary(BaseModel):
    """Indicative total for a selected span of nights."""

    nights: int
    total_cents: int
    average_cents: int
