"""Demand-based nightly price simulator for the date-selection calendar.

Display only. Prices produced here are indicative and must never feed the
chargeable total; the authoritative quote comes from the pricing collaborator.

Factors compound multiplicatively, in this order:
1. Season (peak x1.5 / shoulder x1.2 / off-season x0.8)
2. Weekend (Friday and Saturday nights x1.15)
3. Holiday window (+/-3 days of a known holiday x1.3, demand forced high)
4. Jitter in [0.95, 1.05] (optional)

Availability is an independent draw, unrelated to price.
"""

import calendar
import random
from collections.abc import Sequence
from datetime import date, timedelta
from decimal import Decimal

from checkout.app.models.calendar import DayPrice, RangeSummary
from checkout.app.models.common import DemandLevel
from checkout.app.pricing.money import round_half_up

PEAK_MONTHS = frozenset({6, 7, 8})
SHOULDER_MONTHS = frozenset({4, 5, 9, 10})

PEAK_FACTOR = Decimal("1.5")
SHOULDER_FACTOR = Decimal("1.2")
OFF_SEASON_FACTOR = Decimal("0.8")
WEEKEND_FACTOR = Decimal("1.15")
HOLIDAY_FACTOR = Decimal("1.3")

# (month, day) anchors: July 4th, Labor Day weekend, Memorial Day weekend (approx)
HOLIDAYS: tuple[tuple[int, int], ...] = ((7, 4), (9, 1), (5, 25))
HOLIDAY_WINDOW_DAYS = 3

JITTER_MIN = 0.95
JITTER_MAX = 1.05


def season_factor(day: date) -> tuple[Decimal, DemandLevel]:
    """Season multiplier and the demand level it implies."""
    if day.month in PEAK_MONTHS:
        return PEAK_FACTOR, DemandLevel.high
    if day.month in SHOULDER_MONTHS:
        return SHOULDER_FACTOR, DemandLevel.medium
    return OFF_SEASON_FACTOR, DemandLevel.low


def is_weekend_night(day: date) -> bool:
    """Friday or Saturday night."""
    return day.weekday() in (4, 5)


def is_holiday(day: date) -> bool:
    """Within the fixed window of a known holiday in the same month."""
    return any(
        month == day.month and abs(anchor - day.day) <= HOLIDAY_WINDOW_DAYS
        for month, anchor in HOLIDAYS
    )


def demand_multiplier(day: date) -> tuple[Decimal, DemandLevel]:
    """Deterministic part of the model (no jitter)."""
    multiplier, demand = season_factor(day)

    if is_weekend_night(day):
        multiplier *= WEEKEND_FACTOR

    if is_holiday(day):
        multiplier *= HOLIDAY_FACTOR
        demand = DemandLevel.high

    return multiplier, demand


def price_for(
    day: date,
    base_rate_cents: int,
    *,
    rng: random.Random | None = None,
    jitter: bool = True,
    unavailable_ratio: float = 0.15,
) -> DayPrice:
    """Indicative price and availability for a single night.

    Args:
        day: Night being priced
        base_rate_cents: Property base nightly rate
        rng: Random source for jitter and availability (seed it for reproducibility)
        jitter: Apply presentation jitter
        unavailable_ratio: Probability that the night shows as unavailable

    Returns:
        DayPrice for the calendar
    """
    rng = rng or random.Random()
    multiplier, demand = demand_multiplier(day)

    if jitter:
        multiplier *= Decimal(str(round(rng.uniform(JITTER_MIN, JITTER_MAX), 6)))

    available = rng.random() > unavailable_ratio

    return DayPrice(
        date=day,
        price_cents=round_half_up(Decimal(base_rate_cents) * multiplier),
        available=available,
        is_weekend=is_weekend_night(day),
        is_holiday=is_holiday(day),
        demand_level=demand,
        multiplier=multiplier,
    )


def price_month(
    year: int,
    month: int,
    base_rate_cents: int,
    *,
    rng: random.Random | None = None,
    jitter: bool = True,
    unavailable_ratio: float = 0.15,
) -> list[DayPrice]:
    """Price every night of a calendar month."""
    rng = rng or random.Random()
    _, days_in_month = calendar.monthrange(year, month)
    return [
        price_for(
            date(year, month, d),
            base_rate_cents,
            rng=rng,
            jitter=jitter,
            unavailable_ratio=unavailable_ratio,
        )
        for d in range(1, days_in_month + 1)
    ]


def range_summary(days: Sequence[DayPrice], check_in: date, check_out: date) -> RangeSummary | None:
    """Sum the nights in [check_in, check_out) found in ``days``.

    Nights missing from ``days`` are skipped. Returns None when no night in
    the span is present.
    """
    by_date = {d.date: d for d in days}
    total = 0
    nights = 0
    current = check_in
    while current < check_out:
        day_price = by_date.get(current)
        if day_price is not None:
            total += day_price.price_cents
            nights += 1
        current += timedelta(days=1)

    if nights == 0:
        return None

    return RangeSummary(
        nights=nights,
        total_cents=total,
        average_cents=round_half_up(Decimal(total) / nights),
    )


def lowest_available(days: Sequence[DayPrice]) -> DayPrice | None:
    """Cheapest available night, or None if everything is booked."""
    available = [d for d in days if d.available]
    if not available:
        return None
    return min(available, key=lambda d: d.price_cents)


class DemandPricingSimulator:
    """Calendar price generator bound to one random source."""

    def __init__(self, seed: int | None = None, unavailable_ratio: float = 0.15) -> None:
        self._rng = random.Random(seed)
        self._unavailable_ratio = unavailable_ratio

    def price_for(self, day: date, base_rate_cents: int, *, jitter: bool = True) -> DayPrice:
        return price_for(
            day,
            base_rate_cents,
            rng=self._rng,
            jitter=jitter,
            unavailable_ratio=self._unavailable_ratio,
        )

    def price_month(
        self, year: int, month: int, base_rate_cents: int, *, jitter: bool = True
    ) -> list[DayPrice]:
        return price_month(
            year,
            month,
            base_rate_cents,
            rng=self._rng,
            jitter=jitter,
            unavailable_ratio=self._unavailable_ratio,
        )
