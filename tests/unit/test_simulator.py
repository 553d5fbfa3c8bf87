"""Tests for the demand pricing simulator (calendar display prices)."""

import random
from datetime import date
from decimal import Decimal

from checkout.app.models.calendar import DayPrice
from checkout.app.models.common import DemandLevel
from checkout.app.pricing.simulator import (
    DemandPricingSimulator,
    demand_multiplier,
    is_holiday,
    is_weekend_night,
    lowest_available,
    price_for,
    price_month,
    range_summary,
)


def _day(day: date, price_cents: int, available: bool = True) -> DayPrice:
    return DayPrice(
        date=day,
        price_cents=price_cents,
        available=available,
        is_weekend=False,
        is_holiday=False,
        demand_level=DemandLevel.low,
        multiplier=Decimal(1),
    )


class TestDemandMultiplier:
    """Deterministic factors."""

    def test_peak_saturday_without_holiday(self) -> None:
        # 2026-08-15 is a Saturday in peak season
        multiplier, demand = demand_multiplier(date(2026, 8, 15))
        assert multiplier == Decimal("1.725")
        assert demand == DemandLevel.high

    def test_peak_saturday_price_before_jitter(self) -> None:
        price = price_for(date(2026, 8, 15), 30000, rng=random.Random(1), jitter=False)
        assert price.price_cents == 51750
        assert price.is_weekend is True
        assert price.is_holiday is False

    def test_shoulder_weekday(self) -> None:
        # 2026-10-14 is a Wednesday
        multiplier, demand = demand_multiplier(date(2026, 10, 14))
        assert multiplier == Decimal("1.2")
        assert demand == DemandLevel.medium

    def test_off_season(self) -> None:
        multiplier, demand = demand_multiplier(date(2026, 1, 13))
        assert multiplier == Decimal("0.8")
        assert demand == DemandLevel.low

    def test_holiday_window_forces_high_demand(self) -> None:
        # 2026-05-27 (Wednesday) is within 3 days of May 25
        multiplier, demand = demand_multiplier(date(2026, 5, 27))
        assert multiplier == Decimal("1.2") * Decimal("1.3")
        assert demand == DemandLevel.high

    def test_holiday_window_bounds(self) -> None:
        assert is_holiday(date(2026, 7, 1))
        assert is_holiday(date(2026, 7, 7))
        assert not is_holiday(date(2026, 7, 8))
        assert not is_holiday(date(2026, 6, 30))

    def test_weekend_nights_are_friday_and_saturday(self) -> None:
        assert is_weekend_night(date(2026, 8, 14))  # Friday
        assert is_weekend_night(date(2026, 8, 15))  # Saturday
        assert not is_weekend_night(date(2026, 8, 16))  # Sunday


class TestJitterAndAvailability:
    """Random parts of the model."""

    def test_jitter_stays_within_five_percent(self) -> None:
        rng = random.Random(42)
        base = price_for(date(2026, 8, 12), 30000, jitter=False, rng=random.Random(0)).price_cents
        for _ in range(200):
            price = price_for(date(2026, 8, 12), 30000, rng=rng)
            assert base * 0.95 - 1 <= price.price_cents <= base * 1.05 + 1

    def test_seeded_simulator_is_reproducible(self) -> None:
        first = DemandPricingSimulator(seed=11).price_month(2026, 7, 30000)
        second = DemandPricingSimulator(seed=11).price_month(2026, 7, 30000)
        assert first == second

    def test_unavailable_ratio_extremes(self) -> None:
        none_blocked = price_month(2026, 3, 30000, rng=random.Random(3), unavailable_ratio=0.0)
        all_blocked = price_month(2026, 3, 30000, rng=random.Random(3), unavailable_ratio=1.0)
        assert all(d.available for d in none_blocked)
        assert not any(d.available for d in all_blocked)

    def test_price_month_covers_every_day(self) -> None:
        days = price_month(2026, 2, 30000, rng=random.Random(5))
        assert [d.date.day for d in days] == list(range(1, 29))


class TestCalendarHelpers:
    """Range summary and lowest price."""

    def test_range_summary_total_and_average(self) -> None:
        days = [
            _day(date(2026, 3, 1), 10000),
            _day(date(2026, 3, 2), 20000),
            _day(date(2026, 3, 3), 30001),
        ]
        summary = range_summary(days, date(2026, 3, 1), date(2026, 3, 4))
        assert summary is not None
        assert summary.nights == 3
        assert summary.total_cents == 60001
        assert summary.average_cents == 20000

    def test_range_summary_excludes_check_out_night(self) -> None:
        days = [_day(date(2026, 3, 1), 10000), _day(date(2026, 3, 2), 20000)]
        summary = range_summary(days, date(2026, 3, 1), date(2026, 3, 2))
        assert summary is not None
        assert summary.nights == 1
        assert summary.total_cents == 10000

    def test_range_summary_none_when_no_nights_priced(self) -> None:
        assert range_summary([], date(2026, 3, 1), date(2026, 3, 4)) is None

    def test_lowest_available_skips_booked_nights(self) -> None:
        days = [
            _day(date(2026, 3, 1), 5000, available=False),
            _day(date(2026, 3, 2), 9000),
            _day(date(2026, 3, 3), 7000),
        ]
        lowest = lowest_available(days)
        assert lowest is not None
        assert lowest.price_cents == 7000

    def test_lowest_available_none_when_fully_booked(self) -> None:
        assert lowest_available([_day(date(2026, 3, 1), 5000, available=False)]) is None
