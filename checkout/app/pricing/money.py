"""Integer-cents arithmetic helpers.

All amounts are integer minor units. A "unit" is one whole major currency
unit (100 cents). Rounding is half-up, never banker's rounding.
"""

from decimal import ROUND_HALF_UP, Decimal

CENTS_PER_UNIT = 100


def round_half_up(value: Decimal | int) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def round_to_unit(cents: Decimal | int) -> int:
    """Round a cents amount to the nearest whole currency unit (still in cents)."""
    units = Decimal(cents) / CENTS_PER_UNIT
    return round_half_up(units) * CENTS_PER_UNIT


def apply_rate(cents: int, rate: Decimal | float | str) -> Decimal:
    """Multiply cents by a rate without float drift."""
    return Decimal(cents) * Decimal(str(rate))


def allocate_equal(total_cents: int, parts: int) -> list[int]:
    """Split a total into whole-unit shares; share 0 absorbs the remainder.

    The result always sums to ``total_cents`` exactly.

    >>> allocate_equal(100000, 3)
    [33400, 33300, 33300]
    """
    if parts < 1:
        raise ValueError(f"parts must be >= 1, got {parts}")
    if total_cents < 0:
        raise ValueError(f"total_cents must be >= 0, got {total_cents}")

    share = (total_cents // (parts * CENTS_PER_UNIT)) * CENTS_PER_UNIT
    first = total_cents - share * (parts - 1)
    return [first] + [share] * (parts - 1)


def to_units(cents: int) -> Decimal:
    """Convert cents to a Decimal amount of major units."""
    return Decimal(cents) / CENTS_PER_UNIT


def allocate_installments(total_cents: int, parts: int) -> list[int]:
    """Split a total into installments that differ by at most one whole unit.

    Leftover whole units go one each to the earliest installments; leftover
    cents go on the last one.

    >>> allocate_installments(100000, 3)
    [33400, 33300, 33300]
    >>> allocate_installments(100100, 3)
    [33400, 33400, 33300]
    """
    if parts < 1:
        raise ValueError(f"parts must be >= 1, got {parts}")
    if total_cents < 0:
        raise ValueError(f"total_cents must be >= 0, got {total_cents}")

    units, cents = divmod(total_cents, CENTS_PER_UNIT)
    share, extra = divmod(units, parts)
    amounts = [(share + 1 if i < extra else share) * CENTS_PER_UNIT for i in range(parts)]
    amounts[-1] += cents
    return amounts
