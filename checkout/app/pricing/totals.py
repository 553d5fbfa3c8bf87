"""Grand total aggregation.

The one place the chargeable total is computed. The step machine, the HTTP
summary and the reservation payload all read from here, so the figure the
guest sees is the figure that gets charged.

    addons_total    = sum(unit_price * (nights if per-night else 1) * quantity)
    insurance_total = round_to_unit(quote.total * plan.premium_rate)   # 0 if none
    grand_total     = quote.total + addons_total + insurance_total
"""

from collections.abc import Sequence

from pydantic import BaseModel

from checkout.app.models.extras import AddonLine, AddonSelection, InsurancePlan
from checkout.app.models.quote import PricingQuote
from checkout.app.pricing.addons import AddonLedger
from checkout.app.pricing.money import round_half_up, to_units
from checkout.app.pricing.protection import premium_cents


class PriceBreakdown(BaseModel):
    """Derived price view; never stored, always recomputed."""

    nights: int
    quote_total_cents: int
    addon_lines: list[AddonLine]
    addons_total_cents: int
    insurance_plan_id: str | None
    insurance_total_cents: int
    grand_total_cents: int


def compute_price_breakdown(
    quote: PricingQuote | None,
    selections: Sequence[AddonSelection],
    plan: InsurancePlan | None,
    ledger: AddonLedger,
) -> PriceBreakdown:
    """Derive every price component from the draft inputs alone.

    Args:
        quote: Authoritative quote (None before dates are chosen)
        selections: Selected add-ons
        plan: Selected protection plan, if any
        ledger: Add-on ledger used to resolve selections

    Returns:
        PriceBreakdown; all zeros when there is no quote yet
    """
    if quote is None:
        return PriceBreakdown(
            nights=0,
            quote_total_cents=0,
            addon_lines=[],
            addons_total_cents=0,
            insurance_plan_id=plan.id if plan else None,
            insurance_total_cents=0,
            grand_total_cents=0,
        )

    lines = ledger.line_items(selections, quote.nights)
    addons_total = sum(line.line_total_cents for line in lines)
    insurance_total = premium_cents(quote.total_cents, plan)

    return PriceBreakdown(
        nights=quote.nights,
        quote_total_cents=quote.total_cents,
        addon_lines=lines,
        addons_total_cents=addons_total,
        insurance_plan_id=plan.id if plan else None,
        insurance_total_cents=insurance_total,
        grand_total_cents=quote.total_cents + addons_total + insurance_total,
    )


def loyalty_points(grand_total_cents: int, points_per_unit: int = 10) -> int:
    """Points earned for a booking: currency units times the earn rate, rounded."""
    return round_half_up(to_units(grand_total_cents) * points_per_unit)
