"""Trip protection premium."""

from collections.abc import Sequence

from checkout.app.models.extras import InsurancePlan
from checkout.app.pricing.money import apply_rate, round_to_unit


def premium_cents(trip_total_cents: int, plan: InsurancePlan | None) -> int:
    """Premium for a plan, rounded half-up to a whole currency unit.

    Args:
        trip_total_cents: Quote total the premium is a percentage of
        plan: Selected plan, or None when protection is declined

    Returns:
        Premium in cents (0 when declined)
    """
    if plan is None:
        return 0
    return round_to_unit(apply_rate(trip_total_cents, plan.premium_rate))


class ProtectionCalculator:
    """Premium quotes over a fixed plan catalog."""

    def __init__(self, plans: Sequence[InsurancePlan]) -> None:
        self._plans = {plan.id: plan for plan in plans}

    @property
    def plans(self) -> list[InsurancePlan]:
        return list(self._plans.values())

    def get_plan(self, plan_id: str) -> InsurancePlan:
        """Look up a plan by id.

        Raises:
            KeyError: If the plan is not offered
        """
        if plan_id not in self._plans:
            raise KeyError(f"Unknown insurance plan: {plan_id}")
        return self._plans[plan_id]

    def premium_cents(self, trip_total_cents: int, plan: InsurancePlan | None) -> int:
        return premium_cents(trip_total_cents, plan)

    def quote_all(self, trip_total_cents: int) -> dict[str, int]:
        """Premium for every offered plan, keyed by plan id."""
        return {plan_id: premium_cents(trip_total_cents, plan) for plan_id, plan in self._plans.items()}
