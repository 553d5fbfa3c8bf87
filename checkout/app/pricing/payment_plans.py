"""Payment plan calculator.

Rules:
- full: one charge for the grand total.
- deposit: half now (rounded half-up to a whole unit), the balance before check-in.
- split3: whole units dealt out front-loaded, so the installments differ by
  at most one unit and $1000 becomes [334, 333, 333]; sub-unit cents go on
  the final payment.

The last installment carries whatever is left, so installments sum to the
grand total exactly.
"""

from decimal import Decimal

from checkout.app.models.common import PaymentOption
from checkout.app.models.payment import Installment, PaymentPlan
from checkout.app.pricing.money import allocate_installments, apply_rate, round_to_unit

DEFAULT_DEPOSIT_RATE = Decimal("0.5")

SPLIT3_LABELS = ("Due today", "Payment 2", "Final payment")


def compute_payment_plan(
    grand_total_cents: int,
    option: PaymentOption,
    *,
    deposit_rate: Decimal = DEFAULT_DEPOSIT_RATE,
) -> PaymentPlan:
    """Build the installment schedule for a grand total.

    Args:
        grand_total_cents: Amount to collect
        option: Selected payment option
        deposit_rate: Share collected now for the deposit option

    Returns:
        PaymentPlan whose installments sum to grand_total_cents
    """
    if grand_total_cents < 0:
        raise ValueError(f"grand_total_cents must be >= 0, got {grand_total_cents}")

    if option == PaymentOption.full:
        installments = [Installment(sequence=1, label="Due today", amount_cents=grand_total_cents)]

    elif option == PaymentOption.deposit:
        due_now = round_to_unit(apply_rate(grand_total_cents, deposit_rate))
        due_now = min(due_now, grand_total_cents)
        installments = [
            Installment(sequence=1, label="Due today", amount_cents=due_now),
            Installment(sequence=2, label="Balance due", amount_cents=grand_total_cents - due_now),
        ]

    elif option == PaymentOption.split3:
        amounts = allocate_installments(grand_total_cents, len(SPLIT3_LABELS))
        installments = [
            Installment(sequence=i + 1, label=label, amount_cents=amount)
            for i, (label, amount) in enumerate(zip(SPLIT3_LABELS, amounts, strict=True))
        ]

    else:
        raise ValueError(f"Unsupported payment option: {option}")

    return PaymentPlan(option=option, grand_total_cents=grand_total_cents, installments=installments)


def amount_due_now_cents(
    grand_total_cents: int,
    option: PaymentOption,
    *,
    deposit_rate: Decimal = DEFAULT_DEPOSIT_RATE,
) -> int:
    """Convenience accessor for the first installment."""
    return compute_payment_plan(
        grand_total_cents, option, deposit_rate=deposit_rate
    ).amount_due_now_cents
