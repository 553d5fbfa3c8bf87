"""Tests for add-on, protection, payment-plan and grand-total pricing."""

from datetime import date
from decimal import Decimal

import pytest

from checkout.app.models.common import PaymentOption
from checkout.app.models.extras import AddonSelection, InsurancePlan
from checkout.app.pricing.addons import AddonLedger, UnknownAddonError
from checkout.app.pricing.money import round_to_unit
from checkout.app.pricing.payment_plans import amount_due_now_cents, compute_payment_plan
from checkout.app.pricing.protection import ProtectionCalculator, premium_cents
from checkout.app.pricing.totals import compute_price_breakdown, loyalty_points

CHECK_IN = date(2026, 8, 10)


class TestAddonLedger:
    """Selection and pricing of add-ons."""

    def test_toggle_adds_then_removes(self, addon_ledger: AddonLedger) -> None:
        selections = addon_ledger.toggle([], "pool-heat")
        assert selections == [AddonSelection(addon_id="pool-heat", quantity=1)]
        assert addon_ledger.toggle(selections, "pool-heat") == []

    def test_toggle_unknown_addon_raises(self, addon_ledger: AddonLedger) -> None:
        with pytest.raises(UnknownAddonError):
            addon_ledger.toggle([], "hot-air-balloon")

    def test_set_quantity_keeps_position_and_zero_removes(self, addon_ledger: AddonLedger) -> None:
        selections = addon_ledger.toggle([], "early-checkin")
        selections = addon_ledger.toggle(selections, "dog-fee")
        selections = addon_ledger.set_quantity(selections, "early-checkin", 2)
        assert [s.addon_id for s in selections] == ["early-checkin", "dog-fee"]
        assert selections[0].quantity == 2

        selections = addon_ledger.set_quantity(selections, "dog-fee", 0)
        assert [s.addon_id for s in selections] == ["early-checkin"]

    def test_per_night_and_flat_line_totals(self, addon_ledger: AddonLedger) -> None:
        selections = [
            AddonSelection(addon_id="early-checkin"),
            AddonSelection(addon_id="pool-heat"),
            AddonSelection(addon_id="dog-fee", quantity=2),
        ]
        lines = {line.addon_id: line for line in addon_ledger.line_items(selections, 3)}

        assert lines["early-checkin"].line_total_cents == 10000
        assert lines["early-checkin"].nights_applied == 1
        assert lines["pool-heat"].line_total_cents == 150000
        assert lines["dog-fee"].line_total_cents == 150000
        assert addon_ledger.total_cents(selections, 3) == 310000

    def test_validate_rejects_duplicates(self, addon_ledger: AddonLedger) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            addon_ledger.validate(
                [AddonSelection(addon_id="dog-fee"), AddonSelection(addon_id="dog-fee")]
            )

    def test_unresolved_selection_is_dropped_from_lines(self) -> None:
        ledger = AddonLedger([])
        assert ledger.line_items([AddonSelection(addon_id="gone")], 3) == []


class TestProtection:
    """Trip protection premium."""

    def test_premium_is_seven_percent_rounded_to_unit(self, protection: ProtectionCalculator) -> None:
        plan = protection.get_plan("travel-protection")
        assert premium_cents(90000, plan) == 6300
        # 7% of 1234.56 = 86.4192 -> 86
        assert premium_cents(123456, plan) == 8600

    def test_declined_protection_costs_nothing(self) -> None:
        assert premium_cents(90000, None) == 0

    def test_unknown_plan_raises(self, protection: ProtectionCalculator) -> None:
        with pytest.raises(KeyError):
            protection.get_plan("platinum")

    def test_quote_all(self, protection: ProtectionCalculator) -> None:
        assert protection.quote_all(100000) == {"travel-protection": 7000}


class TestPaymentPlans:
    """Installment schedules."""

    def test_full_payment_is_single_installment(self) -> None:
        plan = compute_payment_plan(123456, PaymentOption.full)
        assert [i.amount_cents for i in plan.installments] == [123456]
        assert plan.amount_due_now_cents == 123456
        assert plan.remaining_cents == 0

    def test_deposit_collects_half_rounded_to_unit(self) -> None:
        plan = compute_payment_plan(123457, PaymentOption.deposit)
        assert [i.label for i in plan.installments] == ["Due today", "Balance due"]
        assert plan.amount_due_now_cents == 61700
        assert plan.installments[1].amount_cents == 123457 - 61700

    def test_split3_thousand_dollars(self) -> None:
        plan = compute_payment_plan(100000, PaymentOption.split3)
        assert [i.amount_cents for i in plan.installments] == [33400, 33300, 33300]
        assert [i.label for i in plan.installments] == ["Due today", "Payment 2", "Final payment"]

    def test_split3_remainder_of_two_units(self) -> None:
        plan = compute_payment_plan(100100, PaymentOption.split3)
        assert [i.amount_cents for i in plan.installments] == [33400, 33400, 33300]

    @pytest.mark.parametrize("total", [50000, 100100, 123500, 999800])
    def test_split3_due_now_is_rounded_third(self, total: int) -> None:
        # units mod 3 == 2: a third rounds up, so two installments carry the extra unit
        due_now = amount_due_now_cents(total, PaymentOption.split3)
        assert due_now == round_to_unit(Decimal(total) / 3)

    @pytest.mark.parametrize("total", [100000, 100100, 123457, 999999])
    def test_split3_never_front_loads_more_than_one_unit(self, total: int) -> None:
        plan = compute_payment_plan(total, PaymentOption.split3)
        amounts = [i.amount_cents for i in plan.installments]
        assert amounts[0] - amounts[1] <= 100
        assert amounts[0] <= round_to_unit(Decimal(total) / 3) + 100

    @pytest.mark.parametrize("option", list(PaymentOption))
    @pytest.mark.parametrize("total", [0, 1, 100, 99999, 123457, 1000001])
    def test_installments_sum_to_total(self, option: PaymentOption, total: int) -> None:
        plan = compute_payment_plan(total, option)
        assert sum(i.amount_cents for i in plan.installments) == total

    def test_custom_deposit_rate(self) -> None:
        assert amount_due_now_cents(100000, PaymentOption.deposit, deposit_rate=Decimal("0.3")) == 30000

    def test_negative_total_rejected(self) -> None:
        with pytest.raises(ValueError):
            compute_payment_plan(-1, PaymentOption.full)


class TestGrandTotal:
    """Central grand-total computation."""

    def test_no_quote_is_all_zero(self, addon_ledger: AddonLedger) -> None:
        breakdown = compute_price_breakdown(None, [AddonSelection(addon_id="pool-heat")], None, addon_ledger)
        assert breakdown.grand_total_cents == 0
        assert breakdown.addon_lines == []

    def test_grand_total_components(
        self, addon_ledger: AddonLedger, protection: ProtectionCalculator, quote_factory
    ) -> None:
        quote = quote_factory(CHECK_IN, 3, rate_cents=30000)
        plan = protection.get_plan("travel-protection")
        selections = [AddonSelection(addon_id="pool-heat"), AddonSelection(addon_id="early-checkin")]

        breakdown = compute_price_breakdown(quote, selections, plan, addon_ledger)

        assert breakdown.quote_total_cents == 90000
        assert breakdown.addons_total_cents == 160000
        # premium is on the quote total only
        assert breakdown.insurance_total_cents == 6300
        assert breakdown.grand_total_cents == 90000 + 160000 + 6300

    def test_recomputing_yields_same_result(
        self, addon_ledger: AddonLedger, protection: ProtectionCalculator, quote_factory
    ) -> None:
        quote = quote_factory(CHECK_IN, 4, rate_cents=27550, fees_cents=25000, taxes_cents=17234)
        plan = protection.get_plan("travel-protection")
        selections = [AddonSelection(addon_id="dog-fee", quantity=2)]

        first = compute_price_breakdown(quote, selections, plan, addon_ledger)
        second = compute_price_breakdown(quote, selections, plan, addon_ledger)
        assert first == second

    def test_replacing_plan_replaces_premium(self, addon_ledger: AddonLedger, quote_factory) -> None:
        quote = quote_factory(CHECK_IN, 3, rate_cents=30000)
        basic = InsurancePlan(id="basic", name="Basic", premium_rate=Decimal("0.05"))
        premium = InsurancePlan(id="premium", name="Premium", premium_rate=Decimal("0.10"))

        with_basic = compute_price_breakdown(quote, [], basic, addon_ledger)
        with_premium = compute_price_breakdown(quote, [], premium, addon_ledger)

        assert with_basic.insurance_total_cents == 4500
        assert with_premium.insurance_total_cents == 9000
        assert with_premium.grand_total_cents == 99000

    def test_loyalty_points(self) -> None:
        assert loyalty_points(100000) == 10000
        assert loyalty_points(12345, points_per_unit=10) == 1235
