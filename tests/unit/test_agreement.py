"""Tests for addenda selection and the agreement gate."""

from datetime import date

import pytest

from checkout.app.models.guest import PartyComposition
from checkout.app.models.property import Property
from checkout.app.models.quote import DateRange
from checkout.app.orchestration.agreement import (
    AgreementGate,
    AgreementValidationError,
    agreement_terms,
    compute_addenda,
)
from checkout.app.orchestration.state import BookingDraft

RANGE = DateRange(check_in=date(2026, 8, 10), check_out=date(2026, 8, 13))


class TestComputeAddenda:
    """Which addenda apply."""

    def test_pool_property_without_pets_requires_pool_rules(self, pool_property: Property) -> None:
        addenda = compute_addenda(pool_property, PartyComposition(pets=0))
        assert [(a.id, a.required) for a in addenda] == [("pool-rules", True)]

    def test_plain_property_without_pets_has_no_addenda(self, plain_property: Property) -> None:
        assert compute_addenda(plain_property, PartyComposition()) == []

    def test_hot_tub_alone_triggers_pool_rules(self, plain_property: Property) -> None:
        listing = plain_property.model_copy(update={"amenities": ["hot-tub"]})
        assert [a.id for a in compute_addenda(listing, PartyComposition())] == ["pool-rules"]

    def test_pets_add_full_package(self, plain_property: Property) -> None:
        addenda = compute_addenda(plain_property, PartyComposition(pets=1))
        assert [(a.id, a.required) for a in addenda] == [
            ("pet-policy", True),
            ("pool-rules", True),
            ("parking", False),
        ]

    def test_is_pure(self, pool_property: Property) -> None:
        party = PartyComposition(pets=2)
        assert compute_addenda(pool_property, party) == compute_addenda(pool_property, party)


class TestAgreementGate:
    """Signing and invalidation."""

    @pytest.fixture
    def draft(self, pool_property: Property) -> BookingDraft:
        return BookingDraft(listing=pool_property, date_range=RANGE)

    def test_signing_without_required_addendum_fails(
        self, draft: BookingDraft, pool_property: Property
    ) -> None:
        gate = AgreementGate(draft)
        addenda = compute_addenda(pool_property, draft.party)
        terms = agreement_terms(100000, RANGE, draft.party)

        with pytest.raises(AgreementValidationError) as exc_info:
            gate.sign("Dana Reyes", [], addenda, terms)

        assert [v.code for v in exc_info.value.violations] == ["ADDENDUM_NOT_ACCEPTED"]
        assert gate.is_signed is False

    def test_blank_signature_fails(self, draft: BookingDraft) -> None:
        gate = AgreementGate(draft)
        terms = agreement_terms(100000, RANGE, draft.party)

        with pytest.raises(AgreementValidationError) as exc_info:
            gate.sign("   ", [], [], terms)
        assert exc_info.value.violations[0].code == "SIGNATURE_MISSING"

    def test_sign_stores_agreement_on_draft(
        self, draft: BookingDraft, pool_property: Property
    ) -> None:
        gate = AgreementGate(draft)
        addenda = compute_addenda(pool_property, draft.party)
        terms = agreement_terms(100000, RANGE, draft.party)

        agreement = gate.sign("Dana Reyes", ["pool-rules", "not-offered"], addenda, terms)

        assert draft.agreement == agreement
        assert agreement.accepted_addendum_ids == frozenset({"pool-rules"})
        assert gate.evaluate(addenda, terms) == []

    def test_changed_terms_make_signature_stale(self, draft: BookingDraft) -> None:
        gate = AgreementGate(draft)
        terms = agreement_terms(100000, RANGE, draft.party)
        gate.sign("Dana Reyes", [], [], terms)

        new_terms = agreement_terms(107000, RANGE, draft.party)
        assert [v.code for v in gate.evaluate([], new_terms)] == ["SIGNATURE_STALE"]

        assert gate.refresh(new_terms) is True
        assert gate.is_signed is False
        assert [v.code for v in gate.evaluate([], new_terms)] == ["SIGNATURE_MISSING"]

    def test_refresh_keeps_signature_for_same_terms(self, draft: BookingDraft) -> None:
        gate = AgreementGate(draft)
        terms = agreement_terms(100000, RANGE, draft.party)
        gate.sign("Dana Reyes", [], [], terms)

        assert gate.refresh(agreement_terms(100000, RANGE, draft.party)) is False
        assert gate.is_signed is True

    def test_invalidate_when_unsigned_is_noop(self, draft: BookingDraft) -> None:
        assert AgreementGate(draft).invalidate("dates_changed") is False
