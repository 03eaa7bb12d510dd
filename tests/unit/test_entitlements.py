"""Unit tests for entitlement aggregation and shared statutory caps"""

import pytest
from ma_wc_engine.domain.entitlements import (
    aggregate_entitlements,
    dollars_paid_by_type,
    rates_by_type,
    total_dollars_remaining,
    weeks_used_by_type,
)
from ma_wc_engine.domain.exceptions import InvalidInputError
from ma_wc_engine.domain.models import BenefitType
from ma_wc_engine.domain.rates import calculate_all_benefits


def test_weeks_used_by_type_defaults_to_zero(mixed_ledger):
    usage = weeks_used_by_type(mixed_ledger)

    assert set(usage) == set(BenefitType)
    assert usage[BenefitType.TTD] == 26
    assert usage[BenefitType.TPD_EC] == 26
    assert usage[BenefitType.TPD] == 0
    assert usage[BenefitType.DEPENDENT] == 0


def test_mixed_ledger_combined_groups(mixed_ledger, current_rates):
    """Test 34 counts toward the 7-year pool only; 35 EC toward both"""
    summary = aggregate_entitlements(mixed_ledger, current_rates)

    assert summary.combined_35_usage.weeks_used == 26
    assert summary.combined_35_usage.weeks_remaining == 182
    assert summary.combined_35_usage.max_weeks == 208

    assert summary.combined_usage.weeks_used == 52
    assert summary.combined_usage.weeks_remaining == 312
    assert summary.combined_usage.max_weeks == 364


def test_ttd_individual_accounting(mixed_ledger, current_rates):
    summary = aggregate_entitlements(mixed_ledger, current_rates)
    ttd = summary.for_type(BenefitType.TTD)

    assert ttd.statutory_max_weeks == 156
    assert ttd.weeks_used == 26
    assert ttd.weeks_remaining == 130
    assert ttd.dollars_remaining == pytest.approx(130 * 600.00)
    assert ttd.shares_limit_with == []


def test_section_35_types_report_shared_pool(make_entry, current_rates):
    """Test 35 and 35 EC both report the combined weeks, priced at their own rate"""
    ledger = [
        make_entry("tpd-1", BenefitType.TPD, 40, 450.00),
        make_entry("ec-1", BenefitType.TPD_EC, 10, 365.83, ec_used=600.00),
    ]
    summary = aggregate_entitlements(ledger, current_rates)
    tpd = summary.for_type(BenefitType.TPD)
    tpd_ec = summary.for_type(BenefitType.TPD_EC)

    assert summary.weeks_used_by_type[BenefitType.TPD] == 40
    assert tpd.weeks_used == 50
    assert tpd_ec.weeks_used == 50
    assert tpd.weeks_remaining == tpd_ec.weeks_remaining == 158
    assert tpd.statutory_max_weeks == tpd_ec.statutory_max_weeks == 208
    assert tpd.dollars_remaining == pytest.approx(158 * 450.00)
    assert tpd_ec.dollars_remaining == pytest.approx(158 * 365.83)
    assert tpd.shares_limit_with == [BenefitType.TPD_EC]
    assert tpd_ec.shares_limit_with == [BenefitType.TPD]


def test_shared_pool_conservation(make_entry, current_rates):
    """Test combined 35 usage is exactly the sum of both types' own weeks"""
    ledger = [
        make_entry("a", BenefitType.TPD, 12.5714, 450.00),
        make_entry("b", BenefitType.TPD_EC, 3.4286, 365.83),
        make_entry("c", BenefitType.TPD, 7, 450.00),
        make_entry("d", BenefitType.TTD, 30, 600.00),
    ]
    summary = aggregate_entitlements(ledger, current_rates)
    own = summary.weeks_used_by_type

    expected = own[BenefitType.TPD] + own[BenefitType.TPD_EC]
    assert summary.combined_35_usage.weeks_used == expected
    assert summary.for_type(BenefitType.TPD).weeks_used == expected
    assert summary.for_type(BenefitType.TPD_EC).weeks_used == expected


def test_summing_shared_types_double_counts_the_pool(make_entry, current_rates):
    """Test the per-type remaining figures overlap; only the group figure is the true pool"""
    ledger = [make_entry("tpd-1", BenefitType.TPD, 100, 450.00)]
    summary = aggregate_entitlements(ledger, current_rates)

    per_type_sum = (
        summary.for_type(BenefitType.TPD).weeks_remaining
        + summary.for_type(BenefitType.TPD_EC).weeks_remaining
    )
    assert summary.combined_35_usage.weeks_remaining == 108
    assert per_type_sum == 2 * 108


def test_total_dollars_remaining_counts_shared_pool_once(mixed_ledger, current_rates):
    """Test 35 and 35 EC contribute one pool to the dollar total"""
    summary = aggregate_entitlements(mixed_ledger, current_rates)

    ttd = 130 * 600.00
    pool = max(182 * 450.00, 182 * 365.83)
    assert total_dollars_remaining(summary.per_type) == pytest.approx(ttd + pool)


def test_exhausted_caps_floor_at_zero(make_entry, current_rates):
    ledger = [
        make_entry("ttd-1", BenefitType.TTD, 200, 600.00),
        make_entry("tpd-1", BenefitType.TPD, 250, 450.00),
    ]
    summary = aggregate_entitlements(ledger, current_rates)

    assert summary.for_type(BenefitType.TTD).weeks_remaining == 0
    assert summary.for_type(BenefitType.TTD).dollars_remaining == 0
    assert summary.combined_35_usage.weeks_remaining == 0
    assert summary.combined_usage.weeks_used == 450
    assert summary.combined_usage.weeks_remaining == 0


def test_life_benefits_have_no_remaining(make_entry, current_rates):
    ledger = [make_entry("pt-1", BenefitType.PERMANENT_TOTAL, 52, 666.67)]
    summary = aggregate_entitlements(ledger, current_rates)

    for benefit_type in (BenefitType.PERMANENT_TOTAL, BenefitType.DEPENDENT):
        entitlement = summary.for_type(benefit_type)
        assert entitlement.is_life_benefit
        assert entitlement.statutory_max_weeks is None
        assert entitlement.weeks_remaining is None
        assert entitlement.dollars_remaining is None

    assert summary.for_type(BenefitType.PERMANENT_TOTAL).weeks_used == 52
    # Life benefit weeks never touch the 7-year pool
    assert summary.combined_usage.weeks_used == 0


def test_total_dollars_paid_spans_all_types(mixed_ledger, make_entry, current_rates):
    ledger = mixed_ledger + [make_entry("dep-1", BenefitType.DEPENDENT, 10, 666.67)]
    summary = aggregate_entitlements(ledger, current_rates)

    assert summary.total_dollars_paid == pytest.approx(26 * 600.00 + 26 * 365.83 + 10 * 666.67)
    assert summary.dollars_paid_by_type == dollars_paid_by_type(ledger)


def test_empty_ledger(current_rates):
    summary = aggregate_entitlements([], current_rates)

    assert summary.total_dollars_paid == 0
    assert summary.combined_usage.weeks_remaining == 364
    assert summary.for_type(BenefitType.TPD).weeks_remaining == 208


def test_accepts_rate_results_and_section_codes(mixed_ledger, state_table):
    """Test current rates may be BenefitCalculation results keyed by code"""
    calculations = calculate_all_benefits(1000, "2024-11-01", state_table, ec=600)
    by_code = {c.type.value: c for c in calculations}

    from_results = aggregate_entitlements(mixed_ledger, by_code)
    from_floats = aggregate_entitlements(mixed_ledger, rates_by_type(calculations))

    assert from_results.per_type == from_floats.per_type


def test_missing_finite_rates_rejected(mixed_ledger):
    """Test remaining weeks are never priced at $0 for a type without a rate"""
    with pytest.raises(InvalidInputError) as exc_info:
        aggregate_entitlements(mixed_ledger, {})

    message = str(exc_info.value)
    for code in ("34", "35", "35ec"):
        assert code in message
    assert "34A" not in message


def test_life_benefit_rates_optional(mixed_ledger, current_rates):
    finite_only = {
        t: rate
        for t, rate in current_rates.items()
        if t not in (BenefitType.PERMANENT_TOTAL, BenefitType.DEPENDENT)
    }

    summary = aggregate_entitlements(mixed_ledger, finite_only)

    assert summary.for_type(BenefitType.TTD).dollars_remaining == pytest.approx(130 * 600.00)
    assert summary.for_type(BenefitType.DEPENDENT).dollars_remaining is None
