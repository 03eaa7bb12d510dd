"""Entitlement accounting - weeks and dollars consumed from statutory caps"""

import logging
from typing import Dict, Iterable, List, Mapping

from ma_wc_engine.domain.exceptions import InvalidInputError
from ma_wc_engine.domain.models import (
    BENEFIT_TYPES,
    BenefitType,
    CombinedUsage,
    EntitlementSummary,
    LedgerEntry,
    RemainingEntitlement,
)
from ma_wc_engine.domain.schedule import (
    SECTION_34_35_GROUP,
    SECTION_35_GROUP,
    CapGroup,
    get_shared_group,
    get_statutory_max_weeks,
    is_life_benefit,
    shares_limit_with,
    to_benefit_type,
)

logger = logging.getLogger(__name__)


def weeks_used_by_type(ledger: Iterable[LedgerEntry]) -> Dict[BenefitType, float]:
    """Sum ledger weeks per benefit type (0 for types with no entries)"""
    usage = {benefit_type: 0.0 for benefit_type in BENEFIT_TYPES}
    for entry in ledger:
        usage[to_benefit_type(entry.type)] += entry.weeks
    return usage


def dollars_paid_by_type(ledger: Iterable[LedgerEntry]) -> Dict[BenefitType, float]:
    """Sum ledger dollars paid per benefit type (0 for types with no entries)"""
    payments = {benefit_type: 0.0 for benefit_type in BENEFIT_TYPES}
    for entry in ledger:
        payments[to_benefit_type(entry.type)] += entry.dollars_paid
    return payments


def group_usage(group: CapGroup, weeks_used: Mapping[BenefitType, float]) -> CombinedUsage:
    """Usage of a shared-cap group: member weeks summed against the group max"""
    used = sum(weeks_used[member] for member in group.members)
    return CombinedUsage(
        weeks_used=used,
        weeks_remaining=max(0.0, group.max_weeks - used),
        max_weeks=group.max_weeks,
    )


def _remaining_for_type(
    benefit_type: BenefitType,
    final_weekly: float,
    weeks_used: Mapping[BenefitType, float],
    shared_usage: Mapping[str, CombinedUsage],
) -> RemainingEntitlement:
    if is_life_benefit(benefit_type):
        return RemainingEntitlement(
            type=benefit_type,
            statutory_max_weeks=None,
            weeks_used=weeks_used[benefit_type],
            weeks_remaining=None,
            dollars_remaining=None,
            is_life_benefit=True,
        )

    group = get_shared_group(benefit_type)
    if group is not None:
        # Every member reports the whole pool; summing members double counts it
        usage = shared_usage[group.group_id]
        return RemainingEntitlement(
            type=benefit_type,
            statutory_max_weeks=usage.max_weeks,
            weeks_used=usage.weeks_used,
            weeks_remaining=usage.weeks_remaining,
            dollars_remaining=usage.weeks_remaining * final_weekly,
            is_life_benefit=False,
            shares_limit_with=shares_limit_with(benefit_type),
        )

    max_weeks = get_statutory_max_weeks(benefit_type)
    weeks_remaining = max(0.0, max_weeks - weeks_used[benefit_type])
    return RemainingEntitlement(
        type=benefit_type,
        statutory_max_weeks=max_weeks,
        weeks_used=weeks_used[benefit_type],
        weeks_remaining=weeks_remaining,
        dollars_remaining=weeks_remaining * final_weekly,
        is_life_benefit=False,
    )


def aggregate_entitlements(
    ledger: Iterable[LedgerEntry],
    current_rates: Mapping,
) -> EntitlementSummary:
    """
    Aggregate a ledger into remaining entitlements per benefit type.

    Two overlapping caps apply:
    - Section 35 and 35 EC share one 208-week pool. Both types report
      the combined weeks used and the pool's remaining weeks, priced at
      their own weekly rate.
    - Sections 34, 35 and 35 EC together may not exceed 364 weeks. This
      ceiling is reported separately and does not reduce per-type figures.

    Args:
        ledger: historical payment periods (read only)
        current_rates: benefit type -> current final weekly rate; accepts
            floats or anything with a ``final_weekly`` attribute.
            Life benefits may be omitted; every finite type is required.

    Raises:
        InvalidInputError: a finite benefit type has no current rate
    """
    entries: List[LedgerEntry] = list(ledger)
    weeks_used = weeks_used_by_type(entries)
    dollars_paid = dollars_paid_by_type(entries)

    combined_35 = group_usage(SECTION_35_GROUP, weeks_used)
    shared_usage = {SECTION_35_GROUP.group_id: combined_35}

    rates = {to_benefit_type(k): _final_weekly(v) for k, v in current_rates.items()}
    missing = [t.value for t in BENEFIT_TYPES if not is_life_benefit(t) and t not in rates]
    if missing:
        raise InvalidInputError(f"Missing current weekly rate for benefit types: {', '.join(missing)}")

    per_type = [
        _remaining_for_type(benefit_type, rates.get(benefit_type, 0.0), weeks_used, shared_usage)
        for benefit_type in BENEFIT_TYPES
    ]

    summary = EntitlementSummary(
        per_type=per_type,
        combined_usage=group_usage(SECTION_34_35_GROUP, weeks_used),
        combined_35_usage=combined_35,
        weeks_used_by_type=weeks_used,
        dollars_paid_by_type=dollars_paid,
        total_dollars_paid=sum(entry.dollars_paid for entry in entries),
    )
    logger.debug(
        "Entitlements aggregated",
        extra={
            "ledger_entries": len(entries),
            "combined_weeks_used": summary.combined_usage.weeks_used,
            "combined_35_weeks_used": combined_35.weeks_used,
        },
    )
    return summary


def total_dollars_remaining(per_type: Iterable[RemainingEntitlement]) -> float:
    """
    Total remaining dollars across finite benefit types.

    Types that share a pool are counted once per pool, at the largest
    member figure, since the pool can only be paid out once. Life
    benefits have no finite total and are excluded.
    """
    total = 0.0
    pooled: Dict[str, float] = {}

    for entitlement in per_type:
        if entitlement.dollars_remaining is None:
            continue
        group = get_shared_group(entitlement.type)
        if group is None:
            total += entitlement.dollars_remaining
        else:
            pooled[group.group_id] = max(pooled.get(group.group_id, 0.0), entitlement.dollars_remaining)

    return total + sum(pooled.values())


def _final_weekly(rate) -> float:
    if hasattr(rate, "final_weekly"):
        return rate.final_weekly
    return float(rate)


def rates_by_type(calculations: Iterable) -> Dict[BenefitType, float]:
    """Map benefit type -> final weekly from BenefitCalculation results"""
    return {to_benefit_type(c.type): c.final_weekly for c in calculations}
