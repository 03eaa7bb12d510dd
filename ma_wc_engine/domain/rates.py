"""Benefit rate engine - weekly rates under statutory formulas and state min/max"""

import logging
from typing import Iterable, List, Optional

from ma_wc_engine.domain.exceptions import InvalidInputError, NoApplicableRateError
from ma_wc_engine.domain.models import (
    BENEFIT_TYPES,
    AppliedRule,
    BenefitCalculation,
    BenefitType,
    RateTableRow,
    StateMinMax,
    WeeklyRateResult,
)
from ma_wc_engine.domain.schedule import (
    SECTION_31_RATE,
    SECTION_34_RATE,
    SECTION_34A_RATE,
    SECTION_35_EC_RATE,
    SECTION_35_RATE,
    get_statutory_max_weeks,
    to_benefit_type,
)
from ma_wc_engine.utils.date_utils import DateLike, is_date_in_period, parse_iso_date
from ma_wc_engine.utils.money import calculate_yearly

logger = logging.getLogger(__name__)


def get_state_min_max(date_of_injury: DateLike, table: Iterable[RateTableRow]) -> StateMinMax:
    """
    Find the state minimum and maximum in effect on the date of injury.

    The first row whose inclusive [effective_from, effective_to] range
    contains the date wins. Dates outside every period are never clamped
    to the nearest one.

    Raises:
        NoApplicableRateError: no row covers the date (or the table is empty)
    """
    injury_date = parse_iso_date(date_of_injury)
    rows = list(table)

    for row in rows:
        if is_date_in_period(injury_date, row.effective_from, row.effective_to):
            return StateMinMax(
                state_min=row.state_min,
                state_max=row.state_max,
                effective_from=row.effective_from,
                effective_to=row.effective_to,
            )

    periods = [f"{r.effective_from.isoformat()} to {r.effective_to.isoformat()}" for r in rows]
    raise NoApplicableRateError(
        f"No state rate found for date of injury: {injury_date.isoformat()}. "
        f"Available periods: {', '.join(periods) if periods else 'none'}",
        available_periods=periods,
    )


def apply_state_min_max(
    raw_weekly: float,
    aww: float,
    date_of_injury: DateLike,
    table: Iterable[RateTableRow],
) -> WeeklyRateResult:
    """
    Apply the Massachusetts minimum/maximum weekly rate rules.

    Rules:
    - raw of exactly 0 means no benefit is due (EC >= AWW); never raised
    - raw > max: pay the max
    - raw < min: pay the min, unless AWW itself is below the min,
      in which case pay the worker's actual AWW
    - otherwise pay raw
    """
    limits = get_state_min_max(date_of_injury, table)

    if raw_weekly == 0:
        final_weekly, rule = 0.0, AppliedRule.UNCHANGED
    elif raw_weekly > limits.state_max:
        final_weekly, rule = limits.state_max, AppliedRule.CAPPED_TO_MAX
    elif raw_weekly < limits.state_min:
        if aww >= limits.state_min:
            final_weekly, rule = limits.state_min, AppliedRule.RAISED_TO_MIN
        else:
            final_weekly, rule = aww, AppliedRule.AWW_BELOW_MIN_KEEP_AWW
    else:
        final_weekly, rule = raw_weekly, AppliedRule.UNCHANGED

    return WeeklyRateResult(
        raw_weekly=raw_weekly,
        final_weekly=final_weekly,
        applied_rule=rule,
        state_min=limits.state_min,
        state_max=limits.state_max,
    )


def calculate_raw_weekly(benefit_type, aww: float, ec: Optional[float] = None) -> float:
    """
    Raw (pre min/max) weekly benefit for a benefit type.

    Section 35 has no AWW-only formula: it is 75% of the clamped Section 34
    rate, which needs the rate table. Use calculate_weekly_rate for it.

    Raises:
        InvalidInputError: Section 35 or an unknown benefit type
    """
    benefit_type = to_benefit_type(benefit_type)
    aww = float(aww)

    if benefit_type == BenefitType.TTD:
        return aww * SECTION_34_RATE
    if benefit_type == BenefitType.TPD:
        raise InvalidInputError(
            "Section 35 is 75% of the clamped Section 34 rate; use calculate_weekly_rate"
        )
    if benefit_type == BenefitType.TPD_EC:
        ec = float(ec or 0)
        if ec >= aww:
            return 0.0
        return (aww - ec) * SECTION_35_EC_RATE
    if benefit_type == BenefitType.PERMANENT_TOTAL:
        return float(aww * SECTION_34A_RATE)
    if benefit_type == BenefitType.DEPENDENT:
        return float(aww * SECTION_31_RATE)
    raise InvalidInputError(f"Unknown benefit type: {benefit_type}")


def calculate_weekly_rate(
    benefit_type,
    aww: float,
    date_of_injury: DateLike,
    state_table: Iterable[RateTableRow],
    ec: Optional[float] = None,
) -> WeeklyRateResult:
    """
    Final weekly rate for one benefit type, state min/max applied.

    Section 35 is 75% of the *clamped* Section 34 rate, then clamped again.

    Raises:
        InvalidInputError: AWW is not positive (checked before any lookup)
        NoApplicableRateError: date of injury outside the rate table
    """
    benefit_type = to_benefit_type(benefit_type)
    if aww is None or aww <= 0:
        raise InvalidInputError("Average Weekly Wage must be greater than 0")

    aww = float(aww)
    table = list(state_table)

    if benefit_type == BenefitType.TPD:
        section_34 = calculate_weekly_rate(BenefitType.TTD, aww, date_of_injury, table)
        raw_weekly = section_34.final_weekly * SECTION_35_RATE
    else:
        raw_weekly = calculate_raw_weekly(benefit_type, aww, ec=ec)

    result = apply_state_min_max(raw_weekly, aww, date_of_injury, table)
    logger.debug(
        "Weekly rate calculated",
        extra={
            "benefit_type": benefit_type.value,
            "raw_weekly": result.raw_weekly,
            "final_weekly": result.final_weekly,
            "applied_rule": result.applied_rule.value,
        },
    )
    return result


def calculate_all_benefits(
    aww: float,
    date_of_injury: DateLike,
    state_table: Iterable[RateTableRow],
    ec: Optional[float] = None,
) -> List[BenefitCalculation]:
    """Weekly and yearly amounts for every benefit type, in canonical order.

    Earning capacity only applies to Section 35 EC.
    """
    table = list(state_table)
    calculations = []

    for benefit_type in BENEFIT_TYPES:
        result = calculate_weekly_rate(
            benefit_type,
            aww,
            date_of_injury,
            table,
            ec=ec if benefit_type == BenefitType.TPD_EC else None,
        )
        _, yearly_rounded = calculate_yearly(result.final_weekly)
        calculations.append(
            BenefitCalculation(
                type=benefit_type,
                raw_weekly=result.raw_weekly,
                final_weekly=result.final_weekly,
                yearly_amount=yearly_rounded,
                statutory_max_weeks=get_statutory_max_weeks(benefit_type),
                applied_rule=result.applied_rule,
            )
        )

    return calculations
