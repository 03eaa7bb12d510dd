"""Ledger entry construction and validation"""

import logging
import math
import uuid
from datetime import date
from typing import Iterable, List, Optional

from ma_wc_engine.domain.exceptions import InvalidInputError, InvalidLedgerEntryError
from ma_wc_engine.domain.models import (
    BenefitType,
    EntryOverlap,
    LedgerEntry,
    ProrationMode,
    RateTableRow,
    ValidationError,
    ValidationResult,
)
from ma_wc_engine.domain.rates import calculate_weekly_rate
from ma_wc_engine.utils.date_utils import DateLike, parse_iso_date, weeks_between

logger = logging.getLogger(__name__)

MAX_PLAUSIBLE_AWW = 999_999


def _is_money(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value >= 0
    )


def _try_parse(value) -> Optional[date]:
    try:
        return parse_iso_date(value)
    except InvalidInputError:
        return None


def validate_aww(aww) -> ValidationResult:
    result = ValidationResult()
    if not _is_money(aww):
        result.errors.append(ValidationError("aww", "Average Weekly Wage must be a valid positive number"))
    elif aww <= 0:
        result.errors.append(ValidationError("aww", "Average Weekly Wage must be greater than $0"))
    elif aww > MAX_PLAUSIBLE_AWW:
        result.errors.append(ValidationError("aww", "Average Weekly Wage seems unusually high. Please verify."))
    return result


def validate_earning_capacity(ec) -> ValidationResult:
    result = ValidationResult()
    if not isinstance(ec, (int, float)) or isinstance(ec, bool) or not math.isfinite(ec):
        result.errors.append(ValidationError("earning_capacity", "Earning Capacity must be a valid number"))
    elif ec < 0:
        result.errors.append(ValidationError("earning_capacity", "Earning Capacity cannot be negative"))
    return result


def validate_date_of_injury(date_of_injury, today: date) -> ValidationResult:
    """Date of injury must be ISO formatted, within 100 years back and 10 years ahead"""
    result = ValidationResult()
    if not date_of_injury:
        result.errors.append(ValidationError("date_of_injury", "Date of Injury is required"))
        return result

    injury_date = _try_parse(date_of_injury)
    if injury_date is None:
        result.errors.append(
            ValidationError("date_of_injury", "Date of Injury must be a valid date in YYYY-MM-DD format")
        )
    elif injury_date < _shift_years(today, -100):
        result.errors.append(ValidationError("date_of_injury", "Date of Injury seems too far in the past"))
    elif injury_date > _shift_years(today, 10):
        result.errors.append(
            ValidationError("date_of_injury", "Date of Injury cannot be more than 10 years in the future")
        )
    return result


def _shift_years(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return day.replace(year=day.year + years, day=28)


def validate_ledger_entry(
    benefit_type,
    start,
    end=None,
    aww_used=None,
    ec_used=None,
    aww: Optional[float] = None,
) -> ValidationResult:
    """
    Validate ledger entry fields before the entry is built.

    ``aww`` is the claim's current AWW, used to flag an earning capacity
    that leaves no Section 35 EC benefit.
    """
    result = ValidationResult()
    errors = result.errors

    try:
        benefit_type = BenefitType(benefit_type)
    except ValueError:
        errors.append(ValidationError("type", "Must select a valid benefit type"))
        benefit_type = None

    start_date = None
    if not start:
        errors.append(ValidationError("start", "Start date is required"))
    else:
        start_date = _try_parse(start)
        if start_date is None:
            errors.append(ValidationError("start", "Start date must be valid"))

    if end:
        end_date = _try_parse(end)
        if end_date is None:
            errors.append(ValidationError("end", "End date must be valid"))
        elif start_date is not None and end_date < start_date:
            errors.append(ValidationError("end", "End date must be after start date"))

    if aww_used is not None and (not _is_money(aww_used) or aww_used <= 0):
        errors.append(ValidationError("aww_used", "AWW used must be a positive number"))

    if benefit_type == BenefitType.TPD_EC:
        if ec_used is None:
            errors.append(ValidationError("ec_used", "Earning Capacity is required for Section 35 EC entries"))
        elif not _is_money(ec_used):
            errors.append(ValidationError("ec_used", "Earning Capacity must be a valid non-negative number"))
        elif aww and ec_used >= aww:
            errors.append(
                ValidationError(
                    "ec_used",
                    "Warning: Earning Capacity equals or exceeds AWW, resulting in $0 benefit",
                )
            )

    return result


def build_ledger_entry(
    benefit_type,
    start: DateLike,
    end: Optional[DateLike],
    aww_used: float,
    date_of_injury: DateLike,
    state_table: Iterable[RateTableRow],
    today: date,
    ec_used: Optional[float] = None,
    proration: ProrationMode | str = ProrationMode.DAYS,
    entry_id: Optional[str] = None,
    notes: Optional[str] = None,
) -> LedgerEntry:
    """
    Build a fully populated ledger entry for one payment period.

    An ongoing period (``end`` is None) is measured up to ``today``.
    Weeks and rates are fixed at creation time; dollars_paid is
    final_weekly x weeks.

    Raises:
        InvalidLedgerEntryError: any field fails validation
        NoApplicableRateError: date of injury outside the rate table
    """
    validation = validate_ledger_entry(
        benefit_type,
        start,
        end,
        aww_used=aww_used if aww_used is not None else 0,
        ec_used=ec_used,
    )
    if not validation.is_valid:
        logger.warning(
            "Ledger entry rejected",
            extra={"errors": [f"{e.field}: {e.message}" for e in validation.errors]},
        )
        raise InvalidLedgerEntryError(validation.errors)

    benefit_type = BenefitType(benefit_type)
    start_date = parse_iso_date(start)
    end_date = parse_iso_date(end) if end else None

    week_calc = weeks_between(start_date, end_date or today, proration)
    rate = calculate_weekly_rate(
        benefit_type,
        aww_used,
        date_of_injury,
        state_table,
        ec=ec_used if benefit_type == BenefitType.TPD_EC else None,
    )

    return LedgerEntry(
        id=entry_id or str(uuid.uuid4()),
        type=benefit_type,
        start=start_date,
        end=end_date,
        weeks=week_calc.weeks_decimal,
        raw_weekly=rate.raw_weekly,
        final_weekly=rate.final_weekly,
        dollars_paid=rate.final_weekly * week_calc.weeks_decimal,
        aww_used=aww_used,
        ec_used=ec_used if benefit_type == BenefitType.TPD_EC else None,
        notes=notes,
    )


def find_overlapping_entries(ledger: Iterable[LedgerEntry], today: date) -> List[EntryOverlap]:
    """Pairs of entries whose date ranges intersect. Ongoing entries end today."""
    entries = list(ledger)
    overlaps = []

    for i, first in enumerate(entries):
        for second in entries[i + 1:]:
            overlap_start = max(first.start, second.start)
            overlap_end = min(first.end or today, second.end or today)
            if overlap_start <= overlap_end:
                overlaps.append(
                    EntryOverlap(
                        entry1=first,
                        entry2=second,
                        overlap_days=(overlap_end - overlap_start).days,
                    )
                )

    return overlaps
