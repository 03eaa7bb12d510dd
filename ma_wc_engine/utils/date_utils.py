"""Date and benefit-week arithmetic"""

import math
import re
from datetime import date, timedelta
from typing import Union

from ma_wc_engine.domain.exceptions import InvalidDateRangeError, InvalidInputError
from ma_wc_engine.domain.models import ProrationMode, WeekCalculation
from ma_wc_engine.domain.schedule import DAYS_PER_WEEK
from ma_wc_engine.utils.money import round_to_weeks

DateLike = Union[date, str]

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: DateLike) -> date:
    """Parse a strict YYYY-MM-DD string (dates pass through unchanged)"""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise InvalidInputError(f"Expected ISO date (YYYY-MM-DD), got {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidInputError(f"Invalid date: {value}") from e


def is_valid_iso_date(value: str) -> bool:
    try:
        parse_iso_date(value)
    except InvalidInputError:
        return False
    return True


def is_date_in_period(check: DateLike, effective_from: DateLike, effective_to: DateLike) -> bool:
    """True if check falls within [effective_from, effective_to], both ends inclusive"""
    return parse_iso_date(effective_from) <= parse_iso_date(check) <= parse_iso_date(effective_to)


def start_of_week(day: date) -> date:
    """Monday of the week containing day"""
    return day - timedelta(days=day.weekday())


def count_calendar_weeks(start: date, end: date) -> int:
    """Number of Monday-starting weeks intersected by [start, end]"""
    return (start_of_week(end) - start_of_week(start)).days // 7 + 1


def weeks_between(
    start: DateLike,
    end: DateLike,
    mode: ProrationMode | str = ProrationMode.DAYS,
) -> WeekCalculation:
    """
    Elapsed days and equivalent benefit weeks between two dates.

    Modes:
    - days (default): days / 7, rounded to 4 decimals
    - calendar: count of Monday-starting weeks touched by the range,
      always a whole number

    Raises:
        InvalidDateRangeError: end is before start
    """
    start_date = parse_iso_date(start)
    end_date = parse_iso_date(end)

    if end_date < start_date:
        raise InvalidDateRangeError(
            f"End date ({end_date.isoformat()}) must be on or after start date ({start_date.isoformat()})"
        )

    try:
        mode = ProrationMode(mode)
    except ValueError as e:
        raise InvalidInputError(f"Unknown proration mode: {mode}") from e

    days = (end_date - start_date).days

    if mode == ProrationMode.CALENDAR:
        weeks_decimal = float(count_calendar_weeks(start_date, end_date))
    else:
        weeks_decimal = round_to_weeks(days / DAYS_PER_WEEK)

    full_weeks = math.floor(weeks_decimal)
    fractional_weeks = round_to_weeks(weeks_decimal - full_weeks)

    return WeekCalculation(
        days=days,
        weeks_decimal=weeks_decimal,
        full_weeks=full_weeks,
        fractional_weeks=fractional_weeks,
    )
