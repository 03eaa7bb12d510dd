"""Rounding helpers for dollar and week amounts"""

from decimal import Decimal, ROUND_HALF_UP

from ma_wc_engine.domain.schedule import WEEKS_PER_YEAR


def round_to_currency(amount: float) -> float:
    """Round to cents, half away from zero. Keep full precision until display."""
    return float(Decimal(repr(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def round_to_weeks(weeks: float) -> float:
    """Round to 4 decimal places for week figures"""
    return float(Decimal(repr(weeks)).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP))


def calculate_yearly(weekly_rate: float) -> tuple[float, float]:
    """
    Yearly amount for a weekly rate.

    Returns: (exact, rounded_to_cents)
    """
    exact = weekly_rate * WEEKS_PER_YEAR
    return exact, round_to_currency(exact)
