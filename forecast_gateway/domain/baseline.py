"""Baseline projection - calculated day-by-day balance from historical statistics"""

from datetime import date, datetime
from typing import Dict, List

from forecast_gateway.domain.models import IncomeCycle, StatsSnapshot
from forecast_gateway.utils.date_utils import generate_forecast_dates


def income_for_day(day_of_month: int, stats: StatsSnapshot, cycle: IncomeCycle) -> float:
    """
    Income injected on one forecast day.

    Cyclic earners receive the monthly income on every day inside their band;
    irregular earners receive the daily average every day.
    """
    if cycle is IncomeCycle.END_OF_MONTH:
        in_band = day_of_month >= 25 or day_of_month <= 5
        return stats.avg_monthly_income if in_band else 0.0
    if cycle is IncomeCycle.MID_MONTH:
        return stats.avg_monthly_income if 10 <= day_of_month <= 15 else 0.0
    return stats.avg_daily_income


def expense_for_day(offset: int, stats: StatsSnapshot) -> float:
    """Average daily expense extrapolated along the linear trend, floored at 0"""
    return max(0.0, stats.avg_daily_expense + stats.expense_trend_per_day * offset)


def project_baseline(
    current_balance: float,
    stats: StatsSnapshot,
    cycle: IncomeCycle,
    overlay: Dict[int, float],
    forecast_days: int,
    now: date | datetime,
) -> List[float]:
    """
    Project end-of-day balances for forecast days 1..forecast_days.

    Today is the starting point and is not part of the output. Values are
    not clamped: a negative baseline is meaningful to the blender.
    """
    baseline: List[float] = []
    balance = float(current_balance)

    for offset, day in enumerate(generate_forecast_dates(now, forecast_days)):
        balance = (
            balance
            + income_for_day(day.day, stats, cycle)
            - expense_for_day(offset, stats)
            - overlay.get(offset, 0.0)
        )
        baseline.append(balance)

    return baseline
