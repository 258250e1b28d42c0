"""Transaction statistics - daily aggregates, dispersion and trend"""

import math
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Sequence

from forecast_gateway.domain.models import CategoryTotal, StatsSnapshot, Transaction
from forecast_gateway.utils.date_utils import as_date

OTHER_CATEGORY = "Other"


def ols_slope(values: Sequence[float]) -> float:
    """
    Ordinary least-squares slope of values against their zero-based index.

    slope = (n·Σxy − Σx·Σy) / (n·Σx² − (Σx)²), and 0 when n <= 1.
    """
    n = len(values)
    if n <= 1:
        return 0.0

    sum_x = n * (n - 1) / 2
    sum_x2 = n * (n - 1) * (2 * n - 1) / 6
    sum_y = sum(values)
    sum_xy = sum(i * y for i, y in enumerate(values))

    return (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)


def population_std_dev(values: Sequence[float]) -> float:
    """Population standard deviation (divides by n, not n - 1)"""
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))


def _category_totals(transactions: Iterable[Transaction]) -> Dict[str, CategoryTotal]:
    totals: Dict[str, CategoryTotal] = {}
    for txn in transactions:
        if txn.is_income:
            continue
        key = (txn.category or "").strip() or OTHER_CATEGORY
        bucket = totals.setdefault(key, CategoryTotal())
        bucket.total += txn.amount
        bucket.count += 1
        bucket.avg = bucket.total / bucket.count
    return totals


def compute_statistics(transactions: List[Transaction]) -> StatsSnapshot:
    """
    Derive aggregate daily statistics from transaction history.

    Only calendar days carrying at least one transaction are observed; gaps
    are not zero-filled, so averages divide by the observed-day count rather
    than the calendar span. Trends are regressed over the observed days in
    chronological order.
    """
    if not transactions:
        return StatsSnapshot(
            avg_daily_income=0.0,
            avg_daily_expense=0.0,
            income_std_dev=0.0,
            expense_std_dev=0.0,
            income_trend_per_day=0.0,
            expense_trend_per_day=0.0,
            category_totals={},
            total_observed_days=0,
        )

    income_by_day: Dict[date, float] = defaultdict(float)
    expense_by_day: Dict[date, float] = defaultdict(float)
    for txn in transactions:
        day = as_date(txn.date)
        # Touch both maps so every observed day exists in each series
        income_by_day[day] += txn.amount if txn.is_income else 0.0
        expense_by_day[day] += 0.0 if txn.is_income else txn.amount

    days = sorted(income_by_day)
    daily_incomes = [income_by_day[d] for d in days]
    daily_expenses = [expense_by_day[d] for d in days]
    n = len(days)

    return StatsSnapshot(
        avg_daily_income=sum(daily_incomes) / n,
        avg_daily_expense=sum(daily_expenses) / n,
        income_std_dev=population_std_dev(daily_incomes),
        expense_std_dev=population_std_dev(daily_expenses),
        income_trend_per_day=ols_slope(daily_incomes),
        expense_trend_per_day=ols_slope(daily_expenses),
        category_totals=_category_totals(transactions),
        total_observed_days=n,
        total_income=sum(daily_incomes),
        total_expense=sum(daily_expenses),
    )
