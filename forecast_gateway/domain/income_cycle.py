"""Income cycle detection from the day-of-month of income arrivals"""

from typing import Iterable

from forecast_gateway.domain.models import IncomeCycle, Transaction


def classify_day_of_month(mean_day: float) -> IncomeCycle:
    """Map a mean day-of-month onto a salary cycle band"""
    if mean_day >= 25 or mean_day <= 5:
        return IncomeCycle.END_OF_MONTH
    if 10 <= mean_day <= 15:
        return IncomeCycle.MID_MONTH
    return IncomeCycle.IRREGULAR


def detect_income_cycle(transactions: Iterable[Transaction]) -> IncomeCycle:
    """
    Classify when income usually arrives.

    Requires at least 2 income transactions; anything less is irregular.
    Expense transactions are ignored.
    """
    days = [txn.date.day for txn in transactions if txn.is_income]
    if len(days) < 2:
        return IncomeCycle.IRREGULAR

    return classify_day_of_month(sum(days) / len(days))
