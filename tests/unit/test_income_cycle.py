"""Unit tests for income cycle detection"""

import pytest
from datetime import datetime
from forecast_gateway.domain.income_cycle import classify_day_of_month, detect_income_cycle
from forecast_gateway.domain.models import IncomeCycle, Transaction


def income_on(*days: int) -> list[Transaction]:
    return [
        Transaction(type="income", amount=1_000_000, date=datetime(2026, (i % 10) + 3, day))
        for i, day in enumerate(days)
    ]


@pytest.mark.parametrize(
    "days, expected",
    [
        ((1, 2), IncomeCycle.END_OF_MONTH),
        ((12, 13), IncomeCycle.MID_MONTH),
        ((1, 15), IncomeCycle.IRREGULAR),  # mean 8 falls between bands
        ((25, 27, 28), IncomeCycle.END_OF_MONTH),
        ((20, 21), IncomeCycle.IRREGULAR),
    ],
)
def test_detect_income_cycle(days, expected):
    assert detect_income_cycle(income_on(*days)) is expected


def test_detect_income_cycle_needs_two_income_transactions():
    assert detect_income_cycle([]) is IncomeCycle.IRREGULAR
    assert detect_income_cycle(income_on(28)) is IncomeCycle.IRREGULAR


def test_detect_income_cycle_ignores_expenses():
    """Expenses on mid-month days do not shift an end-of-month salary"""
    transactions = income_on(28, 29) + [
        Transaction(type="expense", amount=50_000, date=datetime(2026, 10, 12)),
        Transaction(type="expense", amount=50_000, date=datetime(2026, 10, 13)),
    ]

    assert detect_income_cycle(transactions) is IncomeCycle.END_OF_MONTH


def test_salary_on_the_28th_is_end_of_month():
    """Ten monthly salaries of 5,000,000 on the 28th"""
    transactions = [
        Transaction(type="income", amount=5_000_000, date=datetime(2025 + (m // 12), (m % 12) + 1, 28))
        for m in range(10)
    ]

    assert detect_income_cycle(transactions) is IncomeCycle.END_OF_MONTH


def test_classify_day_of_month_band_edges():
    assert classify_day_of_month(5) is IncomeCycle.END_OF_MONTH
    assert classify_day_of_month(5.5) is IncomeCycle.IRREGULAR
    assert classify_day_of_month(10) is IncomeCycle.MID_MONTH
    assert classify_day_of_month(15) is IncomeCycle.MID_MONTH
    assert classify_day_of_month(24.9) is IncomeCycle.IRREGULAR
    assert classify_day_of_month(25) is IncomeCycle.END_OF_MONTH
