"""Unit tests for the oracle context summary"""

import json
from datetime import date, datetime
from forecast_gateway.domain.context import build_oracle_context
from forecast_gateway.domain.income_cycle import detect_income_cycle
from forecast_gateway.domain.models import Bill, Transaction
from forecast_gateway.domain.statistics import compute_statistics


def test_context_is_json_serializable(sample_transactions, sample_bills, now):
    stats = compute_statistics(sample_transactions)
    cycle = detect_income_cycle(sample_transactions)

    context = build_oracle_context("weekly", 7, 1_000_000, stats, cycle, sample_bills, sample_transactions, now)

    decoded = json.loads(json.dumps(context))
    assert decoded["forecastDays"] == 7
    assert decoded["today"] == "2026-10-19"
    assert decoded["stats"]["incomeCycle"] == "end_of_month"
    assert decoded["stats"]["totalObservedDays"] == stats.total_observed_days
    assert decoded["bills"]["total"] == 3_000_000
    assert [b["daysUntilDue"] for b in decoded["bills"]["items"]] == [3, 13]
    assert decoded["expectedAccuracy"] == {"min": 50, "max": 70}


def test_context_limits_and_ordering(now):
    transactions = [
        Transaction(type="expense", amount=100 * (i + 1), date=datetime(2026, 9, i + 1), category=f"cat{i}")
        for i in range(20)
    ]
    bills = [Bill(name=f"bill{i}", amount=1_000, due_date=date(2026, 11, 20 - i)) for i in range(12)]

    context = build_oracle_context(
        "monthly", 30, 0, compute_statistics(transactions), detect_income_cycle(transactions), bills, transactions, now
    )

    assert [c["category"] for c in context["topCategories"]] == ["cat19", "cat18", "cat17", "cat16", "cat15"]
    assert len(context["bills"]["items"]) == 10
    assert context["bills"]["count"] == 12
    assert context["bills"]["items"][0]["name"] == "bill11"
    assert context["bills"]["total"] == 12_000
    assert len(context["recentTransactions"]) == 15
    assert context["recentTransactions"][0]["date"] == "2026-09-20"
