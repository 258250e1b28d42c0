"""Serialized summary handed to the Forecast Oracle"""

from datetime import date, datetime
from typing import Any, Dict, List, Sequence

from forecast_gateway.domain.accuracy import expected_accuracy_band
from forecast_gateway.domain.bills import days_until_due, upcoming_bills_total
from forecast_gateway.domain.models import Bill, IncomeCycle, StatsSnapshot, Transaction
from forecast_gateway.utils.date_utils import as_date

MAX_CATEGORIES = 5
MAX_BILLS = 10
MAX_RECENT_TRANSACTIONS = 15


def build_oracle_context(
    period: str,
    forecast_days: int,
    current_balance: float,
    stats: StatsSnapshot,
    cycle: IncomeCycle,
    bills: Sequence[Bill],
    transactions: Sequence[Transaction],
    now: date | datetime,
) -> Dict[str, Any]:
    """Build a JSON-serializable context; prompt wording is the oracle's concern"""
    top_categories = sorted(stats.category_totals.items(), key=lambda item: item[1].total, reverse=True)
    soonest_bills = sorted((b for b in bills if not b.completed), key=lambda b: b.due_date)[:MAX_BILLS]
    recent = sorted(transactions, key=lambda t: t.date, reverse=True)[:MAX_RECENT_TRANSACTIONS]
    low, high = expected_accuracy_band(stats.total_observed_days)

    categories: List[Dict[str, Any]] = [
        {"category": name, "total": c.total, "count": c.count, "avg": c.avg}
        for name, c in top_categories[:MAX_CATEGORIES]
    ]

    return {
        "period": period,
        "forecastDays": forecast_days,
        "today": as_date(now).isoformat(),
        "currentBalance": current_balance,
        "stats": {
            "totalObservedDays": stats.total_observed_days,
            "avgDailyIncome": stats.avg_daily_income,
            "avgDailyExpense": stats.avg_daily_expense,
            "avgMonthlyIncome": stats.avg_monthly_income,
            "avgMonthlyExpense": stats.avg_monthly_expense,
            "incomeStdDev": stats.income_std_dev,
            "expenseStdDev": stats.expense_std_dev,
            "incomeTrendPerDay": stats.income_trend_per_day,
            "expenseTrendPerDay": stats.expense_trend_per_day,
            "netDailyFlow": stats.avg_daily_income - stats.avg_daily_expense,
            "incomeCycle": cycle.value,
        },
        "topCategories": categories,
        "bills": {
            "count": len(bills),
            "total": upcoming_bills_total(bills),
            "items": [
                {
                    "name": b.name,
                    "amount": b.amount,
                    "category": b.category,
                    "dueDate": b.due_date.isoformat(),
                    "daysUntilDue": days_until_due(b, now),
                }
                for b in soonest_bills
            ],
        },
        "recentTransactions": [
            {
                "type": t.type,
                "amount": t.amount,
                "date": as_date(t.date).isoformat(),
                "category": t.category,
                "name": t.name,
            }
            for t in recent
        ],
        "expectedAccuracy": {"min": low, "max": high},
    }
