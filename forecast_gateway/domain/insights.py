"""Rule-based financial insights with quantified facts"""

import re
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional, Sequence

from forecast_gateway.domain.bills import days_until_due, upcoming_bills_total
from forecast_gateway.domain.models import Bill, BlendedForecast, StatsSnapshot
from forecast_gateway.utils.date_utils import as_date

MIN_ADVICE = 3
MAX_ADVICE = 5

EMERGENCY_FUND_SHARE = 0.2
CATEGORY_REDUCTION_SHARE = 0.15
TREND_MATERIALITY = 1000  # per month
PROJECTION_MATERIALITY = 10000

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
# Oracle drafts may arrive in Indonesian
_MONTHS_ID = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)
_MONTH_PATTERN = "|".join(sorted(set(_MONTHS + _MONTHS_ID), key=len, reverse=True))

_CURRENCY_RE = re.compile(r"(?:\bRp\.?|\bIDR\b|\bUSD\b|[$€£])\s?-?\d", re.IGNORECASE)
_PERCENT_RE = re.compile(r"\d+(?:[.,]\d+)?\s?%")
_DATE_RES = (
    re.compile(rf"\b\d{{1,2}}\s+(?:{_MONTH_PATTERN})\b", re.IGNORECASE),
    re.compile(rf"\b(?:{_MONTH_PATTERN})\s+\d{{1,2}}\b", re.IGNORECASE),
    re.compile(r"\b\d{4}-\d{2}-\d{2}\b"),
    re.compile(r"\b\d{1,2}/\d{1,2}/\d{2,4}\b"),
)
_DIGIT_RE = re.compile(r"\d")


def has_currency_amount(text: str) -> bool:
    """True if text carries a currency-prefixed amount such as 'Rp 50,000'"""
    return bool(_CURRENCY_RE.search(text))


def has_percentage(text: str) -> bool:
    return bool(_PERCENT_RE.search(text))


def has_calendar_date(text: str) -> bool:
    """True if text names a calendar date ('25 December', 'Desember 3', ISO or d/m/y)"""
    return any(pattern.search(text) for pattern in _DATE_RES)


def is_quantified(text: str) -> bool:
    return has_currency_amount(text) or has_percentage(text) or has_calendar_date(text)


def format_currency(amount: float, symbol: str = "Rp") -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol} {abs(amount):,.0f}"


def format_calendar_date(day: date) -> str:
    return f"{day.day} {_MONTHS[day.month - 1]} {day.year}"


def _percent(part: float, whole: float) -> int:
    return round(part / whole * 100) if whole > 0 else 0


def _count(n: int, noun: str) -> str:
    return f"{n} {noun}" if n == 1 else f"{n} {noun}s"


class _Rules:
    """Evaluates each advice rule against one forecast snapshot"""

    def __init__(
        self,
        stats: StatsSnapshot,
        forecast: BlendedForecast,
        bills: Sequence[Bill],
        current_balance: float,
        now: date | datetime,
        currency_symbol: str,
    ):
        self.stats = stats
        self.forecast = forecast
        self.bills = [bill for bill in bills if not bill.completed]
        self.current_balance = current_balance
        self.today = as_date(now)
        self.symbol = currency_symbol

    def money(self, amount: float) -> str:
        return format_currency(amount, self.symbol)

    def forecast_date(self, offset: int) -> date:
        return self.today + timedelta(days=offset + 1)

    def deficit(self) -> Optional[str]:
        lowest = min(self.forecast.pre_clamp, default=0)
        if lowest >= 0:
            return None
        first_negative = next(i for i, v in enumerate(self.forecast.pre_clamp) if v < 0)
        return (
            f"Deficit warning: your balance is projected to turn negative on "
            f"{format_calendar_date(self.forecast_date(first_negative))}, reaching a shortfall of "
            f"{self.money(abs(lowest))}. Set aside at least {self.money(abs(lowest))} now to cover it."
        )

    def savings(self) -> Optional[str]:
        income = self.stats.avg_monthly_income
        expense = self.stats.avg_monthly_expense
        if income <= expense:
            return None
        surplus = income - expense
        return (
            f"Savings potential: with average income of {self.money(income)}/month and spending of "
            f"{self.money(expense)}/month you can save {self.money(surplus)}/month "
            f"({_percent(surplus, income)}% of income). Put at least "
            f"{self.money(round(surplus * EMERGENCY_FUND_SHARE))} (20%) into an emergency fund."
        )

    def upcoming_bills(self) -> Optional[str]:
        if not self.bills:
            return None
        largest = max(self.bills, key=lambda b: b.amount)
        soonest = min(self.bills, key=lambda b: b.due_date)
        days = days_until_due(soonest, self.today)
        if days > 0:
            when = f"due in {_count(days, 'day')}"
        elif days == 0:
            when = "due today"
        else:
            when = f"overdue by {_count(-days, 'day')}"
        return (
            f"Upcoming bills: you have {_count(len(self.bills), 'bill')} totalling "
            f"{self.money(upcoming_bills_total(self.bills))}. The largest is \"{largest.name}\" at "
            f"{self.money(largest.amount)}. The soonest is \"{soonest.name}\" ({self.money(soonest.amount)}), "
            f"{when} ({format_calendar_date(soonest.due_date)})."
        )

    def category_concentration(self) -> Optional[str]:
        if not self.stats.category_totals:
            return None
        name, top = max(self.stats.category_totals.items(), key=lambda item: item[1].total)
        if top.total <= 0:
            return None
        total_expense = sum(c.total for c in self.stats.category_totals.values())
        label = name[:1].upper() + name[1:]
        return (
            f"Category analysis: your largest spending category is \"{label}\" at {self.money(top.total)} "
            f"({_percent(top.total, total_expense)}% of total spending, averaging {self.money(top.avg)} "
            f"per transaction over {top.count} transactions). Cutting {label} by 15% would save about "
            f"{self.money(round(top.total * CATEGORY_REDUCTION_SHARE))}."
        )

    def trend(self) -> Optional[str]:
        monthly = self.stats.expense_trend_per_day * 30
        if abs(monthly) <= TREND_MATERIALITY:
            return None
        if monthly > 0:
            return (
                f"Rising spending: your expenses are trending up by about {self.money(round(monthly))}/month. "
                f"If this continues they could rise by {self.money(round(monthly * 3))} within 3 months."
            )
        return (
            f"Falling spending: your expenses are trending down by about {self.money(round(-monthly))}/month. "
            f"Keep it up and you could save around {self.money(round(-monthly * 3))} over 3 months."
        )

    def balance_projection(self) -> Optional[str]:
        if not self.forecast.public:
            return None
        final = self.forecast.public[-1]
        change = final - self.current_balance
        if abs(change) <= PROJECTION_MATERIALITY:
            return None
        direction = "rise" if change > 0 else "fall"
        return (
            f"Balance projection: over the next {len(self.forecast.public)} days your balance is projected to "
            f"{direction} from {self.money(self.current_balance)} to {self.money(final)} "
            f"({self.money(abs(change))} or {abs(_percent(change, self.current_balance))}%)."
        )

    def evaluate(self) -> List[str]:
        rules: List[Callable[[], Optional[str]]] = [
            self.deficit,
            self.savings,
            self.upcoming_bills,
            self.category_concentration,
            self.trend,
            self.balance_projection,
        ]
        fired = [text for text in (rule() for rule in rules) if text]
        return fired[:MAX_ADVICE]

    def fallback_facts(self) -> List[str]:
        public = self.forecast.public
        horizon = len(public)
        facts = [
            f"Your current balance is {self.money(self.current_balance)}.",
        ]
        if public:
            facts.append(
                f"Your balance is projected at {self.money(public[-1])} on "
                f"{format_calendar_date(self.forecast_date(horizon - 1))}."
            )
            facts.append(f"The lowest projected balance over the next {horizon} days is {self.money(min(public))}.")
        facts.append(
            f"Average daily spending is {self.money(self.stats.avg_daily_expense)} across "
            f"{_count(self.stats.total_observed_days, 'day')} of recorded activity."
        )
        return facts


def generate_insights(
    stats: StatsSnapshot,
    forecast: BlendedForecast,
    bills: Sequence[Bill],
    current_balance: float,
    draft_advice: Sequence[str],
    now: date | datetime,
    currency_symbol: str = "Rp",
) -> List[str]:
    """
    Build 3-5 advice strings, each carrying at least one quantified fact.

    Rules fire in priority order: deficit, savings, upcoming bills, category
    concentration, trend, balance projection. When fewer than 3 fire, drafts
    from the oracle are appended, quantified ones first, then any that carry
    a number. Computed facts fill whatever is still missing.
    """
    rules = _Rules(stats, forecast, bills, current_balance, now, currency_symbol)
    advice = rules.evaluate()
    if len(advice) >= MIN_ADVICE:
        return advice

    def append_from(candidates: Sequence[str], accept: Callable[[str], bool], limit: int) -> None:
        for text in candidates:
            if len(advice) >= limit:
                return
            if text not in advice and accept(text):
                advice.append(text)

    drafts = [d.strip() for d in draft_advice if isinstance(d, str) and d.strip()]
    append_from(drafts, is_quantified, MAX_ADVICE)
    append_from(drafts, lambda text: bool(_DIGIT_RE.search(text)), MIN_ADVICE)
    append_from(rules.fallback_facts(), lambda text: True, MIN_ADVICE)

    return advice
