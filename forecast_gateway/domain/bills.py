"""Bill overlay - map unpaid bills onto forecast-day offsets"""

from datetime import date, datetime
from typing import Dict, Iterable

from forecast_gateway.domain.models import Bill
from forecast_gateway.utils.date_utils import as_date


def days_until_due(bill: Bill, now: date | datetime) -> int:
    """Whole calendar days from today to the bill's due date (0 = due today)"""
    return (bill.due_date - as_date(now)).days


def upcoming_bills_total(bills: Iterable[Bill]) -> float:
    return sum(bill.amount for bill in bills if not bill.completed)


def build_bill_overlay(bills: Iterable[Bill], now: date | datetime, forecast_days: int) -> Dict[int, float]:
    """
    Sum uncompleted bill amounts per zero-based forecast offset.

    Offset 0 is tomorrow, the first forecast day. Bills due today or earlier
    fall outside the overlay, as do bills beyond the horizon.
    """
    overlay: Dict[int, float] = {}
    for bill in bills:
        if bill.completed:
            continue
        offset = days_until_due(bill, now) - 1
        if 0 <= offset < forecast_days:
            overlay[offset] = overlay.get(offset, 0.0) + bill.amount
    return overlay
