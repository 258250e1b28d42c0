"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timedelta
from typing import List


def as_date(value: date | datetime) -> date:
    """Calendar day of a date or timestamp"""
    return value.date() if isinstance(value, datetime) else value


def generate_forecast_dates(now: date | datetime, days: int) -> List[date]:
    """Calendar days covered by a forecast: tomorrow through today + days"""
    today = as_date(now)
    return [today + timedelta(days=i + 1) for i in range(days)]


def subtract_months(value: datetime, months: int) -> datetime:
    """Step back whole calendar months, clamping the day to the target month's length"""
    month_index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
