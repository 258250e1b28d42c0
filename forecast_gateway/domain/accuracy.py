"""Forecast confidence scoring from data quality signals"""


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def base_accuracy(total_observed_days: int) -> int:
    """History-length component: 40 + 0.3 per observed day, held within 50-95"""
    return _clamp(round(total_observed_days * 0.3 + 40), 50, 95)


def expected_accuracy_band(total_observed_days: int) -> tuple[int, int]:
    """Range the oracle is told to aim for"""
    low = base_accuracy(total_observed_days)
    high = _clamp(round(total_observed_days * 0.3 + 60), 70, 100)
    return low, high


def score_accuracy(
    total_observed_days: int,
    income_std_dev: float,
    avg_monthly_income: float,
    has_bills: bool,
) -> int:
    """
    Confidence score from 0 to 100.

    Bonuses:
    - +5 when daily income dispersion is under 30% of monthly income
    - +5 when known bills anchor the forecast
    """
    consistency_bonus = 5 if income_std_dev < avg_monthly_income * 0.3 else 0
    bill_bonus = 5 if has_bills else 0
    return _clamp(base_accuracy(total_observed_days) + consistency_bonus + bill_bonus, 0, 100)
