"""Forecast blending - merge the oracle prediction with the calculated baseline"""

import logging
import math
from numbers import Real
from typing import Any, List, Sequence

from forecast_gateway.domain.exceptions import OracleError
from forecast_gateway.domain.models import BlendedForecast

logger = logging.getLogger(__name__)

SMOOTHING_WEIGHTS = (0.2, 0.6, 0.2)


def _as_number(value: Any, index: int) -> float:
    # bool is a Real subclass but never a balance
    if isinstance(value, bool) or not isinstance(value, Real):
        raise OracleError(f"Oracle balance at day {index} is not numeric: {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise OracleError(f"Oracle balance at day {index} is not finite: {value!r}")
    return number


def repair_length(raw: Sequence[Any], forecast_days: int, current_balance: float) -> List[float]:
    """
    Coerce the oracle series to exactly forecast_days numbers.

    Short series are padded with their last value (or current_balance when
    empty); long ones are truncated. Non-numeric entries cannot be repaired.
    """
    values = [_as_number(v, i) for i, v in enumerate(raw)]

    if len(values) != forecast_days:
        logger.warning(
            "Oracle forecast length mismatch",
            extra={"expected_days": forecast_days, "received_days": len(values)},
        )

    if len(values) > forecast_days:
        return values[:forecast_days]

    fill = values[-1] if values else float(current_balance)
    return values + [fill] * (forecast_days - len(values))


def blend(raw: Sequence[float], baseline: Sequence[float], weight: float = 0.75) -> List[int]:
    """
    Shrink the raw prediction toward the baseline.

    blended[i] = round(weight * raw[i] + (1 - weight) * baseline[i])
    """
    if not 0.0 <= weight <= 1.0:
        raise ValueError(f"Blend weight must be within [0, 1], got {weight}")
    if len(raw) != len(baseline):
        raise ValueError(f"Cannot blend series of length {len(raw)} and {len(baseline)}")

    return [round(weight * r + (1 - weight) * b) for r, b in zip(raw, baseline)]


def clamp_non_negative(series: Sequence[int]) -> List[int]:
    return [max(0, value) for value in series]


def smooth(series: Sequence[int]) -> List[int]:
    """3-point weighted moving average on interior points; endpoints untouched"""
    if len(series) < 3:
        return list(series)

    left, centre, right = SMOOTHING_WEIGHTS
    smoothed = list(series)
    for i in range(1, len(series) - 1):
        smoothed[i] = round(left * series[i - 1] + centre * series[i] + right * series[i + 1])
    return smoothed


def blend_forecast(
    raw: Sequence[Any],
    baseline: Sequence[float],
    current_balance: float,
    weight: float = 0.75,
) -> BlendedForecast:
    """
    Full blending pipeline: length repair, blend, clamp, smooth.

    The pre-clamp series is kept alongside the public one so deficits hidden
    by the clamp can still be reported.

    Raises:
        OracleError: If the raw series contains non-numeric entries
    """
    repaired = repair_length(raw, len(baseline), current_balance)
    blended = blend(repaired, baseline, weight)
    public = smooth(clamp_non_negative(blended))
    return BlendedForecast(pre_clamp=blended, public=public)
