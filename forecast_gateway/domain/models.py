"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

DAYS_PER_MONTH = 30


class IncomeCycle(str, Enum):
    """Detected periodic pattern of income arrivals"""

    END_OF_MONTH = "end_of_month"
    MID_MONTH = "mid_month"
    IRREGULAR = "irregular"


class Period(str, Enum):
    """Forecast horizon requested by the caller"""

    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def forecast_days(self) -> int:
        return 7 if self is Period.WEEKLY else 30


@dataclass(frozen=True)
class Transaction:
    """Ledger transaction (read-only snapshot)"""

    type: str  # "income" or "expense"
    amount: float
    date: datetime
    category: Optional[str] = None
    name: Optional[str] = None

    @property
    def is_income(self) -> bool:
        return self.type == "income"


@dataclass(frozen=True)
class Bill:
    """Upcoming bill obligation from the ledger"""

    name: str
    amount: float
    due_date: date
    completed: bool = False
    category: Optional[str] = None


@dataclass
class CategoryTotal:
    """Running aggregate for one expense category"""

    total: float = 0.0
    count: int = 0
    avg: float = 0.0


@dataclass(frozen=True)
class StatsSnapshot:
    """Aggregate daily statistics derived from transaction history"""

    avg_daily_income: float
    avg_daily_expense: float
    income_std_dev: float
    expense_std_dev: float
    income_trend_per_day: float
    expense_trend_per_day: float
    category_totals: Dict[str, CategoryTotal]
    total_observed_days: int
    total_income: float = 0.0
    total_expense: float = 0.0

    @property
    def avg_monthly_income(self) -> float:
        return self.avg_daily_income * DAYS_PER_MONTH

    @property
    def avg_monthly_expense(self) -> float:
        return self.avg_daily_expense * DAYS_PER_MONTH


@dataclass(frozen=True)
class OraclePrediction:
    """Raw, untrusted payload returned by the Forecast Oracle"""

    raw_balance: List[Any]
    draft_advice: List[str]
    draft_accuracy: float


@dataclass(frozen=True)
class BlendedForecast:
    """Blended series before and after the non-negative clamp"""

    pre_clamp: List[int]
    public: List[int]


@dataclass(frozen=True)
class ForecastResult:
    """Public forecast: balances, advice and confidence"""

    forecast_balance: List[int]
    advice: List[str]
    accuracy: int


@dataclass(frozen=True)
class ForecastMetadata:
    """Echo of derived values used to build the forecast"""

    period: str
    current_balance: float
    avg_monthly_income: float
    avg_monthly_expense: float
    upcoming_bills_total: float
    forecast_days: int


@dataclass(frozen=True)
class ForecastOutcome:
    """Output of ForecastService.generate"""

    result: ForecastResult
    metadata: ForecastMetadata
    pre_clamp_balance: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "forecast": {
                "forecastBalance": list(self.result.forecast_balance),
                "advice": list(self.result.advice),
                "accuracy": self.result.accuracy,
            },
            "metadata": {
                "period": self.metadata.period,
                "currentBalance": self.metadata.current_balance,
                "avgMonthlyIncome": self.metadata.avg_monthly_income,
                "avgMonthlyExpense": self.metadata.avg_monthly_expense,
                "upcomingBillsTotal": self.metadata.upcoming_bills_total,
                "forecastDays": self.metadata.forecast_days,
            },
        }
