"""Forecast orchestration - wires the domain pipeline to the Ledger Store and Forecast Oracle"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Protocol

from forecast_gateway.config import settings
from forecast_gateway.domain.accuracy import score_accuracy
from forecast_gateway.domain.baseline import project_baseline
from forecast_gateway.domain.bills import build_bill_overlay, upcoming_bills_total
from forecast_gateway.domain.blending import blend_forecast
from forecast_gateway.domain.context import build_oracle_context
from forecast_gateway.domain.exceptions import InputError, OracleError
from forecast_gateway.domain.income_cycle import detect_income_cycle
from forecast_gateway.domain.insights import generate_insights
from forecast_gateway.domain.models import (
    Bill,
    ForecastMetadata,
    ForecastOutcome,
    ForecastResult,
    OraclePrediction,
    Period,
    Transaction,
)
from forecast_gateway.domain.statistics import compute_statistics
from forecast_gateway.infrastructure.observability.metrics import oracle_failure_counter
from forecast_gateway.utils.date_utils import subtract_months

logger = logging.getLogger(__name__)


class LedgerStore(Protocol):
    async def list_transactions(self, user_id: str, since: datetime) -> List[Transaction]: ...

    async def get_current_balance(self, user_id: str) -> float: ...

    async def list_upcoming_bills(self, user_id: str) -> List[Bill]: ...


class ForecastOracle(Protocol):
    async def predict(self, context: Dict[str, Any]) -> OraclePrediction: ...


def resolve_forecast_days(period: str) -> int:
    """
    Map a period name to its horizon in days.

    Raises:
        InputError: If period is not "weekly" or "monthly"
    """
    try:
        return Period(period).forecast_days
    except ValueError:
        raise InputError(f'period must be "weekly" or "monthly", got {period!r}') from None


class ForecastService:
    """Generates balance forecasts with quantified advice for one user at a time"""

    def __init__(
        self,
        ledger: LedgerStore,
        oracle: ForecastOracle,
        lookback_months: int | None = None,
        blend_weight: float | None = None,
        currency_symbol: str | None = None,
    ):
        self.ledger = ledger
        self.oracle = oracle
        self.lookback_months = lookback_months if lookback_months is not None else settings.lookback_months
        self.blend_weight = blend_weight if blend_weight is not None else settings.blend_weight
        self.currency_symbol = currency_symbol or settings.currency_symbol

    async def _read_ledger(self, user_id: str, since: datetime):
        """Concurrent ledger reads; the first failure cancels the other reads"""
        try:
            async with asyncio.TaskGroup() as tg:
                transactions = tg.create_task(self.ledger.list_transactions(user_id, since))
                balance = tg.create_task(self.ledger.get_current_balance(user_id))
                bills = tg.create_task(self.ledger.list_upcoming_bills(user_id))
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from None
        return transactions.result(), balance.result(), bills.result()

    async def generate(self, user_id: str, period: str, now: datetime | None = None) -> ForecastOutcome:
        """
        Produce a forecast for the next 7 (weekly) or 30 (monthly) days.

        Flow:
        1. Validate the period
        2. Read transactions, balance and bills from the ledger concurrently
        3. Compute statistics, income cycle and bill overlay
        4. Ask the oracle for a raw prediction
        5. Project the baseline, blend, generate advice and score accuracy

        Raises:
            InputError: Invalid period
            UpstreamError: Any ledger read failed
            OracleError: Oracle call failed or its prediction is unusable
        """
        forecast_days = resolve_forecast_days(period)
        now = now or datetime.now(timezone.utc)
        since = subtract_months(now, self.lookback_months)

        logger.info(
            "Generating forecast",
            extra={"user_id": user_id, "period": period, "forecast_days": forecast_days},
        )

        transactions, current_balance, bills = await self._read_ledger(user_id, since)
        bills = [bill for bill in bills if not bill.completed]

        stats = compute_statistics(transactions)
        cycle = detect_income_cycle(transactions)
        overlay = build_bill_overlay(bills, now, forecast_days)

        context = build_oracle_context(
            period, forecast_days, current_balance, stats, cycle, bills, transactions, now
        )
        prediction = await self.oracle.predict(context)

        baseline = project_baseline(current_balance, stats, cycle, overlay, forecast_days, now)
        try:
            blended = blend_forecast(prediction.raw_balance, baseline, current_balance, self.blend_weight)
        except OracleError as e:
            oracle_failure_counter.inc()
            logger.warning(f"Unusable oracle prediction: {e}", extra={"user_id": user_id})
            raise

        advice = generate_insights(
            stats,
            blended,
            bills,
            current_balance,
            prediction.draft_advice,
            now,
            self.currency_symbol,
        )
        accuracy = score_accuracy(
            stats.total_observed_days,
            stats.income_std_dev,
            stats.avg_monthly_income,
            has_bills=bool(bills),
        )

        return ForecastOutcome(
            result=ForecastResult(
                forecast_balance=blended.public,
                advice=advice,
                accuracy=accuracy,
            ),
            metadata=ForecastMetadata(
                period=period,
                current_balance=current_balance,
                avg_monthly_income=stats.avg_monthly_income,
                avg_monthly_expense=stats.avg_monthly_expense,
                upcoming_bills_total=upcoming_bills_total(bills),
                forecast_days=forecast_days,
            ),
            pre_clamp_balance=blended.pre_clamp,
        )
