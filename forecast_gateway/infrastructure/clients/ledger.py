"""Ledger Store HTTP client for transactions, balance and bills"""

import logging
import math
from datetime import date, datetime
from typing import Any, Dict, List

import httpx

from forecast_gateway.config import settings
from forecast_gateway.domain.exceptions import UpstreamError
from forecast_gateway.domain.models import Bill, Transaction
from forecast_gateway.infrastructure.observability.metrics import ledger_fetch_failures_counter

logger = logging.getLogger(__name__)


def _finite(value: Any, field: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite {field} {value!r}")
    return number


def _parse_transaction(raw: Dict[str, Any]) -> Transaction:
    txn_type = raw["type"]
    if txn_type not in ("income", "expense"):
        raise ValueError(f"unknown transaction type {txn_type!r}")
    amount = _finite(raw["amount"], "transaction amount")
    if amount < 0:
        raise ValueError(f"negative transaction amount {amount}")
    return Transaction(
        type=txn_type,
        amount=amount,
        date=datetime.fromisoformat(raw["date"]),
        category=raw.get("category"),
        name=raw.get("name"),
    )


def _parse_bill(raw: Dict[str, Any]) -> Bill:
    amount = _finite(raw["amount"], "bill amount")
    if amount <= 0:
        raise ValueError(f"bill amount must be positive, got {amount}")
    return Bill(
        name=raw["name"],
        amount=amount,
        due_date=date.fromisoformat(raw["due_date"][:10]),
        completed=bool(raw.get("completed", False)),
        category=raw.get("category"),
    )


class LedgerClient:
    """Client for the external Ledger Store API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.ledger_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}{path}", params=params)
                response.raise_for_status()
                data = response.json()
                if not isinstance(data, dict):
                    raise ValueError("expected a JSON object")
                return data

            except httpx.TimeoutException as e:
                raise self._fail(path, f"Ledger timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise self._fail(path, f"Ledger error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise self._fail(path, f"Ledger unreachable: {e}") from e
            except ValueError as e:
                raise self._fail(path, f"Invalid JSON from ledger: {e}") from e

    def _fail(self, path: str, message: str) -> UpstreamError:
        ledger_fetch_failures_counter.labels(resource=path.rsplit("/", 1)[-1]).inc()
        logger.warning(message, extra={"path": path})
        return UpstreamError(message)

    async def list_transactions(self, user_id: str, since: datetime) -> List[Transaction]:
        """
        Fetch the user's transactions on or after `since`.

        Raises:
            UpstreamError: On timeout, HTTP errors, or invalid response
        """
        path = "/ledger/transactions"
        data = await self._get(path, {"user_id": user_id, "since": since.isoformat()})
        try:
            return [_parse_transaction(txn) for txn in data.get("transactions", [])]
        except (KeyError, ValueError, TypeError) as e:
            raise self._fail(path, f"Invalid transaction data from ledger: {e}") from e

    async def get_current_balance(self, user_id: str) -> float:
        """Current balance; a user without a balance record starts at 0"""
        path = "/ledger/balance"
        data = await self._get(path, {"user_id": user_id})
        try:
            balance = data.get("balance")
            return _finite(balance, "balance") if balance is not None else 0.0
        except (ValueError, TypeError) as e:
            raise self._fail(path, f"Invalid balance from ledger: {e}") from e

    async def list_upcoming_bills(self, user_id: str) -> List[Bill]:
        """Uncompleted bills for the user"""
        path = "/ledger/bills"
        data = await self._get(path, {"user_id": user_id, "completed": "false"})
        try:
            return [_parse_bill(bill) for bill in data.get("bills", [])]
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise self._fail(path, f"Invalid bill data from ledger: {e}") from e
