"""Unit tests for the Ledger Store client"""

import httpx
import pytest
from datetime import date, datetime
from unittest.mock import AsyncMock
from forecast_gateway.domain.exceptions import UpstreamError
from forecast_gateway.infrastructure.clients.ledger import LedgerClient
from forecast_gateway.services.forecast import ForecastService

BASE_URL = "http://ledger.test"


def ledger_with(routes: dict) -> LedgerClient:
    """Client whose transport answers each path with the given (status, json) pair"""

    def handler(request: httpx.Request) -> httpx.Response:
        status, body = routes[request.url.path]
        return httpx.Response(status, json=body)

    return LedgerClient(base_url=BASE_URL, timeout=1.0, transport=httpx.MockTransport(handler))


async def test_list_transactions_parses_payload():
    client = ledger_with(
        {
            "/ledger/transactions": (
                200,
                {
                    "transactions": [
                        {"type": "income", "amount": "5000000", "date": "2026-09-28T08:00:00", "category": "Salary"},
                        {"type": "expense", "amount": 45000, "date": "2026-09-29", "name": "Lunch"},
                    ]
                },
            )
        }
    )

    transactions = await client.list_transactions("user_1", datetime(2026, 4, 19))

    assert len(transactions) == 2
    assert transactions[0].amount == 5_000_000
    assert transactions[0].is_income
    assert transactions[1].date == datetime(2026, 9, 29)
    assert transactions[1].category is None


async def test_list_transactions_sends_user_and_since():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json={"transactions": []})

    client = LedgerClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))

    assert await client.list_transactions("user_1", datetime(2026, 4, 19)) == []
    assert seen == {"user_id": "user_1", "since": "2026-04-19T00:00:00"}


async def test_balance_defaults_to_zero_when_missing():
    client = ledger_with({"/ledger/balance": (200, {"balance": None})})

    assert await client.get_current_balance("user_1") == 0.0


async def test_balance_parsed():
    client = ledger_with({"/ledger/balance": (200, {"balance": 1250000.5})})

    assert await client.get_current_balance("user_1") == 1_250_000.5


async def test_list_upcoming_bills():
    client = ledger_with(
        {
            "/ledger/bills": (
                200,
                {"bills": [{"name": "Rent", "amount": 2500000, "due_date": "2026-11-01T00:00:00Z", "completed": False}]},
            )
        }
    )

    bills = await client.list_upcoming_bills("user_1")

    assert bills[0].name == "Rent"
    assert bills[0].due_date == date(2026, 11, 1)
    assert bills[0].completed is False


async def test_http_error_raises_upstream_error():
    client = ledger_with({"/ledger/balance": (503, {"error": "down"})})

    with pytest.raises(UpstreamError, match="503"):
        await client.get_current_balance("user_1")


@pytest.mark.parametrize(
    "payload",
    [
        {"transactions": [{"type": "transfer", "amount": 1, "date": "2026-09-01"}]},
        {"transactions": [{"type": "expense", "amount": -5, "date": "2026-09-01"}]},
        {"transactions": [{"type": "expense", "amount": 5, "date": "yesterday"}]},
        {"transactions": [{"type": "expense", "date": "2026-09-01"}]},
        {"transactions": [{"type": "income", "amount": "Infinity", "date": "2026-09-01"}]},
        {"transactions": [{"type": "expense", "amount": "nan", "date": "2026-09-01"}]},
    ],
)
async def test_malformed_transactions_raise_upstream_error(payload):
    client = ledger_with({"/ledger/transactions": (200, payload)})

    with pytest.raises(UpstreamError) as exc_info:
        await client.list_transactions("user_1", datetime(2026, 4, 19))

    assert exc_info.value.collaborator == "ledger"


@pytest.mark.parametrize("amount", [0, -2500000, "Infinity", "NaN", "-inf"])
async def test_invalid_bill_amounts_raise_upstream_error(amount):
    client = ledger_with(
        {"/ledger/bills": (200, {"bills": [{"name": "Rent", "amount": amount, "due_date": "2026-11-01"}]})}
    )

    with pytest.raises(UpstreamError, match="bill"):
        await client.list_upcoming_bills("user_1")


@pytest.mark.parametrize("body", ['{"balance": NaN}', '{"balance": Infinity}', '{"balance": "-Infinity"}'])
async def test_non_finite_balance_raises_upstream_error(body):
    client = LedgerClient(
        base_url=BASE_URL,
        transport=httpx.MockTransport(
            lambda request: httpx.Response(200, text=body, headers={"Content-Type": "application/json"})
        ),
    )

    with pytest.raises(UpstreamError, match="balance"):
        await client.get_current_balance("user_1")


async def test_non_finite_ledger_amount_fails_forecast_as_upstream_error(now):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/ledger/transactions":
            body = {"transactions": [{"type": "expense", "amount": "Infinity", "date": "2026-10-01"}]}
        elif request.url.path == "/ledger/balance":
            body = {"balance": 1_000_000}
        else:
            body = {"bills": []}
        return httpx.Response(200, json=body)

    oracle = AsyncMock()
    service = ForecastService(LedgerClient(base_url=BASE_URL, transport=httpx.MockTransport(handler)), oracle)

    with pytest.raises(UpstreamError) as exc_info:
        await service.generate("user_1", "weekly", now=now)

    assert exc_info.value.collaborator == "ledger"
    oracle.predict.assert_not_awaited()


async def test_connection_failure_raises_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = LedgerClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamError):
        await client.list_upcoming_bills("user_1")


async def test_timeout_raises_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = LedgerClient(base_url=BASE_URL, timeout=0.5, transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamError, match="timeout"):
        await client.get_current_balance("user_1")
