"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime, timedelta
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from forecast_gateway.api.main import create_app
from forecast_gateway.api.dependencies import get_forecast_service
from forecast_gateway.domain.models import Bill, OraclePrediction, Transaction
from forecast_gateway.services.forecast import ForecastService


# Fixed reference clock: Monday 19 October 2026, 09:00
NOW = datetime(2026, 10, 19, 9, 0)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """Three months of end-of-month salary plus weekly groceries"""
    transactions = []

    # Salary on the 28th
    for month in (7, 8, 9):
        transactions.append(
            Transaction(
                type="income",
                amount=5_000_000,
                date=datetime(2026, month, 28, 8, 0),
                category="Salary",
                name="Salary Deposit",
            )
        )

    # Weekly groceries
    start = datetime(2026, 7, 1, 18, 0)
    for week in range(12):
        transactions.append(
            Transaction(
                type="expense",
                amount=400_000,
                date=start + timedelta(days=week * 7),
                category="food",
                name="Supermarket",
            )
        )

    return transactions


@pytest.fixture
def sample_bills() -> list[Bill]:
    return [
        Bill(name="Electricity", amount=500_000, due_date=date(2026, 10, 22)),
        Bill(name="Rent", amount=2_500_000, due_date=date(2026, 11, 1)),
    ]


@pytest.fixture
def ledger() -> AsyncMock:
    """Ledger Store double: empty history, balance of 1,000,000, no bills"""
    mock = AsyncMock()
    mock.list_transactions.return_value = []
    mock.get_current_balance.return_value = 1_000_000
    mock.list_upcoming_bills.return_value = []
    return mock


@pytest.fixture
def oracle() -> AsyncMock:
    """Forecast Oracle double echoing a flat 1,000,000 prediction"""
    mock = AsyncMock()
    mock.predict.return_value = OraclePrediction(
        raw_balance=[1_000_000] * 7,
        draft_advice=[],
        draft_accuracy=80,
    )
    return mock


@pytest.fixture
def service(ledger: AsyncMock, oracle: AsyncMock) -> ForecastService:
    return ForecastService(ledger=ledger, oracle=oracle, lookback_months=6, blend_weight=0.75, currency_symbol="Rp")


@pytest.fixture
def client(service: ForecastService) -> TestClient:
    """Create FastAPI test client with collaborator doubles"""
    app = create_app()
    app.dependency_overrides[get_forecast_service] = lambda: service
    return TestClient(app)
