"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from forecast_gateway.infrastructure.clients.ledger import LedgerClient
from forecast_gateway.infrastructure.clients.oracle import OracleClient
from forecast_gateway.services.forecast import ForecastService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_forecast_service() -> ForecastService:
    """Provide a ForecastService wired to the Ledger Store and Forecast Oracle"""
    return ForecastService(ledger=LedgerClient(), oracle=OracleClient())
