"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # External Services
    ledger_api_base: str = "http://localhost:8001"
    oracle_api_base: str = "http://localhost:8002"
    oracle_api_key: str | None = None

    # Service
    service_name: str = "forecast-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0
    oracle_timeout_seconds: float = 30.0  # LLM-backed, much slower than the ledger

    # Forecasting
    lookback_months: int = 6
    blend_weight: float = 0.75  # Share of the oracle prediction in the blended series
    currency_symbol: str = "Rp"


settings = Settings()
