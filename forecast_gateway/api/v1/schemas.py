"""Pydantic schemas for API request/response validation"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ForecastRequest(BaseModel):
    """Request body for POST /v1/forecast"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    # Left as a plain string so unknown periods surface as InputError (400)
    period: str = Field("monthly", description='"weekly" (7 days) or "monthly" (30 days)')


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ForecastSchema(CamelModel):
    """Public forecast series, advice and confidence"""

    forecast_balance: List[int]
    advice: List[str]
    accuracy: int = Field(..., ge=0, le=100)


class ForecastMetadataSchema(CamelModel):
    """Echo of derived values used to build the forecast"""

    period: str
    current_balance: float
    avg_monthly_income: float
    avg_monthly_expense: float
    upcoming_bills_total: float
    forecast_days: int


class ForecastResponse(CamelModel):
    """Response for POST /v1/forecast"""

    success: bool = True
    forecast: ForecastSchema
    metadata: ForecastMetadataSchema
