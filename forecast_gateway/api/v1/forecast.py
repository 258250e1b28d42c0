"""POST /v1/forecast - balance forecast with quantified advice"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from forecast_gateway.api.v1.schemas import ForecastRequest, ForecastResponse
from forecast_gateway.api.dependencies import get_forecast_service, get_request_id
from forecast_gateway.services.forecast import ForecastService
from forecast_gateway.domain.exceptions import InputError, OracleError, UpstreamError
from forecast_gateway.infrastructure.observability.metrics import record_forecast, record_forecast_failure
from forecast_gateway.infrastructure.observability.logging import log_forecast

router = APIRouter()


@router.post("/forecast", response_model=ForecastResponse)
async def create_forecast(
    request_body: ForecastRequest,
    request: Request,
    service: ForecastService = Depends(get_forecast_service),
):
    """
    Forecast the user's balance for the next week or month.

    Flow:
    1. Read transactions, balance and bills from the ledger
    2. Derive statistics and a calculated baseline
    3. Blend the baseline with the oracle's raw prediction
    4. Return the non-negative series, 3-5 advice items and an accuracy score
    """
    start_time = time.time()
    request_id = get_request_id(request)
    period = request_body.period

    try:
        outcome = await service.generate(request_body.user_id, period)

    except InputError as e:
        record_forecast_failure("invalid", "input_error")
        logging.warning(f"Invalid forecast request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    except UpstreamError as e:
        record_forecast_failure(period, "ledger_error")
        logging.error(f"Ledger error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Ledger service unavailable")

    except OracleError as e:
        record_forecast_failure(period, "oracle_error")
        logging.error(f"Oracle error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail="Forecast oracle unavailable")

    except Exception as e:
        record_forecast_failure(period, "error")
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    result = outcome.result
    record_forecast(period, result.accuracy)
    log_forecast(
        request_id,
        request_body.user_id,
        period,
        outcome.metadata.forecast_days,
        result.accuracy,
        len(result.advice),
        duration_ms,
    )

    return ForecastResponse.model_validate(outcome.to_dict())
