"""Forecast Oracle HTTP client - raw prediction, draft advice and draft accuracy"""

import json
import logging
import re
from numbers import Real
from typing import Any, Dict

import httpx

from forecast_gateway.config import settings
from forecast_gateway.domain.exceptions import OracleError
from forecast_gateway.domain.models import OraclePrediction
from forecast_gateway.infrastructure.observability.metrics import oracle_failure_counter, oracle_latency_histogram

logger = logging.getLogger(__name__)

_FENCED_JSON_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def _extract_json(text: str) -> Dict[str, Any]:
    """
    Decode a JSON object from model output.

    Tries the whole body first, then a fenced ```json block, then the
    outermost {...} span.
    """
    candidates = [text]
    fenced = _FENCED_JSON_RE.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    braced = _OBJECT_RE.search(text)
    if braced:
        candidates.append(braced.group(0))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(data, dict):
            return data

    raise OracleError("Oracle did not return a JSON object")


def parse_oracle_payload(text: str) -> OraclePrediction:
    """
    Parse and validate the oracle response body.

    Balance entries are passed through untouched; the blender decides
    whether they can be repaired.

    Raises:
        OracleError: If required fields are missing or have the wrong shape
    """
    data = _extract_json(text.strip())

    raw_balance = data.get("rawBalance")
    if not isinstance(raw_balance, list):
        raise OracleError("Missing or invalid rawBalance array")

    draft_advice = data.get("draftAdvice", [])
    if not isinstance(draft_advice, list) or not all(isinstance(a, str) for a in draft_advice):
        raise OracleError("Invalid draftAdvice array")

    draft_accuracy = data.get("draftAccuracy")
    if isinstance(draft_accuracy, bool) or not isinstance(draft_accuracy, Real) or not 0 <= draft_accuracy <= 100:
        raise OracleError("Missing or invalid draftAccuracy (must be 0-100)")

    return OraclePrediction(
        raw_balance=raw_balance,
        draft_advice=draft_advice,
        draft_accuracy=float(draft_accuracy),
    )


class OracleClient:
    """Client for the external Forecast Oracle service"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.oracle_api_base
        self.timeout = timeout or settings.oracle_timeout_seconds
        self.api_key = api_key or settings.oracle_api_key
        self.transport = transport

    async def predict(self, context: Dict[str, Any]) -> OraclePrediction:
        """
        Request a raw balance prediction for the given context.

        No retries: oracle failures surface immediately.

        Raises:
            OracleError: On timeout, HTTP errors, or unusable payload
        """
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with oracle_latency_histogram.time():
                    response = await client.post(
                        f"{self.base_url}/predict",
                        json={"context": context},
                        headers=headers,
                    )
                response.raise_for_status()
                return parse_oracle_payload(response.text)

            except httpx.TimeoutException as e:
                raise self._fail(f"Oracle timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise self._fail(f"Oracle error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise self._fail(f"Oracle unreachable: {e}") from e
            except OracleError as e:
                raise self._fail(str(e)) from e

    def _fail(self, message: str) -> OracleError:
        oracle_failure_counter.inc()
        logger.warning(message)
        return OracleError(message)
