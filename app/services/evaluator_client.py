"""
Evaluator Client
Forwards accepted readings to Threshold Evaluator via its REST API
"""

import asyncio
import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from app.core.error_handling import ForwardingException
from app.schemas.alert import AlertResponse, alert_list_adapter
from app.schemas.reading import VitalReadingPayload

logger = logging.getLogger(__name__)


class EvaluatorClient:
    """Sends reading batches to POST /evaluate"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def evaluate(self, readings: List[VitalReadingPayload]) -> List[AlertResponse]:
        """
        Send one batch to the evaluator.

        Args:
            readings: Accepted readings, in submission order

        Returns:
            Alerts created by the evaluator, in the evaluator's order

        Raises:
            ForwardingException: on timeout, transport error, error status or
                an undecodable response body
        """
        if not readings:
            return []

        try:
            return await asyncio.wait_for(self._post(readings), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise ForwardingException(
                f"Evaluator did not answer within {self.timeout}s",
                details={"reading_count": len(readings)},
            )

    async def _post(self, readings: List[VitalReadingPayload]) -> List[AlertResponse]:
        body = [reading.to_wire() for reading in readings]
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(f"{self.base_url}/evaluate", json=body)
                response.raise_for_status()
                alerts = alert_list_adapter.validate_python(response.json())
        except httpx.TimeoutException as e:
            raise ForwardingException(f"Evaluator timed out: {e!r}")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ForwardingException(f"HTTP error: {str(e)}")
        except (ValueError, ValidationError) as e:
            raise ForwardingException(f"Undecodable evaluator response: {e}")

        logger.info(f"Forwarded {len(readings)} readings to evaluator, received {len(alerts)} alerts")
        return alerts
