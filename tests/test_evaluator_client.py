"""
Evaluator client tests against mocked transports
"""
import asyncio
import json

import httpx
import pytest

from app.core.error_handling import ForwardingException
from app.schemas.reading import VitalReadingPayload
from app.services.evaluator_client import EvaluatorClient
from tests.factories import bp, hr


READINGS = [
    VitalReadingPayload.model_validate(bp("r1", 150, 95)),
    VitalReadingPayload.model_validate(hr("r2", 75)),
]

ALERT = {
    "alertId": "a-1",
    "patientId": "p-001",
    "readingId": "r1",
    "readingType": "BP",
    "alertType": "CRITICAL",
    "thresholdViolated": "Systolic ≥140 AND Diastolic ≥90",
    "readingValue": "150/95",
    "triggeredAt": "2025-08-01T12:00:00",
    "createdAt": "2025-08-01T12:00:01",
}


def _client(handler, timeout=5.0):
    return EvaluatorClient("http://evaluator/", timeout=timeout, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
@pytest.mark.unit
async def test_sends_one_batched_request():
    requests = []

    def handler(request: httpx.Request):
        requests.append(request)
        return httpx.Response(200, json=[ALERT])

    alerts = await _client(handler).evaluate(READINGS)

    assert len(requests) == 1
    assert requests[0].method == "POST"
    assert requests[0].url == "http://evaluator/evaluate"
    body = json.loads(requests[0].content)
    assert [item["readingId"] for item in body] == ["r1", "r2"]
    assert body[1] == hr("r2", 75)
    assert len(alerts) == 1
    assert alerts[0].alert_id == "a-1"
    assert alerts[0].alert_type == "CRITICAL"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_empty_batch_makes_no_call():
    def handler(request):
        raise AssertionError("evaluator should not be called")

    assert await _client(handler).evaluate([]) == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_server_error_raises_forwarding_exception():
    client = _client(lambda request: httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(ForwardingException, match="HTTP error"):
        await client.evaluate(READINGS)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unreachable_evaluator_raises_forwarding_exception():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(ForwardingException):
        await _client(handler).evaluate(READINGS)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_slow_evaluator_times_out():
    async def handler(request):
        await asyncio.sleep(1)
        return httpx.Response(200, json=[])

    with pytest.raises(ForwardingException, match="did not answer"):
        await _client(handler, timeout=0.05).evaluate(READINGS)


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize("response", [
    httpx.Response(200, text="not json"),
    httpx.Response(200, json={"alerts": []}),
    httpx.Response(200, json=[{"alertId": "a-1"}]),
])
async def test_undecodable_response_raises_forwarding_exception(response):
    with pytest.raises(ForwardingException, match="Undecodable"):
        await _client(lambda request: response).evaluate(READINGS)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_invalid_evaluator_url_raises_forwarding_exception():
    def handler(request):
        raise AssertionError("request should not be built")

    client = EvaluatorClient("http://999.999.999.999", transport=httpx.MockTransport(handler))

    with pytest.raises(ForwardingException, match="HTTP error"):
        await client.evaluate(READINGS)
