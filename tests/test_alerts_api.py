"""
Threshold Evaluator API tests
"""
import pytest

from tests.factories import bp, hr, spo2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_evaluate_returns_created_alerts(evaluator):
    response = await evaluator.post("/evaluate", json=[bp("r1", 145, 85), hr("r2", 80), spo2("r3", 89)])

    assert response.status_code == 200
    alerts = response.json()
    assert [a["alertId"] for a in alerts] == sorted(a["alertId"] for a in alerts)
    by_reading = {a["readingId"]: a for a in alerts}
    assert set(by_reading) == {"r1", "r3"}
    assert by_reading["r1"]["alertType"] == "HIGH"
    assert by_reading["r1"]["thresholdViolated"] == "Systolic ≥140"
    assert by_reading["r1"]["readingType"] == "BP"
    assert by_reading["r3"]["alertType"] == "CRITICAL"
    assert by_reading["r3"]["readingValue"] == "89"
    assert by_reading["r3"]["createdAt"] is not None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_evaluate_is_idempotent(evaluator):
    await evaluator.post("/evaluate", json=[hr("r1", 40)])
    response = await evaluator.post("/evaluate", json=[hr("r1", 40)])

    assert response.status_code == 200
    assert response.json() == []
    alerts = (await evaluator.get("/alerts", params={"patientId": "p-001"})).json()
    assert len(alerts) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_evaluate_skips_readings_missing_values(evaluator):
    response = await evaluator.post("/evaluate", json=[
        {"readingId": "r1", "patientId": "p-001", "capturedAt": "2025-08-01T12:00:00", "type": "HR"},
        hr("r2", 115),
    ])

    assert response.status_code == 200
    assert [a["readingId"] for a in response.json()] == ["r2"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_alerts_newest_first(evaluator):
    await evaluator.post("/evaluate", json=[
        hr("r1", 130, captured_at="2025-08-01T08:00:00"),
        hr("r2", 130, captured_at="2025-08-03T08:00:00"),
        hr("r3", 130, captured_at="2025-08-02T08:00:00"),
        hr("r4", 130, patient_id="p-002"),
    ])

    response = await evaluator.get("/alerts", params={"patientId": "p-001"})

    assert response.status_code == 200
    alerts = response.json()
    assert [a["readingId"] for a in alerts] == ["r2", "r3", "r1"]
    assert [a["triggeredAt"] for a in alerts] == [
        "2025-08-03T08:00:00",
        "2025-08-02T08:00:00",
        "2025-08-01T08:00:00",
    ]


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize("params", [{}, {"patientId": ""}, {"patientId": "   "}])
async def test_alerts_require_patient_id(evaluator, params):
    response = await evaluator.get("/alerts", params=params)

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "patientId is required"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_patient_has_no_alerts(evaluator):
    response = await evaluator.get("/alerts", params={"patientId": "nobody"})

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_clear_alerts(evaluator):
    await evaluator.post("/evaluate", json=[hr("r1", 130)])

    response = await evaluator.delete("/alerts/clear")

    assert response.status_code == 200
    assert (await evaluator.get("/alerts", params={"patientId": "p-001"})).json() == []
