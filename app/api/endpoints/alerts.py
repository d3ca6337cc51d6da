"""
Alerts API Endpoints (Threshold Evaluator service)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.endpoints.evaluate import get_evaluator_service
from app.core.error_handling import ValidationException
from app.schemas.alert import AlertResponse, MessageResponse
from app.services.threshold_evaluator import ThresholdEvaluatorService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/alerts", tags=["Alert Management"])


@router.get("", response_model=List[AlertResponse])
async def get_alerts(
    patient_id: Optional[str] = Query(None, alias="patientId", description="Patient ID to retrieve alerts for"),
    service: ThresholdEvaluatorService = Depends(get_evaluator_service),
):
    """Get alerts for a patient, most recent first"""
    if patient_id is None or not patient_id.strip():
        logger.error("Invalid patient ID provided")
        raise ValidationException("patientId is required")

    alerts = await service.get_alerts_by_patient_id(patient_id)
    logger.info(f"Completed fetching {len(alerts)} alerts for patient: {patient_id}")
    return [AlertResponse.model_validate(alert) for alert in alerts]


@router.delete("/clear", response_model=MessageResponse)
async def clear_all_alerts(service: ThresholdEvaluatorService = Depends(get_evaluator_service)):
    """Clear all alerts data"""
    await service.clear_all_alerts()
    return MessageResponse(message="All alerts data cleared")
