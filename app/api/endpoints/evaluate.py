"""
Evaluation API Endpoint (Threshold Evaluator service)
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_alerts_db
from app.schemas.alert import AlertResponse
from app.schemas.reading import VitalReadingPayload
from app.services.alert_store import AlertStore
from app.services.threshold_evaluator import ThresholdEvaluatorService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Alert Management"])


def get_evaluator_service(db: AsyncSession = Depends(get_alerts_db)) -> ThresholdEvaluatorService:
    return ThresholdEvaluatorService(AlertStore(db))


@router.post("/evaluate", response_model=List[AlertResponse])
async def evaluate_readings(
    readings: List[VitalReadingPayload],
    service: ThresholdEvaluatorService = Depends(get_evaluator_service),
):
    """Evaluate vital readings against thresholds, returning the alerts created"""
    logger.info(f"Received {len(readings)} readings for evaluation")
    alerts = await service.evaluate_readings(readings)
    return [AlertResponse.model_validate(alert) for alert in alerts]
