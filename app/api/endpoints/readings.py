"""
Vital Readings API Endpoints (Reading Intake service)
Accepts reading batches, stores them once per readingId and returns the alerts they trigger
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_readings_db
from app.schemas.alert import AlertResponse, MessageResponse
from app.schemas.reading import VitalReadingPayload
from app.services.evaluator_client import EvaluatorClient
from app.services.reading_intake import ReadingIntakeService
from app.services.reading_store import ReadingStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/readings", tags=["Vital Readings"])


def get_evaluator_client() -> EvaluatorClient:
    return EvaluatorClient(settings.EVALUATOR_URL, timeout=settings.EVALUATOR_TIMEOUT_SECONDS)


def get_intake_service(
    db: AsyncSession = Depends(get_readings_db),
    evaluator: EvaluatorClient = Depends(get_evaluator_client),
) -> ReadingIntakeService:
    return ReadingIntakeService(ReadingStore(db), evaluator)


@router.post("", response_model=List[AlertResponse])
async def submit_readings(
    readings: List[Dict[str, Any]] = Body(..., description="Vital readings, each parsed and validated on its own"),
    transactional: bool = Query(False, description="All-or-nothing processing"),
    service: ReadingIntakeService = Depends(get_intake_service),
):
    """
    Submit vital readings
    Validates, stores and forwards the readings, returning the alerts created.
    Use ?transactional=true for all-or-nothing processing.
    """
    logger.info(f"Received {len(readings)} vital readings (transactional={transactional})")
    alerts = await service.process_readings(readings, transactional=transactional)
    logger.info(f"Processed {len(readings)} readings, created {len(alerts)} alerts")
    return alerts


@router.get("", response_model=List[VitalReadingPayload], response_model_exclude_none=True)
async def get_all_readings(
    patient_id: Optional[str] = Query(None, alias="patientId"),
    service: ReadingIntakeService = Depends(get_intake_service),
):
    """Get all stored vital readings, optionally for one patient"""
    return await service.list_readings(patient_id)


@router.delete("/clear", response_model=MessageResponse)
async def clear_all_readings(service: ReadingIntakeService = Depends(get_intake_service)):
    """Clear all vital readings data"""
    await service.clear_all_data()
    return MessageResponse(message="All vital readings data cleared")
