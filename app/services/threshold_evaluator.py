"""
Threshold Evaluator Service
Turns readings into alerts, at most one per readingId
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from app.models.alert import Alert
from app.models.reading import ReadingType
from app.schemas.reading import VitalReadingPayload, parse_timestamp
from app.services.alert_store import AlertStore
from app.services.threshold_rules import evaluate_thresholds

logger = logging.getLogger(__name__)


class ThresholdEvaluatorService:
    """Rule engine and deduplication for POST /evaluate"""

    def __init__(self, store: AlertStore):
        self.store = store

    async def evaluate_readings(self, readings: List[VitalReadingPayload]) -> List[Alert]:
        """
        Evaluate a batch of readings.

        Each reading is evaluated on its own. Readings that already have an
        alert, or that cannot be evaluated, produce nothing; a storage failure
        aborts the call.

        Returns:
            Newly created alerts sorted by alert_id
        """
        logger.info(f"Evaluating {len(readings)} vital readings")

        created = []
        seen = set()
        for reading in readings:
            if reading.reading_id in seen:
                logger.info(f"Alert already evaluated in this batch for reading: {reading.reading_id}")
                continue
            seen.add(reading.reading_id)

            alert = await self.evaluate_reading(reading)
            if alert is not None:
                created.append(alert)

        created.sort(key=lambda a: a.alert_id)
        logger.info(f"Created {len(created)} alerts from {len(readings)} readings")
        return created

    async def evaluate_reading(self, reading: VitalReadingPayload) -> Optional[Alert]:
        logger.debug(
            f"Evaluating reading: type={reading.type}, patientId={reading.patient_id}, readingId={reading.reading_id}"
        )

        if not reading.reading_id or not reading.patient_id:
            logger.warning(f"Reading without readingId or patientId skipped: {reading.reading_id}")
            return None
        if reading.type not in ReadingType.__members__:
            logger.warning(f"Unknown reading type: {reading.type}")
            return None

        if await self.store.exists_for_reading(reading.reading_id):
            logger.info(f"Alert already exists for reading: {reading.reading_id}")
            return None

        breach = evaluate_thresholds(reading)
        if breach is None:
            logger.debug(f"No alert triggered for reading: {reading.reading_id}")
            return None

        try:
            triggered_at = parse_timestamp(reading.captured_at or "")
        except ValueError:
            logger.warning(f"Unparseable capturedAt {reading.captured_at!r} for reading: {reading.reading_id}")
            return None

        alert = Alert(
            alert_id=str(uuid.uuid4()),
            patient_id=reading.patient_id,
            reading_id=reading.reading_id,
            reading_type=reading.type,
            alert_type=breach.alert_type.value,
            threshold_violated=breach.threshold_violated,
            reading_value=breach.reading_value,
            triggered_at=triggered_at,
            created_at=datetime.now(timezone.utc).replace(tzinfo=None),
        )
        logger.info(f"Alert triggered for reading: {reading.reading_id} - {breach.threshold_violated}")

        if not await self.store.add(alert):
            return None
        return alert

    async def get_alerts_by_patient_id(self, patient_id: str) -> List[Alert]:
        logger.info(f"Fetching alerts for patient: {patient_id}")
        return await self.store.list_for_patient(patient_id)

    async def clear_all_alerts(self):
        logger.info("Clearing all alerts from database")
        await self.store.clear()
