"""
Reading Intake Service
Validates, deduplicates and stores reading batches, then forwards them to
Threshold Evaluator and relays the alerts it creates
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from app.core.error_handling import ForwardingException, ValidationException
from app.schemas.alert import AlertResponse
from app.schemas.reading import VitalReadingPayload
from app.services.evaluator_client import EvaluatorClient
from app.services.reading_store import ReadingStore
from app.services.reading_validation import check_reading

logger = logging.getLogger(__name__)


def _normalized(reading: VitalReadingPayload, captured_at: datetime) -> VitalReadingPayload:
    """The reading as stored, so the evaluator sees the same capture time"""
    return reading.model_copy(update={"captured_at": captured_at.isoformat()})


class ReadingIntakeService:
    """Batch orchestration for POST /readings"""

    def __init__(self, store: ReadingStore, evaluator: EvaluatorClient):
        self.store = store
        self.evaluator = evaluator

    async def process_readings(
        self,
        readings: List[Dict[str, Any]],
        transactional: bool = False,
    ) -> List[AlertResponse]:
        if transactional:
            return await self.process_readings_transactional(readings)
        return await self.process_readings_best_effort(readings)

    async def process_readings_best_effort(self, readings: List[Dict[str, Any]]) -> List[AlertResponse]:
        """
        Process a batch allowing partial success.

        Invalid readings are dropped, except in a batch of exactly one where the
        validation error is raised to the caller. Duplicates are skipped.
        """
        logger.info(f"Processing {len(readings)} vital readings")

        accepted: List[VitalReadingPayload] = []
        seen = set()
        for data in readings:
            try:
                reading, captured_at = check_reading(data)
            except ValidationException as e:
                logger.error(f"Error processing reading {data.get('readingId')}: {e.message}")
                if len(readings) == 1:
                    raise
                continue

            if reading.reading_id in seen or await self.store.exists(reading.reading_id):
                logger.info(f"Reading with ID {reading.reading_id} already exists, ignoring duplicate")
                continue
            seen.add(reading.reading_id)

            if await self.store.add(reading, captured_at):
                accepted.append(_normalized(reading, captured_at))

        return await self.forward(accepted)

    async def process_readings_transactional(self, readings: List[Dict[str, Any]]) -> List[AlertResponse]:
        """
        Process a batch all-or-nothing.

        Every reading is validated before anything is written; the accepted
        readings are then committed in a single transaction.
        """
        logger.info(f"Processing {len(readings)} vital readings transactionally (all-or-nothing)")

        validated: List[Tuple[VitalReadingPayload, datetime]] = []
        for data in readings:
            try:
                validated.append(check_reading(data))
            except ValidationException as e:
                logger.error(f"Transaction failed on reading {data.get('readingId')}, nothing saved: {e.message}")
                raise

        existing = await self.store.existing_ids(reading.reading_id for reading, _ in validated)
        staged: List[Tuple[VitalReadingPayload, datetime]] = []
        seen = set()
        for reading, captured_at in validated:
            if reading.reading_id in existing or reading.reading_id in seen:
                logger.info(f"Reading with ID {reading.reading_id} already exists, ignoring duplicate")
                continue
            seen.add(reading.reading_id)
            staged.append((reading, captured_at))

        if staged:
            logger.info(f"All {len(readings)} readings validated, saving {len(staged)} to database")
            await self.store.add_all(staged)

        return await self.forward([_normalized(reading, captured_at) for reading, captured_at in staged])

    async def forward(self, readings: List[VitalReadingPayload]) -> List[AlertResponse]:
        """
        Forward accepted readings as one batch and reconcile the response.
        Forwarding failures are logged and yield no alerts; stored readings stay stored.
        """
        if not readings:
            return []

        reading_ids = [reading.reading_id for reading in readings]
        try:
            alerts = await self.evaluator.evaluate(readings)
        except ForwardingException as e:
            logger.error(
                f"Alert service communication failed for {len(readings)} readings "
                f"({', '.join(reading_ids)}), but continuing: {e.message}"
            )
            return []

        forwarded = set(reading_ids)
        reconciled = []
        for alert in alerts:
            if alert.reading_id not in forwarded:
                logger.warning(f"Discarding alert {alert.alert_id} for unknown reading {alert.reading_id}")
                continue
            reconciled.append(alert)
        return reconciled

    async def list_readings(self, patient_id: Optional[str] = None) -> List[VitalReadingPayload]:
        rows = await self.store.list_readings(patient_id)
        logger.info(f"Retrieved {len(rows)} readings")
        return [VitalReadingPayload.from_row(row) for row in rows]

    async def clear_all_data(self):
        logger.info("Clearing all vital readings from database")
        await self.store.clear()
