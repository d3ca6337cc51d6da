"""
Alert Store
Narrow read/write access to the alert table
"""

import logging
from typing import List

from sqlalchemy import select, delete, desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.error_handling import StorageException
from app.models.alert import Alert

logger = logging.getLogger(__name__)


class AlertStore:
    """Persistence adapter for alerts"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def exists_for_reading(self, reading_id: str) -> bool:
        try:
            result = await self.db.execute(
                select(Alert.id).where(Alert.reading_id == reading_id)
            )
        except SQLAlchemyError as e:
            logger.error(f"Error checking alert for reading {reading_id}: {e}")
            raise StorageException("Error checking alert", details={"readingId": reading_id})
        return result.scalar_one_or_none() is not None

    async def add(self, alert: Alert) -> bool:
        """
        Commit one alert.

        Returns:
            True if stored, False if an alert for the same reading was stored concurrently
        """
        self.db.add(alert)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if await self.exists_for_reading(alert.reading_id):
                logger.info(f"Alert for reading {alert.reading_id} was stored concurrently, skipping")
                return False
            logger.error(f"Error saving alert: {e}")
            raise StorageException("Error saving alert", details={"readingId": alert.reading_id})
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error saving alert: {e}")
            raise StorageException("Error saving alert", details={"readingId": alert.reading_id})

        logger.info(f"Alert saved: {alert.alert_id}")
        return True

    async def list_for_patient(self, patient_id: str) -> List[Alert]:
        """Alerts of one patient, newest triggered_at first"""
        query = (
            select(Alert)
            .where(Alert.patient_id == patient_id)
            .order_by(desc(Alert.triggered_at), Alert.alert_id)
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching alerts for patient {patient_id}: {e}")
            raise StorageException("Error fetching alerts", details={"patientId": patient_id})
        return list(result.scalars().all())

    async def clear(self):
        try:
            await self.db.execute(delete(Alert))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error clearing alerts: {e}")
            raise StorageException("Error clearing alerts")
        logger.info("Successfully cleared all alerts")
