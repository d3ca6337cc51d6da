"""
Reading Store
Narrow read/write access to the reading table, keyed by readingId
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Set, Tuple

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.error_handling import StorageException
from app.models.reading import VitalReading
from app.schemas.reading import VitalReadingPayload

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_row(reading: VitalReadingPayload, captured_at: datetime) -> VitalReading:
    return VitalReading(
        reading_id=reading.reading_id,
        patient_id=reading.patient_id,
        type=reading.type,
        systolic=reading.systolic,
        diastolic=reading.diastolic,
        hr=reading.hr,
        spo2=reading.spo2,
        captured_at=captured_at,
        created_at=_utcnow(),
    )


class ReadingStore:
    """Persistence adapter for vital readings"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def exists(self, reading_id: str) -> bool:
        try:
            result = await self.db.execute(
                select(VitalReading.reading_id).where(VitalReading.reading_id == reading_id)
            )
        except SQLAlchemyError as e:
            logger.error(f"Error checking reading {reading_id}: {e}")
            raise StorageException("Error checking reading", details={"readingId": reading_id})
        return result.scalar_one_or_none() is not None

    async def existing_ids(self, reading_ids: Iterable[str]) -> Set[str]:
        """Return the subset of reading_ids already stored"""
        ids = list(set(reading_ids))
        if not ids:
            return set()
        try:
            result = await self.db.execute(
                select(VitalReading.reading_id).where(VitalReading.reading_id.in_(ids))
            )
        except SQLAlchemyError as e:
            logger.error(f"Error checking {len(ids)} readings: {e}")
            raise StorageException("Error checking readings")
        return set(result.scalars().all())

    async def add(self, reading: VitalReadingPayload, captured_at: datetime) -> bool:
        """
        Commit a single reading on its own.

        Returns:
            True if stored, False if another request stored the same readingId first
        """
        self.db.add(to_row(reading, captured_at))
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if await self.exists(reading.reading_id):
                logger.info(f"Reading {reading.reading_id} was stored concurrently, ignoring duplicate")
                return False
            logger.error(f"Error saving vital reading {reading.reading_id}: {e}")
            raise StorageException("Error saving reading", details={"readingId": reading.reading_id})
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error saving vital reading {reading.reading_id}: {e}")
            raise StorageException("Error saving reading", details={"readingId": reading.reading_id})

        logger.info(f"Saved vital reading: {reading.reading_id}")
        return True

    async def add_all(self, entries: List[Tuple[VitalReadingPayload, datetime]]):
        """
        Commit all readings in one transaction; nothing is kept if any row fails.
        """
        self.db.add_all([to_row(reading, captured_at) for reading, captured_at in entries])
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error saving batch of {len(entries)} readings, rolled back: {e}")
            raise StorageException(
                "Error saving readings, batch rolled back",
                details={"readingIds": [reading.reading_id for reading, _ in entries]},
            )
        logger.info(f"Saved {len(entries)} vital readings in one transaction")

    async def list_readings(self, patient_id: Optional[str] = None) -> List[VitalReading]:
        query = select(VitalReading)
        if patient_id:
            query = query.where(VitalReading.patient_id == patient_id)
        query = query.order_by(VitalReading.captured_at, VitalReading.reading_id)
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving vital readings: {e}")
            raise StorageException("Error retrieving readings")
        return list(result.scalars().all())

    async def clear(self):
        try:
            await self.db.execute(delete(VitalReading))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error clearing vital readings: {e}")
            raise StorageException("Error clearing readings")
        logger.info("Successfully cleared all vital readings")
