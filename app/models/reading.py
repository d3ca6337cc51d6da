"""
Vital Reading Model
Stores the vital readings accepted by Reading Intake, one row per readingId
"""

import enum

from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint
from database import ReadingsBase


class ReadingType(str, enum.Enum):
    BP = "BP"
    HR = "HR"
    SPO2 = "SPO2"


class VitalReading(ReadingsBase):
    """
    Vital reading (tagged by type)

    Only the columns of the reading's variant are set:
    - BP: systolic, diastolic
    - HR: hr
    - SPO2: spo2
    """
    __tablename__ = "vital_readings"
    __table_args__ = (
        CheckConstraint("type IN ('BP', 'HR', 'SPO2')", name="chk_type"),
    )

    # Caller-supplied id; the primary key is the idempotency guard
    reading_id = Column(String(50), primary_key=True)
    patient_id = Column(String(50), nullable=False, index=True)
    type = Column(String(10), nullable=False)

    systolic = Column(Integer, nullable=True)  # mmHg
    diastolic = Column(Integer, nullable=True)  # mmHg
    hr = Column(Integer, nullable=True)  # bpm
    spo2 = Column(Integer, nullable=True)  # %

    captured_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<VitalReading(reading_id={self.reading_id}, patient_id={self.patient_id}, type={self.type})>"
