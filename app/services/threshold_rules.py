"""
Threshold Rules
Fixed clinical thresholds per reading type
"""

from dataclasses import dataclass
from typing import Optional

from app.models.alert import AlertType
from app.models.reading import ReadingType
from app.schemas.reading import VitalReadingPayload

BP_SYSTOLIC_HIGH = 140
BP_DIASTOLIC_HIGH = 90
HR_LOW = 50
HR_HIGH = 110
SPO2_LOW = 92
SPO2_CRITICAL = 90


@dataclass(frozen=True)
class ThresholdBreach:
    alert_type: AlertType
    threshold_violated: str
    reading_value: str


def evaluate_bp(systolic: Optional[int], diastolic: Optional[int]) -> Optional[ThresholdBreach]:
    if systolic is None or diastolic is None:
        return None

    value = f"{systolic}/{diastolic}"
    if systolic >= BP_SYSTOLIC_HIGH and diastolic >= BP_DIASTOLIC_HIGH:
        return ThresholdBreach(
            AlertType.CRITICAL,
            f"Systolic ≥{BP_SYSTOLIC_HIGH} AND Diastolic ≥{BP_DIASTOLIC_HIGH}",
            value,
        )
    if systolic >= BP_SYSTOLIC_HIGH:
        return ThresholdBreach(AlertType.HIGH, f"Systolic ≥{BP_SYSTOLIC_HIGH}", value)
    if diastolic >= BP_DIASTOLIC_HIGH:
        return ThresholdBreach(AlertType.HIGH, f"Diastolic ≥{BP_DIASTOLIC_HIGH}", value)
    return None


def evaluate_hr(hr: Optional[int]) -> Optional[ThresholdBreach]:
    if hr is None:
        return None
    if hr < HR_LOW:
        return ThresholdBreach(AlertType.LOW, f"Heart Rate <{HR_LOW}", str(hr))
    if hr > HR_HIGH:
        return ThresholdBreach(AlertType.HIGH, f"Heart Rate >{HR_HIGH}", str(hr))
    return None


def evaluate_spo2(spo2: Optional[int]) -> Optional[ThresholdBreach]:
    if spo2 is None or spo2 >= SPO2_LOW:
        return None
    alert_type = AlertType.CRITICAL if spo2 < SPO2_CRITICAL else AlertType.LOW
    return ThresholdBreach(alert_type, f"SpO2 <{SPO2_LOW}", str(spo2))


def evaluate_thresholds(reading: VitalReadingPayload) -> Optional[ThresholdBreach]:
    """
    Apply the rule for the reading's type.
    Returns None when nothing is breached or the reading lacks its values.
    """
    reading_type = ReadingType(reading.type)
    if reading_type is ReadingType.BP:
        return evaluate_bp(reading.systolic, reading.diastolic)
    if reading_type is ReadingType.HR:
        return evaluate_hr(reading.hr)
    if reading_type is ReadingType.SPO2:
        return evaluate_spo2(reading.spo2)
    raise AssertionError(f"Unhandled reading type: {reading_type}")
