"""
Reading Validation
Field and range rules applied to every incoming reading, whatever the batch mode
"""

from datetime import datetime
from typing import Any, Dict, Tuple

from pydantic import ValidationError

from app.core.error_handling import ValidationException
from app.models.reading import ReadingType
from app.schemas.reading import VitalReadingPayload, parse_timestamp

SYSTOLIC_RANGE = (0, 300)
DIASTOLIC_RANGE = (0, 200)
HR_RANGE = (0, 300)
SPO2_RANGE = (0, 100)


def _require_text(value, field: str):
    if value is None or not value.strip():
        raise ValidationException(f"{field} is required", details={"field": field})


def _require_range(value: int, field: str, bounds):
    low, high = bounds
    if value < low or value > high:
        raise ValidationException(
            f"{field} must be between {low} and {high}",
            details={"field": field, "value": value},
        )


def _check_bp(reading: VitalReadingPayload):
    if reading.systolic is None or reading.diastolic is None:
        raise ValidationException("systolic and diastolic are required for BP readings")
    _require_range(reading.systolic, "systolic", SYSTOLIC_RANGE)
    _require_range(reading.diastolic, "diastolic", DIASTOLIC_RANGE)


def _check_hr(reading: VitalReadingPayload):
    if reading.hr is None:
        raise ValidationException("hr is required for HR readings")
    _require_range(reading.hr, "hr", HR_RANGE)


def _check_spo2(reading: VitalReadingPayload):
    if reading.spo2 is None:
        raise ValidationException("spo2 is required for SPO2 readings")
    _require_range(reading.spo2, "spo2", SPO2_RANGE)


VARIANT_CHECKS = {
    ReadingType.BP: _check_bp,
    ReadingType.HR: _check_hr,
    ReadingType.SPO2: _check_spo2,
}


def validate_reading(reading: VitalReadingPayload) -> datetime:
    """
    Validate one reading.

    Args:
        reading: Reading as received from the client

    Returns:
        The parsed capture timestamp

    Raises:
        ValidationException: naming the first field or rule that failed
    """
    _require_text(reading.reading_id, "readingId")
    _require_text(reading.patient_id, "patientId")
    _require_text(reading.captured_at, "capturedAt")

    try:
        reading_type = ReadingType(reading.type)
    except ValueError:
        raise ValidationException("invalid type", details={"type": reading.type})

    VARIANT_CHECKS[reading_type](reading)

    try:
        return parse_timestamp(reading.captured_at.strip())
    except ValueError:
        raise ValidationException(
            "capturedAt must be an ISO-8601 timestamp",
            details={"capturedAt": reading.captured_at},
        )


def parse_reading(data: Dict[str, Any]) -> VitalReadingPayload:
    """
    Build a reading from one JSON object of a batch.

    Raises:
        ValidationException: naming the first field whose value has the wrong type
    """
    try:
        return VitalReadingPayload.model_validate(data)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(loc) for loc in error["loc"])
        raise ValidationException(
            f"{field} has an invalid value",
            details={"field": field, "reason": error["msg"]},
        )


def check_reading(data: Dict[str, Any]) -> Tuple[VitalReadingPayload, datetime]:
    """Parse and validate one raw reading, returning it with its capture time"""
    reading = parse_reading(data)
    return reading, validate_reading(reading)
