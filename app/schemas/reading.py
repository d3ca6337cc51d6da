"""
Pydantic schemas for vital readings
"""

import re
from typing import Optional
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from app.models.reading import VitalReading

# Full date, "T", then at least hours and minutes
ISO_DATE_TIME = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}")

_timestamp_adapter = TypeAdapter(datetime)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 date-time.
    Bare dates and epoch numbers are rejected. Offset-aware values are
    converted to naive UTC; naive values are kept as given.
    Raises ValueError (pydantic.ValidationError included) on malformed input.
    """
    if not ISO_DATE_TIME.match(value):
        raise ValueError(f"not an ISO-8601 date-time: {value!r}")
    parsed = _timestamp_adapter.validate_python(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class VitalReadingPayload(BaseModel):
    """
    A vital reading on the wire, discriminated by `type`.

    Every field is optional so that missing values are reported by the
    intake rules with their own messages. Numeric ids are accepted as text.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    reading_id: Optional[str] = Field(None, description="Caller-supplied unique reading id")
    patient_id: Optional[str] = Field(None, description="Patient identifier")
    captured_at: Optional[str] = Field(None, description="ISO-8601 capture timestamp")
    type: Optional[str] = Field(None, description="BP, HR or SPO2")

    # BP
    systolic: Optional[int] = Field(None, description="Systolic blood pressure (mmHg)")
    diastolic: Optional[int] = Field(None, description="Diastolic blood pressure (mmHg)")
    # HR
    hr: Optional[int] = Field(None, description="Heart rate (bpm)")
    # SPO2
    spo2: Optional[int] = Field(None, description="Oxygen saturation (%)")

    @classmethod
    def from_row(cls, row: VitalReading) -> "VitalReadingPayload":
        return cls(
            reading_id=row.reading_id,
            patient_id=row.patient_id,
            captured_at=row.captured_at.isoformat(),
            type=row.type,
            systolic=row.systolic,
            diastolic=row.diastolic,
            hr=row.hr,
            spo2=row.spo2,
        )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
