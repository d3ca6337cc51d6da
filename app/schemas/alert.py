"""
Pydantic schemas for alerts
"""

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic.alias_generators import to_camel


class AlertResponse(BaseModel):
    """Alert as returned by /evaluate and /alerts, and relayed by /readings"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )

    alert_id: str
    patient_id: str
    reading_id: str
    reading_type: str
    alert_type: str
    threshold_violated: str
    reading_value: str
    triggered_at: datetime
    created_at: Optional[datetime] = None


alert_list_adapter = TypeAdapter(List[AlertResponse])


class MessageResponse(BaseModel):
    message: str
