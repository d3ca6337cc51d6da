"""
Alert Model
Alerts derived by Threshold Evaluator, at most one per reading
"""

import enum

from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint
from database import AlertsBase


class AlertType(str, enum.Enum):
    LOW = "LOW"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class Alert(AlertsBase):
    __tablename__ = "alerts"
    __table_args__ = (
        CheckConstraint("reading_type IN ('BP', 'HR', 'SPO2')", name="chk_reading_type"),
        CheckConstraint("alert_type IN ('HIGH', 'LOW', 'CRITICAL')", name="chk_alert_type"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    alert_id = Column(String(50), unique=True, nullable=False)
    patient_id = Column(String(50), nullable=False, index=True)
    # Unique: evaluating the same reading twice never yields a second alert
    reading_id = Column(String(50), unique=True, nullable=False)
    reading_type = Column(String(10), nullable=False)
    alert_type = Column(String(20), nullable=False)
    threshold_violated = Column(String(100), nullable=False)
    reading_value = Column(String(100), nullable=False)
    triggered_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<Alert(alert_id={self.alert_id}, reading_id={self.reading_id}, alert_type={self.alert_type})>"
