"""
Database Models
"""

from .reading import VitalReading, ReadingType
from .alert import Alert, AlertType

__all__ = [
    'VitalReading',
    'ReadingType',
    'Alert',
    'AlertType',
]
