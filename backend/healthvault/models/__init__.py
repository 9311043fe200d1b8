"""Database models."""

from .base import Base
from .user import User
from .one_time_code import OneTimeCode, OtpPurpose
from .health_id import HealthIdentifier
from .emergency import EmergencyInfo, BloodGroup

# Records and reminders
from .record import MedicalRecord, RecordType
from .reminder import Reminder, ReminderType, ReminderFrequency

__all__ = [
    "Base",
    "User",
    "OneTimeCode",
    "OtpPurpose",
    "HealthIdentifier",
    "EmergencyInfo",
    "BloodGroup",
    # Records and reminders
    "MedicalRecord",
    "RecordType",
    "Reminder",
    "ReminderType",
    "ReminderFrequency",
]
