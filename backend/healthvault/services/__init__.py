"""
Services package initialization.
"""

from healthvault.services.account_service import AccountService
from healthvault.services.email_service import EmailService
from healthvault.services.emergency_service import EmergencyService
from healthvault.services.health_id_service import HealthIdService
from healthvault.services.otp_service import OneTimeCodeService
from healthvault.services.record_service import RecordService
from healthvault.services.reminder_service import ReminderService
from healthvault.services.storage_service import StorageService

__all__ = [
    "AccountService",
    "EmailService",
    "EmergencyService",
    "HealthIdService",
    "OneTimeCodeService",
    "RecordService",
    "ReminderService",
    "StorageService",
]
