"""
Schemas package initialization.
"""

from healthvault.schemas.common import (
    CamelModel,
    HealthCheck,
    ErrorResponse,
    MessageResponse,
)
from healthvault.schemas.emergency import (
    EmergencyContact,
    EmergencyInfoUpdate,
    EmergencyInfoResponse,
    EmergencyCard,
    PublicEmergencyCard,
)
from healthvault.schemas.auth import (
    RegisterRequest,
    VerifyCodeRequest,
    ResendCodeRequest,
    LoginRequest,
    ProfileUpdate,
    RegisterResponse,
    UserSummary,
    AuthResponse,
    VerificationRequiredResponse,
    ProfileResponse,
)
from healthvault.schemas.health_id import HealthIdResponse, HealthIdQrResponse
from healthvault.schemas.record import (
    RecordUpdate,
    RecordResponse,
    RecordTypeCount,
    RecordFileUrl,
)
from healthvault.schemas.reminder import (
    ReminderCreate,
    ReminderUpdate,
    ReminderResponse,
)

__all__ = [
    "CamelModel",
    "HealthCheck",
    "ErrorResponse",
    "MessageResponse",
    "EmergencyContact",
    "EmergencyInfoUpdate",
    "EmergencyInfoResponse",
    "EmergencyCard",
    "PublicEmergencyCard",
    "RegisterRequest",
    "VerifyCodeRequest",
    "ResendCodeRequest",
    "LoginRequest",
    "ProfileUpdate",
    "RegisterResponse",
    "UserSummary",
    "AuthResponse",
    "VerificationRequiredResponse",
    "ProfileResponse",
    "HealthIdResponse",
    "HealthIdQrResponse",
    "RecordUpdate",
    "RecordResponse",
    "RecordTypeCount",
    "RecordFileUrl",
    "ReminderCreate",
    "ReminderUpdate",
    "ReminderResponse",
]
