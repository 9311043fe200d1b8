"""
Account lifecycle request/response schemas.
"""

from datetime import date
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from healthvault.models.one_time_code import OtpPurpose
from healthvault.schemas.common import CamelModel
from healthvault.schemas.emergency import EmergencyInfoResponse


def _normalize_email(value: str) -> str:
    return value.strip().lower()


# ============================================================
# REQUESTS
# ============================================================


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, pattern=r"^\+?[0-9 ()-]{7,20}$")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class VerifyCodeRequest(CamelModel):
    user_id: str
    code: str = Field(..., pattern=r"^\d{6}$")
    # The mobile client sends this as "type"
    purpose: OtpPurpose = Field(..., alias="type")


class ResendCodeRequest(CamelModel):
    user_id: str
    purpose: OtpPurpose = Field(OtpPurpose.EMAIL_VERIFICATION, alias="type")


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)


class ProfileUpdate(CamelModel):
    """Partial profile update; only fields present in the body are applied."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, pattern=r"^\+?[0-9 ()-]{7,20}$")
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(None, max_length=20)


# ============================================================
# RESPONSES
# ============================================================


class RegisterResponse(CamelModel):
    message: str = "Registration successful. Please verify your email."
    user_id: str


class UserSummary(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    health_code: Optional[str] = None


class AuthResponse(CamelModel):
    message: Optional[str] = None
    token: str
    user: UserSummary


class VerificationRequiredResponse(CamelModel):
    """Login succeeded on credentials but the email is still unverified."""

    error: str = "Email not verified"
    message: str = "A new verification code has been sent to your email"
    needs_verification: bool = True
    user_id: str


class ProfileResponse(CamelModel):
    id: str
    email: str
    phone: Optional[str] = None
    first_name: str
    last_name: str
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    profile_image: Optional[str] = None
    is_verified: bool
    health_code: Optional[str] = None
    emergency_info: Optional[EmergencyInfoResponse] = None
