"""One-time verification codes."""

import enum
from datetime import datetime

from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from .base import Base, new_id


class OtpPurpose(str, enum.Enum):
    """What a one-time code proves."""

    EMAIL_VERIFICATION = "EMAIL_VERIFICATION"
    PHONE_VERIFICATION = "PHONE_VERIFICATION"
    LOGIN = "LOGIN"
    PASSWORD_RESET = "PASSWORD_RESET"


class OneTimeCode(Base):
    """
    Short-lived, single-use numeric code.

    A code is acceptable only while ``is_used`` is False and the current time
    is before ``expires_at``. ``is_used`` is set exactly once, by a successful
    verification.
    """

    __tablename__ = "otp_codes"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    code = Column(String(6), nullable=False)
    purpose = Column(String, nullable=False)  # OtpPurpose value
    expires_at = Column(DateTime, nullable=False)
    is_used = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="one_time_codes")

    __table_args__ = (
        Index("idx_otp_lookup", "user_id", "purpose", "code"),
        Index("idx_otp_expires_at", "expires_at"),
    )
