"""Reminder model."""

import enum

from sqlalchemy import Column, String, DateTime, Boolean, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, new_id


class ReminderType(str, enum.Enum):
    MEDICINE = "MEDICINE"
    APPOINTMENT = "APPOINTMENT"
    CHECKUP = "CHECKUP"
    VACCINATION = "VACCINATION"
    OTHER = "OTHER"


class ReminderFrequency(str, enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Reminder(Base, TimestampMixin):
    """A scheduled reminder. Stored only; delivery is up to the client."""

    __tablename__ = "reminders"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    type = Column(String, nullable=False, default=ReminderType.OTHER.value)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    scheduled_at = Column(DateTime, nullable=False)

    # Recurrence
    recurring = Column(Boolean, nullable=False, default=False)
    frequency = Column(String, nullable=True)  # daily, weekly, monthly
    end_date = Column(DateTime, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    completed_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", back_populates="reminders")

    __table_args__ = (
        Index("idx_reminder_user_id", "user_id"),
        Index("idx_reminder_scheduled_at", "scheduled_at"),
    )
