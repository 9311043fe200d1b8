"""Reminder schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from healthvault.models.reminder import ReminderFrequency, ReminderType
from healthvault.schemas.common import CamelModel


class ReminderCreate(CamelModel):
    type: ReminderType = ReminderType.OTHER
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    scheduled_at: datetime
    recurring: bool = False
    frequency: Optional[ReminderFrequency] = None
    end_date: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ReminderUpdate(CamelModel):
    """Partial update; omitted fields are left unchanged."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    recurring: Optional[bool] = None
    frequency: Optional[ReminderFrequency] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None


class ReminderResponse(CamelModel):
    id: str
    type: str
    title: str
    description: Optional[str] = None
    scheduled_at: datetime
    recurring: bool
    frequency: Optional[str] = None
    end_date: Optional[datetime] = None
    is_active: bool
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
