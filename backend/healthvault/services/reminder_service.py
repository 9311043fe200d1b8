"""Reminder storage. Delivery is the client's job; this only keeps the schedule."""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from healthvault.core.exceptions import NotFoundError
from healthvault.models import Reminder, ReminderType
from healthvault.schemas.reminder import ReminderCreate, ReminderUpdate

logger = logging.getLogger(__name__)

UPCOMING_WINDOW = timedelta(hours=24)


class ReminderService:
    """Owner-scoped CRUD over reminders."""

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, action: str, reminder_id: Optional[str] = None) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to %s reminder %s", action, reminder_id)
            raise

    def list_reminders(
        self,
        user_id: str,
        reminder_type: Optional[ReminderType] = None,
        active: Optional[bool] = None,
    ) -> List[Reminder]:
        query = self.db.query(Reminder).filter(Reminder.user_id == user_id)
        if reminder_type:
            query = query.filter(Reminder.type == reminder_type.value)
        if active is not None:
            query = query.filter(Reminder.is_active.is_(active))
        return query.order_by(Reminder.scheduled_at.asc()).all()

    def upcoming(self, user_id: str, now: Optional[datetime] = None) -> List[Reminder]:
        """Active reminders scheduled within the next 24 hours."""
        now = now or datetime.utcnow()
        return (
            self.db.query(Reminder)
            .filter(
                Reminder.user_id == user_id,
                Reminder.is_active.is_(True),
                Reminder.scheduled_at >= now,
                Reminder.scheduled_at <= now + UPCOMING_WINDOW,
            )
            .order_by(Reminder.scheduled_at.asc())
            .all()
        )

    def get_reminder(self, user_id: str, reminder_id: str) -> Reminder:
        reminder = (
            self.db.query(Reminder)
            .filter(Reminder.id == reminder_id, Reminder.user_id == user_id)
            .first()
        )
        if not reminder:
            raise NotFoundError("Reminder not found")
        return reminder

    def create_reminder(self, user_id: str, data: ReminderCreate) -> Reminder:
        reminder = Reminder(
            user_id=user_id,
            type=data.type.value,
            title=data.title,
            description=data.description,
            scheduled_at=_naive_utc(data.scheduled_at),
            recurring=data.recurring,
            frequency=data.frequency.value if data.frequency else None,
            end_date=_naive_utc(data.end_date),
        )
        self.db.add(reminder)
        self._commit("create")
        self.db.refresh(reminder)
        return reminder

    def update_reminder(
        self, user_id: str, reminder_id: str, changes: ReminderUpdate
    ) -> Reminder:
        """Apply only the fields present in ``changes``."""
        reminder = self.get_reminder(user_id, reminder_id)
        fields = changes.model_dump(exclude_unset=True)

        for name, value in fields.items():
            if name in ("title", "scheduled_at", "recurring", "is_active") and value is None:
                # Required columns; null means "leave as is"
                continue
            if name in ("scheduled_at", "end_date"):
                value = _naive_utc(value)
            elif name == "frequency" and value is not None:
                value = value.value
            setattr(reminder, name, value)

        self._commit("update", reminder_id)
        self.db.refresh(reminder)
        return reminder

    def complete_reminder(self, user_id: str, reminder_id: str) -> Reminder:
        reminder = self.get_reminder(user_id, reminder_id)
        reminder.completed_at = datetime.utcnow()
        self._commit("complete", reminder_id)
        self.db.refresh(reminder)
        return reminder

    def delete_reminder(self, user_id: str, reminder_id: str) -> None:
        reminder = self.get_reminder(user_id, reminder_id)
        self.db.delete(reminder)
        self._commit("delete", reminder_id)


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store timestamps as naive UTC, like every other column."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
