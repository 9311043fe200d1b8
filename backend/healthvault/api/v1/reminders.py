"""Reminder endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from healthvault.core.database import get_db
from healthvault.core.dependencies import get_current_user
from healthvault.models import ReminderType, User
from healthvault.schemas.common import MessageResponse
from healthvault.schemas.reminder import (
    ReminderCreate,
    ReminderResponse,
    ReminderUpdate,
)
from healthvault.services.reminder_service import ReminderService

router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.get("", response_model=List[ReminderResponse])
def list_reminders(
    type: Optional[ReminderType] = Query(None),
    active: Optional[bool] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ReminderService(db).list_reminders(current_user.id, type, active)


@router.get("/upcoming", response_model=List[ReminderResponse])
def upcoming_reminders(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Active reminders due in the next 24 hours."""
    return ReminderService(db).upcoming(current_user.id)


@router.get("/{reminder_id}", response_model=ReminderResponse)
def get_reminder(
    reminder_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ReminderService(db).get_reminder(current_user.id, reminder_id)


@router.post("", response_model=ReminderResponse, status_code=status.HTTP_201_CREATED)
def create_reminder(
    body: ReminderCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ReminderService(db).create_reminder(current_user.id, body)


@router.put("/{reminder_id}", response_model=ReminderResponse)
def update_reminder(
    reminder_id: str,
    body: ReminderUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ReminderService(db).update_reminder(current_user.id, reminder_id, body)


@router.post("/{reminder_id}/complete", response_model=ReminderResponse)
def complete_reminder(
    reminder_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ReminderService(db).complete_reminder(current_user.id, reminder_id)


@router.delete("/{reminder_id}", response_model=MessageResponse)
def delete_reminder(
    reminder_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ReminderService(db).delete_reminder(current_user.id, reminder_id)
    return MessageResponse(message="Reminder deleted successfully")
