"""Emergency info endpoints, including the public lookup by health code."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from healthvault.core.database import get_db
from healthvault.core.dependencies import get_current_user
from healthvault.models import User
from healthvault.schemas.common import ErrorResponse
from healthvault.schemas.emergency import (
    EmergencyCard,
    EmergencyInfoResponse,
    EmergencyInfoUpdate,
    PublicEmergencyCard,
)
from healthvault.services.emergency_service import EmergencyService
from healthvault.utils.codes import HEALTH_CODE_PATTERN

router = APIRouter(prefix="/emergency", tags=["emergency"])


@router.get("", response_model=EmergencyInfoResponse)
def get_emergency_info(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return EmergencyService(db).get_emergency_info(current_user.id)


@router.put("", response_model=EmergencyInfoResponse)
def update_emergency_info(
    body: EmergencyInfoUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Partial update: fields left out of the body keep their stored values."""
    return EmergencyService(db).update_emergency_info(current_user.id, body)


@router.get("/card", response_model=EmergencyCard)
def get_emergency_card(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Full emergency card for the owner."""
    return EmergencyService(db).get_emergency_card(current_user.id)


@router.get(
    "/public/{health_code}",
    response_model=PublicEmergencyCard,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def get_public_emergency_info(
    health_code: str = Path(..., pattern=HEALTH_CODE_PATTERN),
    db: Session = Depends(get_db),
):
    """
    Public lookup, e.g. from a scanned QR card. No authentication.

    Returns name, blood group, allergies and at most two emergency contacts.
    """
    return EmergencyService(db).get_public_card(health_code)
