"""Health ID endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from healthvault.core.database import get_db
from healthvault.core.dependencies import get_current_user
from healthvault.models import User
from healthvault.schemas.health_id import HealthIdQrResponse, HealthIdResponse
from healthvault.services.health_id_service import HealthIdService

router = APIRouter(prefix="/health-id", tags=["health-id"])


@router.get("", response_model=HealthIdResponse)
def get_health_id(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The caller's Health ID; 404 until the email is verified."""
    return HealthIdService(db).get_health_id(current_user.id)


@router.get("/qr", response_model=HealthIdQrResponse)
def get_health_id_qr(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Health ID with the emergency QR payload (rendering is done by the client)."""
    return HealthIdService(db).get_health_id_with_qr(current_user.id)
