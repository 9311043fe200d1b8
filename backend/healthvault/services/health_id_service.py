"""Health identifier assignment, lookup and QR payload."""

import json
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from healthvault.core.exceptions import NotFoundError
from healthvault.models import HealthIdentifier, User
from healthvault.schemas.health_id import (
    HealthIdOwner,
    HealthIdQrResponse,
    HealthIdResponse,
)
from healthvault.utils import codes

logger = logging.getLogger(__name__)

QR_PAYLOAD_TYPE = "HEALTHVAULT_EMERGENCY"
PUBLIC_CONTACT_LIMIT = 2


class HealthIdService:
    """Binds health codes to users and reads them back."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: str):
        return (
            self.db.query(HealthIdentifier)
            .filter(HealthIdentifier.user_id == user_id)
            .first()
        )

    def get_by_code(self, health_code: str):
        return (
            self.db.query(HealthIdentifier)
            .filter(HealthIdentifier.health_code == health_code)
            .first()
        )

    def assign(self, user: User) -> HealthIdentifier:
        """
        Return the user's identifier, creating it if there is none.

        The new row is flushed so that a duplicate code or a second identifier
        for the same user fails here with ``IntegrityError``; the caller rolls
        back and retries the whole unit of work.
        """
        existing = self.get_by_user(user.id)
        if existing:
            return existing

        health_id = HealthIdentifier(
            user_id=user.id, health_code=codes.generate_health_code()
        )
        self.db.add(health_id)
        self.db.flush()
        logger.info("Assigned health code %s to user %s", health_id.health_code, user.id)
        return health_id

    def get_health_id(self, user_id: str) -> HealthIdResponse:
        health_id = self.get_by_user(user_id)
        if not health_id:
            raise NotFoundError("Health ID not found")
        return HealthIdResponse.model_validate(health_id)

    def get_health_id_with_qr(self, user_id: str) -> HealthIdQrResponse:
        """Health code plus the JSON payload the client encodes into a QR image."""
        user = self.db.get(User, user_id)
        if not user or not user.health_id:
            raise NotFoundError("Health ID not found")

        info = user.emergency_info
        blood_group = info.blood_group if info else None
        payload = {
            "healthId": user.health_id.health_code,
            "type": QR_PAYLOAD_TYPE,
            "name": user.full_name,
            "bloodGroup": blood_group,
            "allergies": list(info.allergies or []) if info else [],
            "emergencyContacts": (
                list(info.emergency_contacts or [])[:PUBLIC_CONTACT_LIMIT] if info else []
            ),
            "timestamp": datetime.utcnow().isoformat() + "Z",
        }

        return HealthIdQrResponse(
            health_code=user.health_id.health_code,
            qr_data=json.dumps(payload),
            user=HealthIdOwner(
                first_name=user.first_name,
                last_name=user.last_name,
                blood_group=blood_group,
            ),
        )
