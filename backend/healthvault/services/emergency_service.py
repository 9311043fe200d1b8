"""Emergency info storage and its full and public projections."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from healthvault.core.exceptions import NotFoundError, ValidationError
from healthvault.models import EmergencyInfo, User
from healthvault.schemas.emergency import (
    EmergencyCard,
    EmergencyInfoResponse,
    EmergencyInfoUpdate,
    PublicEmergencyCard,
)
from healthvault.services.health_id_service import HealthIdService, PUBLIC_CONTACT_LIMIT
from healthvault.utils.codes import is_valid_health_code

logger = logging.getLogger(__name__)

LIST_FIELDS = ("allergies", "chronic_diseases", "medications", "emergency_contacts")


class EmergencyService:
    """Reads and writes a user's emergency info."""

    def __init__(self, db: Session):
        self.db = db

    def _get_user(self, user_id: str) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def _get_or_create(self, user_id: str) -> EmergencyInfo:
        info = (
            self.db.query(EmergencyInfo)
            .filter(EmergencyInfo.user_id == user_id)
            .first()
        )
        if info is None:
            info = EmergencyInfo(
                user_id=user_id,
                allergies=[],
                chronic_diseases=[],
                medications=[],
                emergency_contacts=[],
                organ_donor=False,
            )
            self.db.add(info)
            self.db.flush()
        return info

    def get_emergency_info(self, user_id: str) -> EmergencyInfoResponse:
        """Stored info, created with empty defaults on first access."""
        self._get_user(user_id)
        try:
            info = self._get_or_create(user_id)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to load emergency info for user %s", user_id)
            raise
        return EmergencyInfoResponse.model_validate(info)

    def update_emergency_info(
        self, user_id: str, changes: EmergencyInfoUpdate
    ) -> EmergencyInfoResponse:
        """
        Apply a partial update.

        Only fields present in the request are written. Lists are replaced,
        and an explicit null clears a list to empty or unsets the blood group.
        """
        self._get_user(user_id)
        fields = changes.model_dump(exclude_unset=True, mode="json")

        try:
            info = self._get_or_create(user_id)
            for name, value in fields.items():
                if name in LIST_FIELDS:
                    value = list(value or [])
                elif name == "organ_donor":
                    value = bool(value)
                setattr(info, name, value)
            self.db.commit()
            self.db.refresh(info)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to update emergency info for user %s", user_id)
            raise

        logger.info("Updated emergency info for user %s: %s", user_id, sorted(fields))
        return EmergencyInfoResponse.model_validate(info)

    def get_emergency_card(self, user_id: str) -> EmergencyCard:
        """Full card for the authenticated owner, including conditions and medications."""
        user = self._get_user(user_id)
        info = user.emergency_info
        return EmergencyCard(
            name=user.full_name,
            health_code=user.health_code,
            blood_group=info.blood_group if info else None,
            allergies=list(info.allergies or []) if info else [],
            chronic_diseases=list(info.chronic_diseases or []) if info else [],
            medications=list(info.medications or []) if info else [],
            emergency_contacts=list(info.emergency_contacts or []) if info else [],
            organ_donor=bool(info.organ_donor) if info else False,
        )

    def get_public_card(self, health_code: str) -> PublicEmergencyCard:
        """
        Redacted card for anyone holding the health code.

        Discloses name, blood group, allergies and the first two emergency
        contacts in stored order. Nothing else.
        """
        if not is_valid_health_code(health_code):
            raise ValidationError("Invalid health code format")

        health_id = HealthIdService(self.db).get_by_code(health_code)
        if not health_id:
            raise NotFoundError("Health ID not found")

        user = health_id.user
        info = user.emergency_info
        contacts = list(info.emergency_contacts or []) if info else []

        return PublicEmergencyCard(
            name=user.full_name,
            blood_group=info.blood_group if info else None,
            allergies=list(info.allergies or []) if info else [],
            emergency_contacts=contacts[:PUBLIC_CONTACT_LIMIT],
        )
