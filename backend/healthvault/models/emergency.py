"""Emergency medical information model."""

import enum

from sqlalchemy import Column, String, Boolean, ForeignKey, JSON
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, new_id


class BloodGroup(str, enum.Enum):
    A_POSITIVE = "A+"
    A_NEGATIVE = "A-"
    B_POSITIVE = "B+"
    B_NEGATIVE = "B-"
    AB_POSITIVE = "AB+"
    AB_NEGATIVE = "AB-"
    O_POSITIVE = "O+"
    O_NEGATIVE = "O-"


class EmergencyInfo(Base, TimestampMixin):
    """
    Medical summary used in emergencies, one row per user.

    List columns are JSON arrays and are always replaced wholesale on update,
    never mutated in place. ``emergency_contacts`` holds
    ``{"name", "phone", "relation"}`` objects in the order the user gave them.
    """

    __tablename__ = "emergency_info"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    blood_group = Column(String(3), nullable=True)  # BloodGroup value
    allergies = Column(JSON, nullable=False, default=list)
    chronic_diseases = Column(JSON, nullable=False, default=list)
    medications = Column(JSON, nullable=False, default=list)
    emergency_contacts = Column(JSON, nullable=False, default=list)
    organ_donor = Column(Boolean, nullable=False, default=False)

    # Relationships
    user = relationship("User", back_populates="emergency_info")
