"""User model."""

from sqlalchemy import Column, String, Boolean, Date
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, new_id


class User(Base, TimestampMixin):
    """Account holder. Email is stored lower-cased and is unique."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)

    # Flipped to True once, by email verification
    is_verified = Column(Boolean, nullable=False, default=False)

    # Profile
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String, nullable=True)
    profile_image = Column(String, nullable=True)

    # Relationships
    health_id = relationship(
        "HealthIdentifier",
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False,
    )
    emergency_info = relationship(
        "EmergencyInfo",
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False,
    )
    one_time_codes = relationship(
        "OneTimeCode", back_populates="user", cascade="all, delete-orphan"
    )
    records = relationship(
        "MedicalRecord", back_populates="user", cascade="all, delete-orphan"
    )
    reminders = relationship(
        "Reminder", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def health_code(self):
        return self.health_id.health_code if self.health_id else None
