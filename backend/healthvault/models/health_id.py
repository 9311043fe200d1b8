"""Health identifier model."""

from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, new_id


class HealthIdentifier(Base):
    """Public, shareable code bound to one verified user. Immutable once created."""

    __tablename__ = "health_ids"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    health_code = Column(String(20), nullable=False, unique=True, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="health_id")
