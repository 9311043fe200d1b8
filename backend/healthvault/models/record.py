"""Medical record model."""

import enum

from sqlalchemy import Column, String, Integer, Text, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, new_id


class RecordType(str, enum.Enum):
    PRESCRIPTION = "PRESCRIPTION"
    LAB_REPORT = "LAB_REPORT"
    VACCINATION = "VACCINATION"
    SCAN_XRAY = "SCAN_XRAY"
    DISCHARGE_SUMMARY = "DISCHARGE_SUMMARY"
    BILL_INVOICE = "BILL_INVOICE"
    OTHER = "OTHER"


class MedicalRecord(Base, TimestampMixin):
    """Uploaded medical document owned by a user."""

    __tablename__ = "medical_records"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    type = Column(String, nullable=False, default=RecordType.OTHER.value)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    # Stored file
    file_url = Column(String, nullable=False)  # storage path, local or gcs
    file_name = Column(String, nullable=False)  # original filename
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String, nullable=False)

    # "metadata" is reserved on declarative classes
    record_metadata = Column("metadata", JSON, nullable=False, default=dict)
    tags = Column(JSON, nullable=False, default=list)

    # Relationships
    user = relationship("User", back_populates="records")

    __table_args__ = (
        Index("idx_record_user_id", "user_id"),
        Index("idx_record_type", "type"),
    )
