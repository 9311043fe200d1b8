"""Medical record catalog: upload, listing, search and edits."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from healthvault.core.exceptions import NotFoundError
from healthvault.models import MedicalRecord, RecordType
from healthvault.schemas.record import RecordTypeCount, RecordUpdate
from healthvault.services.storage_service import StorageService

logger = logging.getLogger(__name__)


class RecordService:
    """Owner-scoped CRUD over medical records."""

    def __init__(self, db: Session, storage: Optional[StorageService] = None):
        self.db = db
        self.storage = storage

    def list_records(
        self,
        user_id: str,
        record_type: Optional[RecordType] = None,
        search: Optional[str] = None,
    ) -> List[MedicalRecord]:
        """Records newest first, optionally filtered by type and a text search."""
        query = self.db.query(MedicalRecord).filter(MedicalRecord.user_id == user_id)
        if record_type:
            query = query.filter(MedicalRecord.type == record_type.value)
        if search:
            pattern = f"%{_escape_like(search.strip())}%"
            query = query.filter(
                or_(
                    MedicalRecord.title.ilike(pattern, escape="\\"),
                    MedicalRecord.description.ilike(pattern, escape="\\"),
                )
            )
        return query.order_by(desc(MedicalRecord.created_at)).all()

    def get_record(self, user_id: str, record_id: str) -> MedicalRecord:
        record = (
            self.db.query(MedicalRecord)
            .filter(MedicalRecord.id == record_id, MedicalRecord.user_id == user_id)
            .first()
        )
        if not record:
            raise NotFoundError("Record not found")
        return record

    def count_by_type(self, user_id: str) -> List[RecordTypeCount]:
        rows = (
            self.db.query(MedicalRecord.type, func.count(MedicalRecord.id))
            .filter(MedicalRecord.user_id == user_id)
            .group_by(MedicalRecord.type)
            .order_by(MedicalRecord.type)
            .all()
        )
        return [RecordTypeCount(type=row[0], count=row[1]) for row in rows]

    def create_record(
        self,
        user_id: str,
        file_path: str,
        file_name: str,
        file_size: int,
        mime_type: str,
        record_type: Optional[RecordType] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        tags: Optional[List[str]] = None,
    ) -> MedicalRecord:
        """Create the catalog row for a file that is already stored."""
        record = MedicalRecord(
            user_id=user_id,
            type=(record_type or RecordType.OTHER).value,
            title=(title or "").strip() or file_name,
            description=description,
            file_url=file_path,
            file_name=file_name,
            file_size=file_size,
            mime_type=mime_type,
            record_metadata=metadata or {},
            tags=tags or [],
        )
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to save record for user %s", user_id)
            raise

        logger.info("Created record %s (%s) for user %s", record.id, record.type, user_id)
        return record

    def update_record(
        self, user_id: str, record_id: str, changes: RecordUpdate
    ) -> MedicalRecord:
        """Apply only the fields present in ``changes``."""
        record = self.get_record(user_id, record_id)
        fields = changes.model_dump(exclude_unset=True, mode="json")

        try:
            for name, value in fields.items():
                if name == "metadata":
                    record.record_metadata = dict(value or {})
                elif name == "tags":
                    record.tags = list(value or [])
                elif name in ("title", "type"):
                    # Required columns; null means "leave as is"
                    if value:
                        setattr(record, name, value)
                else:
                    setattr(record, name, value)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to update record %s", record_id)
            raise
        return record

    async def delete_record(self, user_id: str, record_id: str) -> None:
        """Delete the row, then the stored file."""
        record = self.get_record(user_id, record_id)
        file_path = record.file_url

        try:
            self.db.delete(record)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to delete record %s", record_id)
            raise

        if self.storage and not await self.storage.delete_file(file_path):
            logger.warning("Stored file %s for record %s was not removed", file_path, record_id)


def _escape_like(text: str) -> str:
    """Make ``%`` and ``_`` in user input match literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
