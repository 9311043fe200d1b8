"""Medical record upload and catalog endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from healthvault.core.config import Settings
from healthvault.core.database import get_db
from healthvault.core.dependencies import (
    get_current_user,
    get_settings_dependency,
    get_storage_service,
)
from healthvault.core.exceptions import NotFoundError, ValidationError
from healthvault.models import RecordType, User
from healthvault.schemas.common import ErrorResponse, MessageResponse
from healthvault.schemas.record import (
    RecordFileUrl,
    RecordResponse,
    RecordTypeCount,
    RecordUpdate,
)
from healthvault.services.record_service import RecordService
from healthvault.services.storage_service import SIGNED_URL_TTL, StorageService
from healthvault.utils.file_utils import (
    format_file_size,
    guess_mime_type,
    is_allowed_file,
    parse_json_field,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/records", tags=["records"])


@router.get("", response_model=List[RecordResponse])
def list_records(
    type: Optional[RecordType] = Query(None, description="Filter by record type"),
    search: Optional[str] = Query(None, max_length=200, description="Title/description text"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The caller's records, newest first."""
    return RecordService(db).list_records(current_user.id, type, search)


@router.get("/by-type", response_model=List[RecordTypeCount])
def records_by_type(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return RecordService(db).count_by_type(current_user.id)


@router.get("/{record_id}", response_model=RecordResponse)
def get_record(
    record_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return RecordService(db).get_record(current_user.id, record_id)


@router.post(
    "",
    response_model=RecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def upload_record(
    file: UploadFile = File(...),
    type: Optional[RecordType] = Form(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    metadata: Optional[str] = Form(None, description="JSON object"),
    tags: Optional[str] = Form(None, description="JSON array of strings"),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings_dependency),
    storage: StorageService = Depends(get_storage_service),
    db: Session = Depends(get_db),
):
    """
    Upload a medical document (PDF or image) and catalog it.

    Flow:
    1. Validate file type, size and the JSON form fields
    2. Store the file (local disk or GCS)
    3. Save the record row
    """
    if not is_allowed_file(file.filename, settings.allowed_extensions):
        raise ValidationError(
            f"File type not allowed. Allowed types: {', '.join(sorted(settings.allowed_extensions))}"
        )

    parsed_metadata = parse_json_field(metadata, "metadata", dict)
    parsed_tags = parse_json_field(tags, "tags", list)
    if parsed_tags is not None and not all(isinstance(t, str) for t in parsed_tags):
        raise ValidationError("tags must be a JSON array of strings")

    file_content = await file.read()
    file_size = len(file_content)
    if file_size == 0:
        raise ValidationError("Uploaded file is empty")

    max_size = settings.max_file_size_mb * 1024 * 1024
    if file_size > max_size:
        raise ValidationError(f"File too large. Maximum size: {settings.max_file_size_mb}MB")

    await file.seek(0)
    upload_result = await storage.save_file(
        file.file, file.filename, folder=f"records/{current_user.id}"
    )
    if not upload_result["success"]:
        raise RuntimeError(f"Failed to store file: {upload_result.get('error')}")

    logger.info(
        "Stored %s (%s) at %s",
        file.filename,
        format_file_size(file_size),
        upload_result["file_path"],
    )

    try:
        return RecordService(db, storage).create_record(
            user_id=current_user.id,
            file_path=upload_result["file_path"],
            file_name=file.filename,
            file_size=file_size,
            mime_type=file.content_type or guess_mime_type(file.filename),
            record_type=type,
            title=title,
            description=description,
            metadata=parsed_metadata,
            tags=parsed_tags,
        )
    except SQLAlchemyError:
        # No row points at the stored file
        await storage.delete_file(upload_result["file_path"])
        raise


@router.put("/{record_id}", response_model=RecordResponse)
def update_record(
    record_id: str,
    body: RecordUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Partial update of title, description, type, metadata and tags."""
    return RecordService(db).update_record(current_user.id, record_id, body)


@router.delete("/{record_id}", response_model=MessageResponse)
async def delete_record(
    record_id: str,
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage_service),
    db: Session = Depends(get_db),
):
    await RecordService(db, storage).delete_record(current_user.id, record_id)
    return MessageResponse(message="Record deleted successfully")


@router.get(
    "/{record_id}/file",
    responses={200: {"model": RecordFileUrl}, 404: {"model": ErrorResponse}},
)
def get_record_file(
    record_id: str,
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(get_storage_service),
    db: Session = Depends(get_db),
):
    """
    Owner-only file access.

    Local storage streams the file; GCS returns a signed URL valid for 1 hour.
    """
    record = RecordService(db).get_record(current_user.id, record_id)

    if storage.mode == "gcs":
        return RecordFileUrl(
            url=storage.get_signed_url(record.file_url),
            expires_in=int(SIGNED_URL_TTL.total_seconds()),
        )

    path = storage.local_path(record.file_url)
    if not path.exists():
        raise NotFoundError("File not found")
    return FileResponse(path, media_type=record.mime_type, filename=record.file_name)
