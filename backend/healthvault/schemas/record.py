"""Medical record schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from healthvault.models.record import RecordType
from healthvault.schemas.common import CamelModel


class RecordUpdate(CamelModel):
    """Partial update; omitted fields are left unchanged."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    type: Optional[RecordType] = None
    metadata: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None


class RecordResponse(CamelModel):
    id: str
    type: str
    title: str
    description: Optional[str] = None
    file_url: str
    file_name: str
    file_size: int
    mime_type: str
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="record_metadata")
    tags: List[str] = []
    created_at: datetime
    updated_at: datetime


class RecordTypeCount(CamelModel):
    type: str
    count: int


class RecordFileUrl(CamelModel):
    url: str
    expires_in: int
