"""Health identifier schemas."""

from datetime import datetime
from typing import Optional

from healthvault.schemas.common import CamelModel


class HealthIdResponse(CamelModel):
    health_code: str
    created_at: datetime


class HealthIdOwner(CamelModel):
    first_name: str
    last_name: str
    blood_group: Optional[str] = None


class HealthIdQrResponse(CamelModel):
    health_code: str
    # JSON string for the client to render as a QR image
    qr_data: str
    user: HealthIdOwner
