"""
Shared pydantic schemas.

Request and response bodies use camelCase on the wire (what the mobile client
sends and expects) and snake_case in Python.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model with camelCase aliases; accepts either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Health Check Schema
class HealthCheck(BaseModel):
    """Health check response schema."""

    status: str = "healthy"
    version: str
    timestamp: datetime = Field(default_factory=datetime.now)


# Error Schema
class ErrorResponse(CamelModel):
    """Error response schema."""

    success: bool = False
    error: str
    detail: Optional[Any] = None
    status_code: int


class MessageResponse(CamelModel):
    """Plain acknowledgement."""

    success: bool = True
    message: str
