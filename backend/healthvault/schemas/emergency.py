"""
Emergency info schemas: stored profile, partial update, full and public cards.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from healthvault.models.emergency import BloodGroup
from healthvault.schemas.common import CamelModel


class EmergencyContact(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=3, max_length=30)
    relation: Optional[str] = Field(None, max_length=50)


def _clean_strings(values: List[str]) -> List[str]:
    """Strip entries and drop blanks, keeping order."""
    return [v.strip() for v in values if v and v.strip()]


class EmergencyInfoUpdate(CamelModel):
    """
    Partial update. A field left out of the request body keeps its stored
    value; a field sent as null clears it (lists clear to empty).
    """

    blood_group: Optional[BloodGroup] = None
    allergies: Optional[List[str]] = None
    chronic_diseases: Optional[List[str]] = None
    medications: Optional[List[str]] = None
    emergency_contacts: Optional[List[EmergencyContact]] = None
    organ_donor: Optional[bool] = None

    @field_validator("allergies", "chronic_diseases", "medications")
    @classmethod
    def clean_lists(cls, v):
        return _clean_strings(v) if v is not None else v


class EmergencyInfoResponse(CamelModel):
    blood_group: Optional[str] = None
    allergies: List[str] = []
    chronic_diseases: List[str] = []
    medications: List[str] = []
    emergency_contacts: List[EmergencyContact] = []
    organ_donor: bool = False
    updated_at: Optional[datetime] = None

    @field_validator(
        "allergies", "chronic_diseases", "medications", "emergency_contacts",
        mode="before",
    )
    @classmethod
    def none_as_empty(cls, v):
        return v or []


class EmergencyCard(CamelModel):
    """Full card, shown to the authenticated owner."""

    name: str
    health_code: Optional[str] = None
    blood_group: Optional[str] = None
    allergies: List[str] = []
    chronic_diseases: List[str] = []
    medications: List[str] = []
    emergency_contacts: List[EmergencyContact] = []
    organ_donor: bool = False


class PublicEmergencyCard(CamelModel):
    """
    Redacted card served to anyone holding the health code.

    Deliberately has no chronic diseases, medications or organ-donor field,
    and carries at most two contacts.
    """

    name: str
    blood_group: Optional[str] = None
    allergies: List[str] = []
    emergency_contacts: List[EmergencyContact] = Field(default_factory=list, max_length=2)
