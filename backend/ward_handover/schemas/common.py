"""Shared schema base and enumerations."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ResuscitationStatus(str, Enum):
    """Resuscitation directive."""

    FULL = "Full"
    DNACPR = "DNACPR"
    NOT_DISCUSSED = "Not Discussed"


class ShiftType(str, Enum):
    """Nursing shift types."""

    DAY = "Day"
    NIGHT = "Night"
    LONG_DAY = "Long Day"


class Priority(str, Enum):
    """Hospital at Night review priority."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class ReviewRole(str, Enum):
    """Clinician roles a review can be assigned to."""

    FY1 = "FY1"
    SHO = "SHO"
    SPR = "SpR"
    DISCHARGE = "Discharge"
    NURSE = "Nurse"


class ReviewStatus(str, Enum):
    """Overall review status."""

    PENDING = "Pending"
    COMPLETE = "Complete"


class ReviewType(str, Enum):
    """Whether the review was planned ahead or raised during the night."""

    SCHEDULED = "Scheduled"
    AD_HOC = "Ad-hoc"


class Specialty(str, Enum):
    """Admitting specialty."""

    MEDICINE = "Medicine"
    TRAUMA_ORTHOPAEDICS = "T+O"
    GENERAL_SURGERY = "General Surgery"


def require_text(value: str | None, field_name: str) -> str | None:
    """Strip surrounding whitespace and reject blank strings."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError(f"{field_name} is required")
    return value
