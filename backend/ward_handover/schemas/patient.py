"""Patient schemas."""

import re
from datetime import date, datetime, timezone

from pydantic import Field, computed_field, field_validator

from ward_handover.schemas.common import CamelModel, ResuscitationStatus, require_text

NHS_NUMBER_PATTERN = re.compile(r"^\d{10}$")

REQUIRED_TEXT_FIELDS = ("first_name", "last_name", "ward", "bed_number", "consultant", "diagnosis")


def normalize_nhs_number(nhs_number: str) -> str:
    """Remove all whitespace from an NHS number."""
    return re.sub(r"\s", "", nhs_number)


def validate_nhs_number(nhs_number: str) -> bool:
    """Check the NHS number is exactly 10 digits once whitespace is removed."""
    return bool(NHS_NUMBER_PATTERN.match(normalize_nhs_number(nhs_number)))


def format_nhs_number(nhs_number: str) -> str:
    """Format as '123 4567 890'; anything that is not 10 digits is returned unchanged."""
    cleaned = normalize_nhs_number(nhs_number)
    if len(cleaned) != 10:
        return nhs_number
    return f"{cleaned[:3]} {cleaned[3:7]} {cleaned[7:]}"


def _check_nhs_number(value: str | None) -> str | None:
    if value is None:
        return None
    if not validate_nhs_number(value):
        raise ValueError("NHS number must be 10 digits")
    return normalize_nhs_number(value)


class PatientCreate(CamelModel):
    """Create (or fully replace) a patient."""

    nhs_number: str
    first_name: str
    last_name: str
    date_of_birth: date
    ward: str
    bed_number: str
    consultant: str
    admission_date: date
    diagnosis: str
    allergies: str = ""
    resuscitation_status: ResuscitationStatus = ResuscitationStatus.NOT_DISCUSSED
    early_warning_score: int | None = Field(None, ge=0, le=20)

    @field_validator("nhs_number")
    @classmethod
    def check_nhs_number(cls, v: str) -> str:
        return _check_nhs_number(v)

    @field_validator(*REQUIRED_TEXT_FIELDS)
    @classmethod
    def check_required_text(cls, v: str, info) -> str:
        return require_text(v, info.field_name)

    @field_validator("allergies", mode="before")
    @classmethod
    def default_allergies(cls, v: str | None) -> str:
        return v or ""


class PatientUpdate(CamelModel):
    """Partial patient update; only fields that are set are merged."""

    nhs_number: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    date_of_birth: date | None = None
    ward: str | None = None
    bed_number: str | None = None
    consultant: str | None = None
    admission_date: date | None = None
    diagnosis: str | None = None
    allergies: str | None = None
    resuscitation_status: ResuscitationStatus | None = None
    early_warning_score: int | None = Field(None, ge=0, le=20)

    @field_validator("nhs_number")
    @classmethod
    def check_nhs_number(cls, v: str | None) -> str | None:
        return _check_nhs_number(v)

    @field_validator(*REQUIRED_TEXT_FIELDS)
    @classmethod
    def check_required_text(cls, v: str | None, info) -> str | None:
        return require_text(v, info.field_name)

    def changes(self) -> dict:
        """Fields explicitly supplied by the caller, None values for nullable columns kept."""
        data = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in data.items()
            if value is not None or key == "early_warning_score"
        }


class Patient(CamelModel):
    """Stored patient record."""

    id: str
    nhs_number: str
    first_name: str
    last_name: str
    date_of_birth: date
    ward: str
    bed_number: str
    consultant: str
    admission_date: date
    diagnosis: str
    allergies: str = ""
    resuscitation_status: ResuscitationStatus = ResuscitationStatus.NOT_DISCUSSED
    early_warning_score: int | None = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    @computed_field(alias="fullName")
    @property
    def full_name(self) -> str:
        return f"{self.last_name}, {self.first_name}"

    @computed_field(alias="age")
    @property
    def age(self) -> int:
        return calculate_age(self.date_of_birth)

    @computed_field(alias="newsBand")
    @property
    def news_band(self) -> str:
        return news_band(self.early_warning_score)

    @computed_field(alias="formattedNhsNumber")
    @property
    def formatted_nhs_number(self) -> str:
        return format_nhs_number(self.nhs_number)


def calculate_age(date_of_birth: date, today: date | None = None) -> int:
    """Age in whole years on ``today`` (the UTC date by default)."""
    today = today or datetime.now(timezone.utc).date()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def news_band(score: int | None) -> str:
    """Early warning score band used for colour coding."""
    if score is None:
        return "none"
    if score <= 4:
        return "low"
    if score <= 6:
        return "medium"
    return "high"
