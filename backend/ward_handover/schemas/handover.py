"""Handover note schemas."""

from datetime import date, datetime

from pydantic import field_validator

from ward_handover.schemas.common import CamelModel, ShiftType, require_text

SBAR_FIELDS = ("situation", "background", "assessment", "recommendation")


class HandoverNoteCreate(CamelModel):
    """New SBAR note. The store assigns id and created_at."""

    patient_id: str
    created_by: str
    shift_date: date
    shift_type: ShiftType
    situation: str
    background: str
    assessment: str
    recommendation: str

    @field_validator("patient_id", "created_by", *SBAR_FIELDS)
    @classmethod
    def check_required_text(cls, v: str, info) -> str:
        return require_text(v, info.field_name)


class HandoverNoteUpdate(CamelModel):
    """Edit of the SBAR text. Author, shift and patient are fixed once written."""

    situation: str | None = None
    background: str | None = None
    assessment: str | None = None
    recommendation: str | None = None

    @field_validator(*SBAR_FIELDS)
    @classmethod
    def check_required_text(cls, v: str | None, info) -> str | None:
        return require_text(v, info.field_name)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class HandoverNote(CamelModel):
    """Stored SBAR handover note."""

    id: str
    patient_id: str
    created_by: str
    created_at: datetime
    shift_date: date
    shift_type: ShiftType
    situation: str
    background: str
    assessment: str
    recommendation: str
