"""Pydantic schemas shared by the stores, services and API."""

from ward_handover.schemas.common import (
    Priority,
    ResuscitationStatus,
    ReviewRole,
    ReviewStatus,
    ReviewType,
    ShiftType,
    Specialty,
)
from ward_handover.schemas.handover import HandoverNote, HandoverNoteCreate, HandoverNoteUpdate
from ward_handover.schemas.hospital_at_night import (
    Comment,
    CommentCreate,
    HospitalAtNightCreate,
    HospitalAtNightEntry,
    HospitalAtNightUpdate,
    HospitalAtNightWithPatient,
    ReviewDate,
    StatusChangeRequest,
)
from ward_handover.schemas.patient import Patient, PatientCreate, PatientUpdate

__all__ = [
    "Comment",
    "CommentCreate",
    "HandoverNote",
    "HandoverNoteCreate",
    "HandoverNoteUpdate",
    "HospitalAtNightCreate",
    "HospitalAtNightEntry",
    "HospitalAtNightUpdate",
    "HospitalAtNightWithPatient",
    "Patient",
    "PatientCreate",
    "PatientUpdate",
    "Priority",
    "ResuscitationStatus",
    "ReviewDate",
    "ReviewRole",
    "ReviewStatus",
    "ReviewType",
    "ShiftType",
    "Specialty",
    "StatusChangeRequest",
]
