"""Board and dashboard view schemas."""

from pydantic import Field

from ward_handover.schemas.common import CamelModel
from ward_handover.schemas.handover import HandoverNote
from ward_handover.schemas.hospital_at_night import HospitalAtNightWithPatient
from ward_handover.schemas.patient import Patient


class PatientWithHandover(Patient):
    """Patient with the latest SBAR note, if any."""

    latest_handover: HandoverNote | None = None


class HandoverNoteWithPatient(HandoverNote):
    """Handover note with the patient it was written for."""

    patient: Patient | None = None


class WardBoard(CamelModel):
    """One ward's handover board."""

    ward: str
    patients: list[PatientWithHandover]
    occupied_beds: int
    empty_beds: int
    high_news_count: int


class DashboardSummary(CamelModel):
    """Home page counts over active patients."""

    total_patients: int
    high_news_count: int
    today_handovers: int
    wards: list[str]
    recent_handovers: list[HandoverNoteWithPatient]
    priority_patients: list[Patient]


class EntryStats(CamelModel):
    """Counts shown above the out-of-hours dashboard."""

    total: int = 0
    pending: int = 0
    complete: int = 0
    high_priority_pending: int = 0
    pending_by_role: dict[str, int] = Field(default_factory=dict)


class HospitalAtNightDashboard(CamelModel):
    """Filtered, sorted review entries with stats over the unfiltered set."""

    entries: list[HospitalAtNightWithPatient]
    stats: EntryStats
    wards: list[str]
    filtered_count: int
