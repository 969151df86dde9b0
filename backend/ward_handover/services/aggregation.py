"""Board and dashboard views.

Pure functions over in-memory collections: joining review entries and
patients to their latest handover note, filtering, sorting and counting.
Collections are small (a few hundred records at most) so every join is a
straightforward scan, re-run on each request.
"""

import re
from collections.abc import Iterable
from datetime import date
from typing import Literal

from ward_handover.schemas.common import Priority, ReviewRole, ReviewStatus, ReviewType
from ward_handover.schemas.dashboard import (
    DashboardSummary,
    EntryStats,
    HandoverNoteWithPatient,
    PatientWithHandover,
    WardBoard,
)
from ward_handover.schemas.handover import HandoverNote
from ward_handover.schemas.hospital_at_night import HospitalAtNightEntry, HospitalAtNightWithPatient
from ward_handover.schemas.patient import Patient

PRIORITY_ORDER: dict[Priority, int] = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}

SortOption = Literal["priority", "oldest", "newest"]

_NUMBER = re.compile(r"\d+")
_NATURAL_CHUNKS = re.compile(r"(\d+)")


def latest_handover_by_patient(notes: Iterable[HandoverNote]) -> dict[str, HandoverNote]:
    """Most recent note per patient id."""
    latest: dict[str, HandoverNote] = {}
    for note in notes:
        current = latest.get(note.patient_id)
        if current is None or note.created_at > current.created_at:
            latest[note.patient_id] = note
    return latest


def attach_latest_handover(
    patients: Iterable[Patient], notes: Iterable[HandoverNote]
) -> list[PatientWithHandover]:
    latest = latest_handover_by_patient(notes)
    return [
        PatientWithHandover(**dict(p), latest_handover=latest.get(p.id)) for p in patients
    ]


def join_entries(
    entries: Iterable[HospitalAtNightEntry],
    patients: Iterable[Patient],
    notes: Iterable[HandoverNote],
) -> list[HospitalAtNightWithPatient]:
    """Attach each entry's patient and that patient's latest handover note."""
    by_id = {p.id: p for p in patients}
    latest = latest_handover_by_patient(notes)
    joined = []
    for entry in entries:
        patient = by_id.get(entry.patient_id)
        joined.append(
            HospitalAtNightWithPatient(
                **entry.model_dump(),
                patient=patient,
                latest_handover=latest.get(entry.patient_id) if patient else None,
            )
        )
    return joined


def filter_entries(
    entries: Iterable[HospitalAtNightWithPatient],
    roles: Iterable[ReviewRole] = (),
    review_date: date | None = None,
    statuses: Iterable[ReviewStatus] = (),
    wards: Iterable[str] = (),
    review_types: Iterable[ReviewType] = (),
) -> list[HospitalAtNightWithPatient]:
    """Keep entries matching every active filter, preserving their order.

    Empty filters match everything. A role filter matches when any assigned
    role is selected; a date filter when any review date equals it.
    """
    roles = set(roles)
    statuses = set(statuses)
    wards = set(wards)
    review_types = set(review_types)

    def matches(entry: HospitalAtNightWithPatient) -> bool:
        if roles and not roles.intersection(entry.assigned_roles):
            return False
        if review_date and not any(rd.date == review_date for rd in entry.review_dates):
            return False
        if statuses and entry.review_status not in statuses:
            return False
        if wards and (entry.patient is None or entry.patient.ward not in wards):
            return False
        if review_types and (entry.review_type or ReviewType.SCHEDULED) not in review_types:
            return False
        return True

    return [entry for entry in entries if matches(entry)]


def sort_entries(entries: Iterable[HospitalAtNightEntry], option: SortOption = "priority") -> list:
    """Stable sort by priority rank, or by creation time."""
    entries = list(entries)
    if option == "priority":
        return sorted(entries, key=lambda e: PRIORITY_ORDER[e.priority])
    if option == "oldest":
        return sorted(entries, key=lambda e: e.created_at)
    if option == "newest":
        return sorted(entries, key=lambda e: e.created_at, reverse=True)
    return entries


def entry_stats(entries: Iterable[HospitalAtNightEntry]) -> EntryStats:
    entries = list(entries)
    pending = [e for e in entries if e.review_status == ReviewStatus.PENDING]
    return EntryStats(
        total=len(entries),
        pending=len(pending),
        complete=sum(1 for e in entries if e.review_status == ReviewStatus.COMPLETE),
        high_priority_pending=sum(1 for e in pending if e.priority == Priority.HIGH),
        pending_by_role={
            role.value: sum(1 for e in pending if role in e.assigned_roles) for role in ReviewRole
        },
    )


def sort_wards(wards: Iterable[str]) -> list[str]:
    """Numbered wards in numeric order ('Ward 2' before 'Ward 10').

    The rest follow alphabetically, ignoring case.
    """

    def key(ward: str) -> tuple:
        match = _NUMBER.search(ward)
        if match:
            return (0, int(match.group()), ward.casefold(), ward)
        return (1, 0, ward.casefold(), ward)

    return sorted(set(wards), key=key)


def natural_key(value: str) -> list:
    """Sort key comparing embedded numbers numerically ('2B' before '10A')."""
    return [
        int(chunk) if chunk.isdigit() else chunk.lower()
        for chunk in _NATURAL_CHUNKS.split(value)
    ]


def search_patients(
    patients: Iterable[Patient], term: str = "", ward: str | None = None
) -> list[Patient]:
    """Free-text search over name, NHS number and diagnosis, optionally on one ward."""
    needle = term.strip().lower()
    results = []
    for patient in patients:
        if ward and ward != "all" and patient.ward != ward:
            continue
        if needle and not (
            needle in patient.first_name.lower()
            or needle in patient.last_name.lower()
            or needle.replace(" ", "") in patient.nhs_number
            or needle in patient.diagnosis.lower()
        ):
            continue
        results.append(patient)
    return results


def is_high_news(patient: Patient, threshold: int) -> bool:
    return patient.early_warning_score is not None and patient.early_warning_score >= threshold


def ward_board(
    patients: Iterable[Patient],
    notes: Iterable[HandoverNote],
    ward: str,
    beds_per_ward: int,
    high_news_threshold: int,
    high_news_only: bool = False,
) -> WardBoard:
    """Active patients on ``ward`` in bed order, each with their latest note."""
    ward_patients = sorted(
        (p for p in patients if p.ward == ward and p.is_active),
        key=lambda p: natural_key(p.bed_number),
    )
    high_news = [p for p in ward_patients if is_high_news(p, high_news_threshold)]
    shown = high_news if high_news_only else ward_patients
    return WardBoard(
        ward=ward,
        patients=attach_latest_handover(shown, notes),
        occupied_beds=len(ward_patients),
        empty_beds=max(beds_per_ward - len(ward_patients), 0),
        high_news_count=len(high_news),
    )


def dashboard_summary(
    patients: Iterable[Patient],
    notes: Iterable[HandoverNote],
    today: date,
    high_news_threshold: int,
    recent_limit: int = 5,
) -> DashboardSummary:
    patients = list(patients)
    notes = list(notes)
    by_id = {p.id: p for p in patients}

    priority = sorted(
        (p for p in patients if is_high_news(p, high_news_threshold)),
        key=lambda p: p.early_warning_score or 0,
        reverse=True,
    )
    recent = sorted(notes, key=lambda n: n.created_at, reverse=True)[:recent_limit]

    return DashboardSummary(
        total_patients=len(patients),
        high_news_count=len(priority),
        today_handovers=sum(1 for n in notes if n.shift_date == today),
        wards=sort_wards(p.ward for p in patients),
        recent_handovers=[
            HandoverNoteWithPatient(**n.model_dump(), patient=by_id.get(n.patient_id))
            for n in recent
        ],
        priority_patients=priority,
    )
