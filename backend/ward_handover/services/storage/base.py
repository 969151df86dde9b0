"""Record store interface for Ward Handover.

Both persistence backends (relational and local key-value) implement the
same three stores so the API and views never know which one is active.
Lookups of an unknown id return ``None`` (or ``False`` for discharge and
delete) and leave the store untouched.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date

from ward_handover.schemas.handover import HandoverNote, HandoverNoteCreate, HandoverNoteUpdate
from ward_handover.schemas.hospital_at_night import (
    HospitalAtNightCreate,
    HospitalAtNightEntry,
    HospitalAtNightUpdate,
)
from ward_handover.schemas.patient import Patient, PatientCreate, PatientUpdate


class StorageError(Exception):
    """The backing store could not be read or written."""


class PatientStore(ABC):
    """Patients, ordered by ward then bed number."""

    @abstractmethod
    async def list_all(self, active_only: bool = True) -> list[Patient]:
        """List patients, optionally only those not yet discharged."""

    @abstractmethod
    async def get(self, patient_id: str) -> Patient | None:
        """Get a patient by id."""

    @abstractmethod
    async def create(self, data: PatientCreate) -> Patient:
        """Create an active patient with generated id and timestamps."""

    @abstractmethod
    async def update(self, patient_id: str, changes: PatientUpdate) -> Patient | None:
        """Merge the supplied fields and refresh updated_at."""

    @abstractmethod
    async def discharge(self, patient_id: str) -> bool:
        """Soft delete: mark the patient inactive."""

    @abstractmethod
    async def delete(self, patient_id: str) -> bool:
        """Hard delete the patient with its handover notes and review entries."""

    async def list_by_ward(self, ward: str) -> list[Patient]:
        """Active patients on one ward."""
        return [p for p in await self.list_all(active_only=True) if p.ward == ward]

    async def wards(self) -> list[str]:
        """Distinct wards of active patients, sorted."""
        return sorted({p.ward for p in await self.list_all(active_only=True)})


class HandoverNoteStore(ABC):
    """SBAR handover notes, newest first."""

    @abstractmethod
    async def list_all(self) -> list[HandoverNote]:
        """All notes, newest first."""

    @abstractmethod
    async def list_by_patient(self, patient_id: str) -> list[HandoverNote]:
        """Notes for one patient, newest first."""

    @abstractmethod
    async def list_by_shift_date(self, shift_date: date) -> list[HandoverNote]:
        """Notes written for one shift date, newest first."""

    @abstractmethod
    async def get(self, note_id: str) -> HandoverNote | None:
        """Get a note by id."""

    @abstractmethod
    async def create(self, data: HandoverNoteCreate) -> HandoverNote:
        """Create a note with generated id and created_at."""

    @abstractmethod
    async def update(self, note_id: str, changes: HandoverNoteUpdate) -> HandoverNote | None:
        """Overwrite the SBAR text fields that were supplied."""

    @abstractmethod
    async def delete(self, note_id: str) -> bool:
        """Delete a note."""

    async def latest_for_patient(self, patient_id: str) -> HandoverNote | None:
        """Most recently created note for the patient, if any."""
        notes = await self.list_by_patient(patient_id)
        return notes[0] if notes else None


class HospitalAtNightStore(ABC):
    """Out-of-hours review entries, newest first."""

    @abstractmethod
    async def list_all(self) -> list[HospitalAtNightEntry]:
        """All entries, newest first."""

    @abstractmethod
    async def get(self, entry_id: str) -> HospitalAtNightEntry | None:
        """Get an entry by id."""

    @abstractmethod
    async def create(self, data: HospitalAtNightCreate) -> HospitalAtNightEntry:
        """Create a Pending entry with no comments."""

    @abstractmethod
    async def update(
        self, entry_id: str, changes: HospitalAtNightUpdate
    ) -> HospitalAtNightEntry | None:
        """Merge the supplied fields into the entry."""

    @abstractmethod
    async def delete(self, entry_id: str) -> bool:
        """Delete an entry."""

    async def list_by_patient(self, patient_id: str) -> list[HospitalAtNightEntry]:
        """Entries for one patient, newest first."""
        return [e for e in await self.list_all() if e.patient_id == patient_id]


@dataclass
class Storage:
    """The three stores of one backend."""

    backend: str
    patients: PatientStore
    handover_notes: HandoverNoteStore
    hospital_at_night: HospitalAtNightStore

    async def is_empty(self) -> bool:
        """True when no patient has ever been stored."""
        return not await self.patients.list_all(active_only=False)

    async def mark_seeded(self) -> None:
        """Record that demo data has been written (no-op unless the backend tracks it)."""
        return None

    async def clear(self) -> int:
        """Remove every record; returns the number of patients removed."""
        removed = 0
        for patient in await self.patients.list_all(active_only=False):
            if await self.patients.delete(patient.id):
                removed += 1
        for note in await self.handover_notes.list_all():
            await self.handover_notes.delete(note.id)
        for entry in await self.hospital_at_night.list_all():
            await self.hospital_at_night.delete(entry.id)
        return removed
