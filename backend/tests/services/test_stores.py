"""
Tests for the record stores, run against both backends.

These tests verify:
1. Patients are listed by ward and bed, and discharge is a soft delete
2. Deleting a patient removes its notes and review entries
3. Partial updates merge, unknown ids leave the store untouched
4. Review entries round-trip their nested dates and comments
"""

from datetime import date, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from ward_handover.models.base import utcnow
from ward_handover.schemas.handover import HandoverNoteCreate, HandoverNoteUpdate
from ward_handover.schemas.hospital_at_night import HospitalAtNightCreate, HospitalAtNightUpdate
from ward_handover.schemas.patient import PatientCreate, PatientUpdate
from ward_handover.services.review_status import add_comment, complete_today_only
from ward_handover.services.storage import Storage, StorageError, create_sql_storage

TODAY = date(2025, 1, 20)


def new_patient(**overrides) -> PatientCreate:
    data = {
        "nhs_number": "1234567890",
        "first_name": "John",
        "last_name": "Smith",
        "date_of_birth": date(1955, 3, 15),
        "ward": "Ward 1",
        "bed_number": "1A",
        "consultant": "Dr. Williams",
        "admission_date": date(2025, 1, 15),
        "diagnosis": "Pneumonia",
    }
    data.update(overrides)
    return PatientCreate(**data)


def new_note(patient_id: str, **overrides) -> HandoverNoteCreate:
    data = {
        "patient_id": patient_id,
        "created_by": "Nurse Adams",
        "shift_date": TODAY,
        "shift_type": "Day",
        "situation": "S",
        "background": "B",
        "assessment": "A",
        "recommendation": "R",
    }
    data.update(overrides)
    return HandoverNoteCreate(**data)


def new_entry(patient_id: str, **overrides) -> HospitalAtNightCreate:
    data = {
        "patient_id": patient_id,
        "review_dates": [{"date": TODAY - timedelta(days=1)}, {"date": TODAY + timedelta(days=1)}],
        "priority": "High",
        "assigned_roles": ["SpR"],
        "reason_for_review": "Senior review",
        "specialty": "Medicine",
    }
    data.update(overrides)
    return HospitalAtNightCreate(**data)


class TestPatientStore:
    """Tests for patient persistence."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, storage: Storage):
        created = await storage.patients.create(new_patient(early_warning_score=4))

        fetched = await storage.patients.get(created.id)

        assert fetched.model_dump() == created.model_dump()
        assert fetched.is_active is True
        assert fetched.early_warning_score == 4
        assert fetched.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_list_ordered_by_ward_then_bed(self, storage: Storage):
        await storage.patients.create(new_patient(ward="Ward 2", bed_number="1A"))
        await storage.patients.create(new_patient(ward="Ward 1", bed_number="3A"))
        await storage.patients.create(new_patient(ward="Ward 1", bed_number="1B"))

        patients = await storage.patients.list_all()

        assert [(p.ward, p.bed_number) for p in patients] == [
            ("Ward 1", "1B"),
            ("Ward 1", "3A"),
            ("Ward 2", "1A"),
        ]
        assert await storage.patients.wards() == ["Ward 1", "Ward 2"]
        assert [p.bed_number for p in await storage.patients.list_by_ward("Ward 1")] == ["1B", "3A"]

    @pytest.mark.asyncio
    async def test_update_merges_and_refreshes_updated_at(self, storage: Storage):
        created = await storage.patients.create(new_patient())

        updated = await storage.patients.update(
            created.id, PatientUpdate(bed_number="9Z", early_warning_score=7)
        )

        assert updated.bed_number == "9Z"
        assert updated.early_warning_score == 7
        assert updated.first_name == created.first_name
        assert updated.updated_at >= created.updated_at
        assert await storage.patients.update("missing", PatientUpdate(ward="X")) is None

    @pytest.mark.asyncio
    async def test_discharge_is_soft_and_idempotent(self, storage: Storage):
        created = await storage.patients.create(new_patient())

        assert await storage.patients.discharge(created.id) is True
        assert await storage.patients.discharge(created.id) is True
        assert await storage.patients.discharge("missing") is False

        assert await storage.patients.list_all() == []
        everyone = await storage.patients.list_all(active_only=False)
        assert [p.is_active for p in everyone] == [False]
        assert await storage.patients.wards() == []

    @pytest.mark.asyncio
    async def test_delete_cascades_to_notes_and_entries(self, storage: Storage):
        kept = await storage.patients.create(new_patient(nhs_number="9999999999"))
        doomed = await storage.patients.create(new_patient())
        await storage.handover_notes.create(new_note(doomed.id))
        await storage.handover_notes.create(new_note(kept.id))
        await storage.hospital_at_night.create(new_entry(doomed.id))

        assert await storage.patients.delete(doomed.id) is True

        assert await storage.patients.get(doomed.id) is None
        assert await storage.handover_notes.list_by_patient(doomed.id) == []
        assert await storage.hospital_at_night.list_by_patient(doomed.id) == []
        assert len(await storage.handover_notes.list_all()) == 1
        assert await storage.patients.delete(doomed.id) is False


class TestHandoverNoteStore:
    """Tests for handover note persistence."""

    @pytest.mark.asyncio
    async def test_latest_and_ordering(self, storage: Storage):
        patient = await storage.patients.create(new_patient())
        assert await storage.handover_notes.latest_for_patient(patient.id) is None

        first = await storage.handover_notes.create(new_note(patient.id, situation="first"))
        second = await storage.handover_notes.create(
            new_note(patient.id, situation="second", shift_date=TODAY - timedelta(days=1))
        )

        assert (await storage.handover_notes.latest_for_patient(patient.id)).id == second.id
        assert [n.id for n in await storage.handover_notes.list_all()] == [second.id, first.id]
        by_date = await storage.handover_notes.list_by_shift_date(TODAY)
        assert [n.id for n in by_date] == [first.id]

    @pytest.mark.asyncio
    async def test_update_only_text(self, storage: Storage):
        patient = await storage.patients.create(new_patient())
        note = await storage.handover_notes.create(new_note(patient.id))

        updated = await storage.handover_notes.update(
            note.id, HandoverNoteUpdate(recommendation="Discharge tomorrow")
        )

        assert updated.recommendation == "Discharge tomorrow"
        assert updated.situation == note.situation
        assert updated.created_at == note.created_at
        assert await storage.handover_notes.update("missing", HandoverNoteUpdate()) is None
        assert await storage.handover_notes.delete(note.id) is True
        assert await storage.handover_notes.get(note.id) is None


class TestHospitalAtNightStore:
    """Tests for review entry persistence."""

    @pytest.mark.asyncio
    async def test_create_defaults(self, storage: Storage):
        patient = await storage.patients.create(new_patient())

        entry = await storage.hospital_at_night.create(new_entry(patient.id))

        assert entry.review_status.value == "Pending"
        assert entry.status_changed_at is None
        assert entry.comments == []
        assert entry.created_by == "Unknown"
        assert (await storage.hospital_at_night.get(entry.id)).model_dump() == entry.model_dump()

    @pytest.mark.asyncio
    async def test_status_and_comments_round_trip(self, storage: Storage):
        patient = await storage.patients.create(new_patient())
        entry = await storage.hospital_at_night.create(new_entry(patient.id))
        now = utcnow()

        entry = await storage.hospital_at_night.update(
            entry.id, complete_today_only(entry, today=TODAY, now=now)
        )
        entry = await storage.hospital_at_night.update(
            entry.id, add_comment(entry, "Seen at 02:00", "Dr. Okafor", now=now)
        )

        fetched = await storage.hospital_at_night.get(entry.id)
        assert fetched.review_dates[0].completed_at == now
        assert fetched.review_dates[1].completed_at is None
        assert fetched.review_status.value == "Pending"
        assert [c.text for c in fetched.comments] == ["Seen at 02:00"]
        assert fetched.comments[0].created_at == now

    @pytest.mark.asyncio
    async def test_update_clears_status_changed_at(self, storage: Storage):
        patient = await storage.patients.create(new_patient())
        entry = await storage.hospital_at_night.create(new_entry(patient.id))
        await storage.hospital_at_night.update(
            entry.id,
            HospitalAtNightUpdate(review_status="Complete", status_changed_at=utcnow()),
        )

        reopened = await storage.hospital_at_night.update(
            entry.id, HospitalAtNightUpdate(review_status="Pending", status_changed_at=None)
        )

        assert reopened.status_changed_at is None
        assert reopened.review_status.value == "Pending"
        assert reopened.priority.value == "High"
        assert await storage.hospital_at_night.update("missing", HospitalAtNightUpdate()) is None
        assert await storage.hospital_at_night.delete("missing") is False


class TestSqlStoreErrors:
    """Database failures surface as StorageError, like the local backend."""

    @pytest.mark.asyncio
    async def test_missing_tables_raise_storage_error(self, tmp_path):
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        try:
            async with AsyncSession(engine, expire_on_commit=False) as session:
                storage = create_sql_storage(session)

                with pytest.raises(StorageError):
                    await storage.patients.list_all()
                with pytest.raises(StorageError):
                    await storage.handover_notes.create(new_note("p1"))
        finally:
            await engine.dispose()
