"""Local key-value record stores.

The whole dataset lives in a single JSON file holding one key per
collection (the layout a browser's localStorage would use):

    {
        "handover_patients": [...],
        "handover_notes": [...],
        "hospital_at_night": [...],
        "handover_initialized": "true"
    }

Every operation reads the file and every mutation rewrites it. There is
no cross-process coordination; the last writer wins.
"""

import json
from datetime import date
from pathlib import Path
from typing import Any, TypeVar
from uuid import uuid4

import aiofiles
import aiofiles.os
from pydantic import BaseModel

from ward_handover.core.logging import get_logger
from ward_handover.models.base import utcnow
from ward_handover.schemas.handover import HandoverNote, HandoverNoteCreate, HandoverNoteUpdate
from ward_handover.schemas.hospital_at_night import (
    HospitalAtNightCreate,
    HospitalAtNightEntry,
    HospitalAtNightUpdate,
)
from ward_handover.schemas.patient import Patient, PatientCreate, PatientUpdate
from ward_handover.services.storage.base import (
    HandoverNoteStore,
    HospitalAtNightStore,
    PatientStore,
    Storage,
    StorageError,
)

logger = get_logger(__name__)

STORAGE_KEYS = {
    "patients": "handover_patients",
    "handover_notes": "handover_notes",
    "hospital_at_night": "hospital_at_night",
    "initialized": "handover_initialized",
}

ModelT = TypeVar("ModelT", bound=BaseModel)


class JsonKeyValueStore:
    """A small persistent key-value store kept in one JSON file."""

    def __init__(self, path: Path):
        """Initialize the store.

        Args:
            path: JSON file holding every key

        """
        self.path = Path(path)
        self._ready = False

    async def initialize(self) -> None:
        """Create the parent directory."""
        try:
            await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
            self._ready = True
            logger.info("Local storage initialized", path=str(self.path))
        except OSError as e:
            logger.error("Failed to initialize local storage", error=str(e))
            raise StorageError(f"Cannot create storage directory: {self.path.parent}") from e

    def is_ready(self) -> bool:
        """Check if the store has been initialized."""
        return self._ready

    async def _read(self) -> dict[str, Any]:
        if not await aiofiles.os.path.exists(self.path):
            return {}
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                content = await f.read()
        except OSError as e:
            logger.error("Failed to read local storage", path=str(self.path), error=str(e))
            raise StorageError(f"Cannot read {self.path}") from e

        if not content.strip():
            return {}
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error("Local storage is corrupt", path=str(self.path), error=str(e))
            raise StorageError(f"Corrupt storage file: {self.path}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Corrupt storage file: {self.path}")
        return data

    async def _write(self, data: dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(data, indent=2))
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("Failed to save local storage", path=str(self.path), error=str(e))
            raise StorageError(f"Cannot write {self.path}") from e

    async def get(self, key: str, default: Any = None) -> Any:
        """Value stored under ``key``, or ``default``."""
        data = await self._read()
        return data.get(key, default)

    async def set(self, key: str, value: Any) -> None:
        """Store ``value`` (JSON-serialisable) under ``key``."""
        data = await self._read()
        data[key] = value
        await self._write(data)

    async def remove(self, key: str) -> None:
        """Drop ``key`` if present."""
        data = await self._read()
        if key in data:
            del data[key]
            await self._write(data)


class _Collection:
    """A list of records of one schema stored under one key."""

    def __init__(self, kv: JsonKeyValueStore, key: str, model: type[ModelT]):
        self.kv = kv
        self.key = key
        self.model = model

    async def load(self) -> list:
        return [self.model.model_validate(item) for item in await self.kv.get(self.key, [])]

    async def save(self, records: list) -> None:
        # derived values (age, display formats) are recomputed on load, never stored
        exclude = set(self.model.model_computed_fields)
        await self.kv.set(
            self.key,
            [r.model_dump(mode="json", by_alias=True, exclude=exclude) for r in records],
        )


def _find(records: list, record_id: str) -> int:
    for index, record in enumerate(records):
        if record.id == record_id:
            return index
    return -1


class LocalPatientStore(PatientStore):
    """Patients kept under ``handover_patients``."""

    def __init__(self, kv: JsonKeyValueStore):
        self.kv = kv
        self.collection = _Collection(kv, STORAGE_KEYS["patients"], Patient)

    async def list_all(self, active_only: bool = True) -> list[Patient]:
        patients = await self.collection.load()
        if active_only:
            patients = [p for p in patients if p.is_active]
        return sorted(patients, key=lambda p: (p.ward, p.bed_number))

    async def get(self, patient_id: str) -> Patient | None:
        patients = await self.collection.load()
        index = _find(patients, patient_id)
        return patients[index] if index != -1 else None

    async def create(self, data: PatientCreate) -> Patient:
        now = utcnow()
        patient = Patient(
            id=str(uuid4()),
            is_active=True,
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        patients = await self.collection.load()
        patients.append(patient)
        await self.collection.save(patients)
        return patient

    async def update(self, patient_id: str, changes: PatientUpdate) -> Patient | None:
        patients = await self.collection.load()
        index = _find(patients, patient_id)
        if index == -1:
            return None

        patients[index] = patients[index].model_copy(
            update={**changes.changes(), "updated_at": utcnow()}
        )
        await self.collection.save(patients)
        return patients[index]

    async def discharge(self, patient_id: str) -> bool:
        patients = await self.collection.load()
        index = _find(patients, patient_id)
        if index == -1:
            return False

        patients[index] = patients[index].model_copy(
            update={"is_active": False, "updated_at": utcnow()}
        )
        await self.collection.save(patients)
        return True

    async def delete(self, patient_id: str) -> bool:
        patients = await self.collection.load()
        index = _find(patients, patient_id)
        if index == -1:
            return False

        patients.pop(index)
        await self.collection.save(patients)

        notes = _Collection(self.kv, STORAGE_KEYS["handover_notes"], HandoverNote)
        entries = _Collection(self.kv, STORAGE_KEYS["hospital_at_night"], HospitalAtNightEntry)
        remaining_notes = [n for n in await notes.load() if n.patient_id != patient_id]
        remaining_entries = [e for e in await entries.load() if e.patient_id != patient_id]
        await notes.save(remaining_notes)
        await entries.save(remaining_entries)

        logger.info("Patient deleted with dependents", patient_id=patient_id)
        return True


class LocalHandoverNoteStore(HandoverNoteStore):
    """Handover notes kept under ``handover_notes``."""

    def __init__(self, kv: JsonKeyValueStore):
        self.collection = _Collection(kv, STORAGE_KEYS["handover_notes"], HandoverNote)

    async def list_all(self) -> list[HandoverNote]:
        notes = await self.collection.load()
        return sorted(notes, key=lambda n: n.created_at, reverse=True)

    async def list_by_patient(self, patient_id: str) -> list[HandoverNote]:
        return [n for n in await self.list_all() if n.patient_id == patient_id]

    async def list_by_shift_date(self, shift_date: date) -> list[HandoverNote]:
        return [n for n in await self.list_all() if n.shift_date == shift_date]

    async def get(self, note_id: str) -> HandoverNote | None:
        notes = await self.collection.load()
        index = _find(notes, note_id)
        return notes[index] if index != -1 else None

    async def create(self, data: HandoverNoteCreate) -> HandoverNote:
        note = HandoverNote(id=str(uuid4()), created_at=utcnow(), **data.model_dump())
        notes = await self.collection.load()
        notes.append(note)
        await self.collection.save(notes)
        return note

    async def update(self, note_id: str, changes: HandoverNoteUpdate) -> HandoverNote | None:
        notes = await self.collection.load()
        index = _find(notes, note_id)
        if index == -1:
            return None

        notes[index] = notes[index].model_copy(update=changes.changes())
        await self.collection.save(notes)
        return notes[index]

    async def delete(self, note_id: str) -> bool:
        notes = await self.collection.load()
        index = _find(notes, note_id)
        if index == -1:
            return False

        notes.pop(index)
        await self.collection.save(notes)
        return True


class LocalHospitalAtNightStore(HospitalAtNightStore):
    """Review entries kept under ``hospital_at_night``."""

    def __init__(self, kv: JsonKeyValueStore):
        self.collection = _Collection(kv, STORAGE_KEYS["hospital_at_night"], HospitalAtNightEntry)

    async def list_all(self) -> list[HospitalAtNightEntry]:
        entries = await self.collection.load()
        return sorted(entries, key=lambda e: e.created_at, reverse=True)

    async def get(self, entry_id: str) -> HospitalAtNightEntry | None:
        entries = await self.collection.load()
        index = _find(entries, entry_id)
        return entries[index] if index != -1 else None

    async def create(self, data: HospitalAtNightCreate) -> HospitalAtNightEntry:
        entry = HospitalAtNightEntry(
            id=str(uuid4()),
            created_at=utcnow(),
            review_status="Pending",
            status_changed_at=None,
            comments=[],
            **data.model_dump(),
        )
        entries = await self.collection.load()
        entries.append(entry)
        await self.collection.save(entries)
        return entry

    async def update(
        self, entry_id: str, changes: HospitalAtNightUpdate
    ) -> HospitalAtNightEntry | None:
        entries = await self.collection.load()
        index = _find(entries, entry_id)
        if index == -1:
            return None

        entries[index] = entries[index].model_copy(update=changes.changes())
        await self.collection.save(entries)
        return entries[index]

    async def delete(self, entry_id: str) -> bool:
        entries = await self.collection.load()
        index = _find(entries, entry_id)
        if index == -1:
            return False

        entries.pop(index)
        await self.collection.save(entries)
        return True


class LocalStorage(Storage):
    """Local backend; first-run seeding is tracked with an explicit flag."""

    def __init__(self, kv: JsonKeyValueStore):
        super().__init__(
            backend="local",
            patients=LocalPatientStore(kv),
            handover_notes=LocalHandoverNoteStore(kv),
            hospital_at_night=LocalHospitalAtNightStore(kv),
        )
        self.kv = kv

    async def is_empty(self) -> bool:
        return await self.kv.get(STORAGE_KEYS["initialized"]) is None

    async def mark_seeded(self) -> None:
        await self.kv.set(STORAGE_KEYS["initialized"], "true")

    async def clear(self) -> int:
        removed = len(await self.patients.list_all(active_only=False))
        for key in STORAGE_KEYS.values():
            await self.kv.remove(key)
        return removed


def create_local_storage(kv: JsonKeyValueStore) -> LocalStorage:
    """Bind the three local stores to one key-value file."""
    return LocalStorage(kv)
