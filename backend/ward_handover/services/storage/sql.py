"""Relational record stores backed by SQLAlchemy (async)."""

import functools
from datetime import date
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ward_handover.core.logging import get_logger
from ward_handover.models.base import utcnow
from ward_handover.models.handover import HandoverNote as HandoverNoteModel
from ward_handover.models.hospital_at_night import HospitalAtNightEntry as HospitalAtNightModel
from ward_handover.models.patient import Patient as PatientModel
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

JSON_COLUMNS = ("review_dates", "assigned_roles", "comments")


def _column_value(name: str, value: Any) -> Any:
    """Convert a schema value into what the ORM column stores."""
    if isinstance(value, Enum):
        return value.value
    if name in JSON_COLUMNS and value is not None:
        return [
            item.model_dump(mode="json", by_alias=True)
            if hasattr(item, "model_dump")
            else (item.value if isinstance(item, Enum) else item)
            for item in value
        ]
    return value


def _column_values(data: dict[str, Any]) -> dict[str, Any]:
    return {name: _column_value(name, value) for name, value in data.items()}


def _translate_errors(method):
    """Surface database failures as StorageError, rolling the session back."""

    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Database operation failed", operation=method.__qualname__, error=str(e)
            )
            raise StorageError(f"Database operation failed: {method.__qualname__}") from e

    return wrapper


def _fields(data: BaseModel) -> dict[str, Any]:
    # nested models kept as models so JSON columns dump them by alias
    return {name: getattr(data, name) for name in type(data).model_fields}


class SqlPatientStore(PatientStore):
    """Patients table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_row(self, patient_id: str) -> PatientModel | None:
        result = await self.db.execute(select(PatientModel).where(PatientModel.id == patient_id))
        return result.scalar_one_or_none()

    @_translate_errors
    async def list_all(self, active_only: bool = True) -> list[Patient]:
        query = select(PatientModel).order_by(PatientModel.ward, PatientModel.bed_number)
        if active_only:
            query = query.where(PatientModel.is_active.is_(True))
        result = await self.db.execute(query)
        return [Patient.model_validate(row) for row in result.scalars().all()]

    @_translate_errors
    async def list_by_ward(self, ward: str) -> list[Patient]:
        result = await self.db.execute(
            select(PatientModel)
            .where(PatientModel.ward == ward, PatientModel.is_active.is_(True))
            .order_by(PatientModel.bed_number)
        )
        return [Patient.model_validate(row) for row in result.scalars().all()]

    @_translate_errors
    async def wards(self) -> list[str]:
        result = await self.db.execute(
            select(PatientModel.ward)
            .where(PatientModel.is_active.is_(True))
            .distinct()
            .order_by(PatientModel.ward)
        )
        return list(result.scalars().all())

    @_translate_errors
    async def get(self, patient_id: str) -> Patient | None:
        row = await self._get_row(patient_id)
        return Patient.model_validate(row) if row else None

    @_translate_errors
    async def create(self, data: PatientCreate) -> Patient:
        now = utcnow()
        row = PatientModel(
            id=str(uuid4()),
            is_active=True,
            created_at=now,
            updated_at=now,
            **_column_values(_fields(data)),
        )
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return Patient.model_validate(row)

    @_translate_errors
    async def update(self, patient_id: str, changes: PatientUpdate) -> Patient | None:
        row = await self._get_row(patient_id)
        if not row:
            return None

        for name, value in _column_values(changes.changes()).items():
            setattr(row, name, value)
        row.updated_at = utcnow()

        await self.db.commit()
        await self.db.refresh(row)
        return Patient.model_validate(row)

    @_translate_errors
    async def discharge(self, patient_id: str) -> bool:
        row = await self._get_row(patient_id)
        if not row:
            return False

        row.is_active = False
        row.updated_at = utcnow()
        await self.db.commit()
        return True

    @_translate_errors
    async def delete(self, patient_id: str) -> bool:
        row = await self._get_row(patient_id)
        if not row:
            return False

        notes = await self.db.execute(
            delete(HandoverNoteModel).where(HandoverNoteModel.patient_id == patient_id)
        )
        entries = await self.db.execute(
            delete(HospitalAtNightModel).where(HospitalAtNightModel.patient_id == patient_id)
        )
        await self.db.delete(row)
        await self.db.commit()

        logger.info(
            "Patient deleted with dependents",
            patient_id=patient_id,
            handover_notes=notes.rowcount,
            hospital_at_night_entries=entries.rowcount,
        )
        return True


class SqlHandoverNoteStore(HandoverNoteStore):
    """Handover notes table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_row(self, note_id: str) -> HandoverNoteModel | None:
        result = await self.db.execute(
            select(HandoverNoteModel).where(HandoverNoteModel.id == note_id)
        )
        return result.scalar_one_or_none()

    async def _list(self, *filters) -> list[HandoverNote]:
        query = select(HandoverNoteModel).order_by(HandoverNoteModel.created_at.desc())
        if filters:
            query = query.where(*filters)
        result = await self.db.execute(query)
        return [HandoverNote.model_validate(row) for row in result.scalars().all()]

    @_translate_errors
    async def list_all(self) -> list[HandoverNote]:
        return await self._list()

    @_translate_errors
    async def list_by_patient(self, patient_id: str) -> list[HandoverNote]:
        return await self._list(HandoverNoteModel.patient_id == patient_id)

    @_translate_errors
    async def list_by_shift_date(self, shift_date: date) -> list[HandoverNote]:
        return await self._list(HandoverNoteModel.shift_date == shift_date)

    @_translate_errors
    async def latest_for_patient(self, patient_id: str) -> HandoverNote | None:
        result = await self.db.execute(
            select(HandoverNoteModel)
            .where(HandoverNoteModel.patient_id == patient_id)
            .order_by(HandoverNoteModel.created_at.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return HandoverNote.model_validate(row) if row else None

    @_translate_errors
    async def get(self, note_id: str) -> HandoverNote | None:
        row = await self._get_row(note_id)
        return HandoverNote.model_validate(row) if row else None

    @_translate_errors
    async def create(self, data: HandoverNoteCreate) -> HandoverNote:
        row = HandoverNoteModel(
            id=str(uuid4()),
            created_at=utcnow(),
            **_column_values(_fields(data)),
        )
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return HandoverNote.model_validate(row)

    @_translate_errors
    async def update(self, note_id: str, changes: HandoverNoteUpdate) -> HandoverNote | None:
        row = await self._get_row(note_id)
        if not row:
            return None

        for name, value in changes.changes().items():
            setattr(row, name, value)

        await self.db.commit()
        await self.db.refresh(row)
        return HandoverNote.model_validate(row)

    @_translate_errors
    async def delete(self, note_id: str) -> bool:
        row = await self._get_row(note_id)
        if not row:
            return False

        await self.db.delete(row)
        await self.db.commit()
        return True


class SqlHospitalAtNightStore(HospitalAtNightStore):
    """Hospital at Night table; review dates and comments are JSON documents."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_row(self, entry_id: str) -> HospitalAtNightModel | None:
        result = await self.db.execute(
            select(HospitalAtNightModel).where(HospitalAtNightModel.id == entry_id)
        )
        return result.scalar_one_or_none()

    async def _list(self, *filters) -> list[HospitalAtNightEntry]:
        query = select(HospitalAtNightModel).order_by(HospitalAtNightModel.created_at.desc())
        if filters:
            query = query.where(*filters)
        result = await self.db.execute(query)
        return [HospitalAtNightEntry.model_validate(row) for row in result.scalars().all()]

    @_translate_errors
    async def list_all(self) -> list[HospitalAtNightEntry]:
        return await self._list()

    @_translate_errors
    async def list_by_patient(self, patient_id: str) -> list[HospitalAtNightEntry]:
        return await self._list(HospitalAtNightModel.patient_id == patient_id)

    @_translate_errors
    async def get(self, entry_id: str) -> HospitalAtNightEntry | None:
        row = await self._get_row(entry_id)
        return HospitalAtNightEntry.model_validate(row) if row else None

    @_translate_errors
    async def create(self, data: HospitalAtNightCreate) -> HospitalAtNightEntry:
        row = HospitalAtNightModel(
            id=str(uuid4()),
            created_at=utcnow(),
            review_status="Pending",
            status_changed_at=None,
            comments=[],
            **_column_values(_fields(data)),
        )
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return HospitalAtNightEntry.model_validate(row)

    @_translate_errors
    async def update(
        self, entry_id: str, changes: HospitalAtNightUpdate
    ) -> HospitalAtNightEntry | None:
        row = await self._get_row(entry_id)
        if not row:
            return None

        # JSON columns are reassigned, never mutated in place
        for name, value in _column_values(changes.changes()).items():
            setattr(row, name, value)

        await self.db.commit()
        await self.db.refresh(row)
        return HospitalAtNightEntry.model_validate(row)

    @_translate_errors
    async def delete(self, entry_id: str) -> bool:
        row = await self._get_row(entry_id)
        if not row:
            return False

        await self.db.delete(row)
        await self.db.commit()
        return True


def create_sql_storage(db: AsyncSession) -> Storage:
    """Bind the three relational stores to one session."""
    return Storage(
        backend="sql",
        patients=SqlPatientStore(db),
        handover_notes=SqlHandoverNoteStore(db),
        hospital_at_night=SqlHospitalAtNightStore(db),
    )
