"""SBAR handover note endpoints."""

from datetime import date
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ward_handover.api.v1.deps import get_storage
from ward_handover.core.logging import audit_logger
from ward_handover.schemas.common import CamelModel
from ward_handover.schemas.handover import HandoverNote, HandoverNoteCreate, HandoverNoteUpdate
from ward_handover.services.storage import Storage

router = APIRouter()


class HandoverListResponse(CamelModel):
    """Handover notes, newest first."""

    handover_notes: list[HandoverNote]


class DeleteResponse(CamelModel):
    success: Literal[True] = True


def _not_found(note_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Handover note not found: {note_id}",
    )


@router.get("", response_model=HandoverListResponse)
async def list_handover_notes(
    storage: Annotated[Storage, Depends(get_storage)],
    patient_id: str | None = Query(None, alias="patientId"),
    shift_date: date | None = Query(None, alias="shiftDate"),
) -> HandoverListResponse:
    """List notes for a patient, a shift date, or all of them."""
    if patient_id:
        notes = await storage.handover_notes.list_by_patient(patient_id)
    elif shift_date:
        notes = await storage.handover_notes.list_by_shift_date(shift_date)
    else:
        notes = await storage.handover_notes.list_all()
    return HandoverListResponse(handover_notes=notes)


@router.post("", response_model=HandoverNote, status_code=status.HTTP_201_CREATED)
async def create_handover_note(
    data: HandoverNoteCreate,
    storage: Annotated[Storage, Depends(get_storage)],
) -> HandoverNote:
    """Write a handover note for an existing patient."""
    if not await storage.patients.get(data.patient_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Patient not found: {data.patient_id}",
        )

    note = await storage.handover_notes.create(data)

    audit_logger.log_access(
        resource_type="handover_note",
        resource_id=note.id,
        action="CREATE",
        actor=note.created_by,
        details={"patient_id": note.patient_id, "shift_type": note.shift_type.value},
    )
    return note


@router.get("/latest/{patient_id}", response_model=HandoverNote | None)
async def get_latest_handover_note(
    patient_id: str,
    storage: Annotated[Storage, Depends(get_storage)],
) -> HandoverNote | None:
    """Most recent note for a patient, or null when none has been written."""
    return await storage.handover_notes.latest_for_patient(patient_id)


@router.get("/{note_id}", response_model=HandoverNote)
async def get_handover_note(
    note_id: str,
    storage: Annotated[Storage, Depends(get_storage)],
) -> HandoverNote:
    note = await storage.handover_notes.get(note_id)
    if not note:
        raise _not_found(note_id)
    return note


@router.put("/{note_id}", response_model=HandoverNote)
async def update_handover_note(
    note_id: str,
    data: HandoverNoteUpdate,
    storage: Annotated[Storage, Depends(get_storage)],
) -> HandoverNote:
    """Edit the SBAR text in place; earlier text is not kept."""
    note = await storage.handover_notes.update(note_id, data)
    if not note:
        raise _not_found(note_id)

    audit_logger.log_access(
        resource_type="handover_note",
        resource_id=note_id,
        action="UPDATE",
        details={"fields": sorted(data.changes())},
    )
    return note


@router.delete("/{note_id}", response_model=DeleteResponse)
async def delete_handover_note(
    note_id: str,
    storage: Annotated[Storage, Depends(get_storage)],
) -> DeleteResponse:
    if not await storage.handover_notes.delete(note_id):
        raise _not_found(note_id)

    audit_logger.log_access(
        resource_type="handover_note",
        resource_id=note_id,
        action="DELETE",
    )
    return DeleteResponse()
