"""Hospital at Night (out-of-hours review) endpoints."""

from datetime import date
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ward_handover.api.v1.deps import get_storage
from ward_handover.core.logging import audit_logger
from ward_handover.schemas.common import CamelModel, ReviewRole, ReviewStatus, ReviewType
from ward_handover.schemas.dashboard import HospitalAtNightDashboard
from ward_handover.schemas.hospital_at_night import (
    CommentCreate,
    HospitalAtNightCreate,
    HospitalAtNightEntry,
    HospitalAtNightUpdate,
    HospitalAtNightWithPatient,
    StatusChangeRequest,
)
from ward_handover.services.aggregation import (
    SortOption,
    entry_stats,
    filter_entries,
    join_entries,
    sort_entries,
    sort_wards,
)
from ward_handover.services.review_status import add_comment, change_status
from ward_handover.services.storage import Storage

router = APIRouter()


class EntryListResponse(CamelModel):
    """Review entries joined with patient and latest handover."""

    entries: list[HospitalAtNightWithPatient]


class DeleteResponse(CamelModel):
    success: Literal[True] = True


def _not_found(entry_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Hospital at Night entry not found: {entry_id}",
    )


async def _get_entry(storage: Storage, entry_id: str) -> HospitalAtNightEntry:
    entry = await storage.hospital_at_night.get(entry_id)
    if not entry:
        raise _not_found(entry_id)
    return entry


@router.get("", response_model=EntryListResponse)
async def list_entries(
    storage: Annotated[Storage, Depends(get_storage)],
    patient_id: str | None = Query(None, alias="patientId"),
) -> EntryListResponse:
    """List review entries, newest first, optionally for one patient."""
    if patient_id:
        entries = await storage.hospital_at_night.list_by_patient(patient_id)
    else:
        entries = await storage.hospital_at_night.list_all()

    patients = await storage.patients.list_all(active_only=False)
    notes = await storage.handover_notes.list_all()
    return EntryListResponse(entries=join_entries(entries, patients, notes))


@router.post("", response_model=HospitalAtNightEntry, status_code=status.HTTP_201_CREATED)
async def create_entry(
    data: HospitalAtNightCreate,
    storage: Annotated[Storage, Depends(get_storage)],
) -> HospitalAtNightEntry:
    """Raise a review request for an existing patient."""
    if not await storage.patients.get(data.patient_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Patient not found: {data.patient_id}",
        )

    entry = await storage.hospital_at_night.create(data)

    audit_logger.log_access(
        resource_type="hospital_at_night",
        resource_id=entry.id,
        action="CREATE",
        actor=entry.created_by,
        details={
            "patient_id": entry.patient_id,
            "priority": entry.priority.value,
            "review_dates": len(entry.review_dates),
        },
    )
    return entry


@router.get("/dashboard", response_model=HospitalAtNightDashboard)
async def get_dashboard(
    storage: Annotated[Storage, Depends(get_storage)],
    role: list[ReviewRole] = Query([], description="Assigned roles (any match)"),
    review_date: date | None = Query(None, alias="date"),
    review_status: list[ReviewStatus] = Query([], alias="status"),
    ward: list[str] = Query([]),
    review_type: list[ReviewType] = Query([], alias="reviewType"),
    sort: SortOption = Query("priority"),
) -> HospitalAtNightDashboard:
    """Filtered and sorted review entries for the night team.

    Stats are computed over every entry, not just the filtered ones.
    """
    entries = await storage.hospital_at_night.list_all()
    patients = await storage.patients.list_all(active_only=False)
    notes = await storage.handover_notes.list_all()

    joined = join_entries(entries, patients, notes)
    filtered = filter_entries(
        joined,
        roles=role,
        review_date=review_date,
        statuses=review_status,
        wards=ward,
        review_types=review_type,
    )

    return HospitalAtNightDashboard(
        entries=sort_entries(filtered, sort),
        stats=entry_stats(entries),
        wards=sort_wards(e.patient.ward for e in joined if e.patient),
        filtered_count=len(filtered),
    )


@router.get("/{entry_id}", response_model=HospitalAtNightEntry)
async def get_entry(
    entry_id: str,
    storage: Annotated[Storage, Depends(get_storage)],
) -> HospitalAtNightEntry:
    return await _get_entry(storage, entry_id)


@router.put("/{entry_id}", response_model=HospitalAtNightEntry)
@router.patch("/{entry_id}", response_model=HospitalAtNightEntry)
async def update_entry(
    entry_id: str,
    data: HospitalAtNightUpdate,
    storage: Annotated[Storage, Depends(get_storage)],
) -> HospitalAtNightEntry:
    """Merge the supplied fields into an entry."""
    entry = await storage.hospital_at_night.update(entry_id, data)
    if not entry:
        raise _not_found(entry_id)

    audit_logger.log_access(
        resource_type="hospital_at_night",
        resource_id=entry_id,
        action="UPDATE",
        details={"fields": sorted(data.changes())},
    )
    return entry


@router.post("/{entry_id}/status", response_model=HospitalAtNightEntry)
async def change_entry_status(
    entry_id: str,
    body: StatusChangeRequest,
    storage: Annotated[Storage, Depends(get_storage)],
) -> HospitalAtNightEntry:
    """Complete all review dates, complete today's only, or reopen."""
    entry = await _get_entry(storage, entry_id)

    changes = change_status(entry, body.status, today_only=body.complete_today_only)
    updated = await storage.hospital_at_night.update(entry_id, changes)
    if not updated:
        raise _not_found(entry_id)

    audit_logger.log_status_change(
        entry_id=entry_id,
        old_status=entry.review_status.value,
        new_status=updated.review_status.value,
        completed_dates=sum(1 for rd in updated.review_dates if rd.is_completed),
        total_dates=len(updated.review_dates),
    )
    return updated


@router.post(
    "/{entry_id}/comments",
    response_model=HospitalAtNightEntry,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    entry_id: str,
    body: CommentCreate,
    storage: Annotated[Storage, Depends(get_storage)],
) -> HospitalAtNightEntry:
    """Append a comment to the entry's thread."""
    entry = await _get_entry(storage, entry_id)

    updated = await storage.hospital_at_night.update(
        entry_id, add_comment(entry, body.text, body.created_by)
    )
    if not updated:
        raise _not_found(entry_id)

    audit_logger.log_access(
        resource_type="hospital_at_night",
        resource_id=entry_id,
        action="COMMENT",
        actor=body.created_by,
        details={"comments": len(updated.comments)},
    )
    return updated


@router.delete("/{entry_id}", response_model=DeleteResponse)
async def delete_entry(
    entry_id: str,
    storage: Annotated[Storage, Depends(get_storage)],
) -> DeleteResponse:
    if not await storage.hospital_at_night.delete(entry_id):
        raise _not_found(entry_id)

    audit_logger.log_access(
        resource_type="hospital_at_night",
        resource_id=entry_id,
        action="DELETE",
    )
    return DeleteResponse()
