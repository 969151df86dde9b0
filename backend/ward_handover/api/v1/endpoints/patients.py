"""Patient management endpoints for Ward Handover."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ward_handover.api.v1.deps import get_storage
from ward_handover.core.logging import audit_logger
from ward_handover.schemas.common import CamelModel
from ward_handover.schemas.patient import Patient, PatientCreate, PatientUpdate
from ward_handover.services.aggregation import search_patients, sort_wards
from ward_handover.services.storage import Storage

router = APIRouter()


class PatientListResponse(CamelModel):
    """Patients with the wards currently occupied."""

    patients: list[Patient]
    wards: list[str]


class PatientAction(CamelModel):
    """Lifecycle action on a patient."""

    action: str


class ActionResponse(CamelModel):
    """Outcome of a lifecycle action."""

    success: bool
    message: str


class DeleteResponse(CamelModel):
    success: Literal[True] = True


def _not_found(patient_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Patient not found: {patient_id}",
    )


@router.get("", response_model=PatientListResponse)
async def list_patients(
    storage: Annotated[Storage, Depends(get_storage)],
    include_inactive: bool = Query(False, alias="includeInactive"),
) -> PatientListResponse:
    """List patients ordered by ward and bed."""
    patients = await storage.patients.list_all(active_only=not include_inactive)
    wards = await storage.patients.wards()
    return PatientListResponse(patients=patients, wards=sort_wards(wards))


@router.post("", response_model=Patient, status_code=status.HTTP_201_CREATED)
async def create_patient(
    data: PatientCreate,
    storage: Annotated[Storage, Depends(get_storage)],
) -> Patient:
    """Admit a new patient."""
    patient = await storage.patients.create(data)

    audit_logger.log_access(
        resource_type="patient",
        resource_id=patient.id,
        action="CREATE",
        details={"ward": patient.ward},
    )
    return patient


@router.get("/search", response_model=list[Patient])
async def search(
    storage: Annotated[Storage, Depends(get_storage)],
    q: str = Query("", description="Name, NHS number or diagnosis"),
    ward: str | None = Query(None, description="Ward name, or 'all'"),
    include_inactive: bool = Query(False, alias="includeInactive"),
) -> list[Patient]:
    """Search patients by free text, optionally within one ward."""
    patients = await storage.patients.list_all(active_only=not include_inactive)
    return search_patients(patients, q, ward)


@router.get("/{patient_id}", response_model=Patient)
async def get_patient(
    patient_id: str,
    storage: Annotated[Storage, Depends(get_storage)],
) -> Patient:
    """Get patient information."""
    patient = await storage.patients.get(patient_id)
    if not patient:
        raise _not_found(patient_id)
    return patient


@router.put("/{patient_id}", response_model=Patient)
async def update_patient(
    patient_id: str,
    data: PatientCreate,
    storage: Annotated[Storage, Depends(get_storage)],
) -> Patient:
    """Replace the editable fields of a patient."""
    changes = PatientUpdate(**data.model_dump())
    patient = await storage.patients.update(patient_id, changes)
    if not patient:
        raise _not_found(patient_id)

    audit_logger.log_access(
        resource_type="patient",
        resource_id=patient_id,
        action="UPDATE",
    )
    return patient


@router.patch("/{patient_id}", response_model=ActionResponse)
async def patient_action(
    patient_id: str,
    body: PatientAction,
    storage: Annotated[Storage, Depends(get_storage)],
) -> ActionResponse:
    """Apply a lifecycle action. Only ``discharge`` is supported."""
    if body.action != "discharge":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported action: {body.action}",
        )

    if not await storage.patients.discharge(patient_id):
        raise _not_found(patient_id)

    audit_logger.log_access(
        resource_type="patient",
        resource_id=patient_id,
        action="DISCHARGE",
    )
    return ActionResponse(success=True, message="Patient discharged")


@router.delete("/{patient_id}", response_model=DeleteResponse)
async def delete_patient(
    patient_id: str,
    storage: Annotated[Storage, Depends(get_storage)],
) -> DeleteResponse:
    """Delete a patient with all handover notes and review entries.

    This permanently removes the patient's records and is logged for audit.
    """
    if not await storage.patients.delete(patient_id):
        raise _not_found(patient_id)

    audit_logger.log_access(
        resource_type="patient",
        resource_id=patient_id,
        action="DELETE",
    )
    return DeleteResponse()
