"""API v1 endpoints."""

from ward_handover.api.v1.endpoints import dashboard, handover, hospital_at_night, patients

__all__ = [
    "patients",
    "handover",
    "hospital_at_night",
    "dashboard",
]
