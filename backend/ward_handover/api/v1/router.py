"""API v1 Router - Aggregates all API endpoints."""

from fastapi import APIRouter

from ward_handover.api.v1.endpoints import dashboard, handover, hospital_at_night, patients

api_router = APIRouter()

# Patient management
api_router.include_router(
    patients.router,
    prefix="/patients",
    tags=["Patients"],
)

# SBAR handover notes
api_router.include_router(
    handover.router,
    prefix="/handover",
    tags=["Handover"],
)

# Out-of-hours reviews
api_router.include_router(
    hospital_at_night.router,
    prefix="/hospital-at-night",
    tags=["Hospital at Night"],
)

# Dashboard endpoints
api_router.include_router(
    dashboard.router,
    prefix="/dashboard",
    tags=["Dashboard"],
)
