"""Dashboard endpoints for Ward Handover.

Provides the home page summary and per-ward handover boards.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from ward_handover.api.v1.deps import get_storage
from ward_handover.core.config import get_settings
from ward_handover.models.base import utcnow
from ward_handover.schemas.dashboard import DashboardSummary, WardBoard
from ward_handover.services.aggregation import dashboard_summary, ward_board
from ward_handover.services.storage import Storage

router = APIRouter()
settings = get_settings()


@router.get("/summary", response_model=DashboardSummary)
async def get_dashboard_summary(
    storage: Annotated[Storage, Depends(get_storage)],
) -> DashboardSummary:
    """Get dashboard summary.

    Counts cover active patients only; today's handovers are notes whose
    shift date is the current UTC date.
    """
    patients = await storage.patients.list_all(active_only=True)
    notes = await storage.handover_notes.list_all()

    return dashboard_summary(
        patients,
        notes,
        today=utcnow().date(),
        high_news_threshold=settings.high_news_threshold,
    )


@router.get("/ward-board", response_model=WardBoard)
async def get_ward_board(
    storage: Annotated[Storage, Depends(get_storage)],
    ward: str = Query(..., description="Ward name"),
    high_news_only: bool = Query(False, alias="highNewsOnly"),
) -> WardBoard:
    """Patients on one ward in bed order, each with their latest handover note."""
    patients = await storage.patients.list_by_ward(ward)
    notes = await storage.handover_notes.list_all()

    return ward_board(
        patients,
        notes,
        ward=ward,
        beds_per_ward=settings.beds_per_ward,
        high_news_threshold=settings.high_news_threshold,
        high_news_only=high_news_only,
    )
