"""Hospital at Night review status transitions.

The store merges whatever it is given; the rules for moving an entry
between Pending and Complete live here. Each function returns the update
to write back rather than touching storage itself.

An entry is Complete only when every review date carries a completion
stamp. Reopening clears every stamp, including dates completed on earlier
nights.
"""

from datetime import date, datetime
from uuid import uuid4

from ward_handover.models.base import utcnow
from ward_handover.schemas.common import ReviewStatus
from ward_handover.schemas.hospital_at_night import (
    Comment,
    HospitalAtNightEntry,
    HospitalAtNightUpdate,
    ReviewDate,
    has_outstanding_future_dates,
    is_partially_complete,
)

__all__ = [
    "add_comment",
    "change_status",
    "complete_all",
    "complete_today_only",
    "derive_status",
    "has_outstanding_future_dates",
    "is_partially_complete",
    "reopen",
]


def derive_status(review_dates: list[ReviewDate]) -> ReviewStatus:
    """Complete when every date is stamped, otherwise Pending."""
    if review_dates and all(rd.is_completed for rd in review_dates):
        return ReviewStatus.COMPLETE
    return ReviewStatus.PENDING


def _status_update(review_dates: list[ReviewDate], now: datetime) -> HospitalAtNightUpdate:
    status = derive_status(review_dates)
    return HospitalAtNightUpdate(
        review_dates=review_dates,
        review_status=status,
        status_changed_at=now if status == ReviewStatus.COMPLETE else None,
    )


def complete_all(entry: HospitalAtNightEntry, now: datetime | None = None) -> HospitalAtNightUpdate:
    """Stamp every outstanding date; existing stamps are kept."""
    now = now or utcnow()
    review_dates = [
        rd.model_copy(update={"completed_at": rd.completed_at or now})
        for rd in entry.review_dates
    ]
    return _status_update(review_dates, now)


def complete_today_only(
    entry: HospitalAtNightEntry,
    today: date | None = None,
    now: datetime | None = None,
) -> HospitalAtNightUpdate:
    """Stamp outstanding dates up to and including ``today``.

    Future dates stay open, so the entry remains Pending until the last
    of them is completed.
    """
    now = now or utcnow()
    today = today or now.date()
    review_dates = [
        rd.model_copy(update={"completed_at": now})
        if rd.date <= today and not rd.is_completed
        else rd
        for rd in entry.review_dates
    ]
    return _status_update(review_dates, now)


def reopen(entry: HospitalAtNightEntry) -> HospitalAtNightUpdate:
    """Back to Pending with every completion stamp cleared."""
    review_dates = [rd.model_copy(update={"completed_at": None}) for rd in entry.review_dates]
    return HospitalAtNightUpdate(
        review_dates=review_dates,
        review_status=ReviewStatus.PENDING,
        status_changed_at=None,
    )


def change_status(
    entry: HospitalAtNightEntry,
    status: ReviewStatus,
    today_only: bool = False,
    today: date | None = None,
    now: datetime | None = None,
) -> HospitalAtNightUpdate:
    """Dispatch a requested status to the matching transition."""
    if status == ReviewStatus.PENDING:
        return reopen(entry)
    if today_only:
        return complete_today_only(entry, today=today, now=now)
    return complete_all(entry, now=now)


def add_comment(
    entry: HospitalAtNightEntry,
    text: str,
    created_by: str,
    now: datetime | None = None,
) -> HospitalAtNightUpdate:
    """Append a comment; the whole list is written back."""
    comment = Comment(
        id=str(uuid4()),
        text=text,
        created_by=created_by,
        created_at=now or utcnow(),
    )
    return HospitalAtNightUpdate(comments=[*entry.comments, comment])
