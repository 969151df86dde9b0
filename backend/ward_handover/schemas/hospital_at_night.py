"""Hospital at Night (out-of-hours review) schemas."""

from datetime import date, datetime, timezone

from pydantic import Field, computed_field, field_validator

from ward_handover.schemas.common import (
    CamelModel,
    Priority,
    ReviewRole,
    ReviewStatus,
    ReviewType,
    Specialty,
    require_text,
)
from ward_handover.schemas.handover import HandoverNote
from ward_handover.schemas.patient import Patient


class ReviewDate(CamelModel):
    """A scheduled review day, individually markable complete."""

    date: date
    completed_at: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


def is_partially_complete(entry: "HospitalAtNightEntry") -> bool:
    """Some, but not all, review dates have been completed."""
    completed = [rd.is_completed for rd in entry.review_dates]
    return any(completed) and not all(completed)


def has_outstanding_future_dates(entry: "HospitalAtNightEntry", today: date | None = None) -> bool:
    """An incomplete review date is still ahead of ``today`` (the UTC date by default)."""
    today = today or datetime.now(timezone.utc).date()
    return any(not rd.is_completed and rd.date > today for rd in entry.review_dates)


class Comment(CamelModel):
    """A comment on a review entry. Comments are never edited or removed."""

    id: str
    text: str
    created_by: str
    created_at: datetime


def _dedupe_roles(roles: list[ReviewRole] | None) -> list[ReviewRole] | None:
    if roles is None:
        return None
    unique = list(dict.fromkeys(roles))
    if not unique:
        raise ValueError("Please select at least one role")
    return unique


class HospitalAtNightCreate(CamelModel):
    """New review request."""

    patient_id: str
    review_dates: list[ReviewDate] = Field(..., min_length=1)
    priority: Priority
    assigned_roles: list[ReviewRole] = Field(..., min_length=1)
    reason_for_review: str
    review_type: ReviewType = ReviewType.SCHEDULED
    specialty: Specialty
    created_by: str = "Unknown"

    @field_validator("assigned_roles")
    @classmethod
    def check_roles(cls, v: list[ReviewRole]) -> list[ReviewRole]:
        return _dedupe_roles(v)

    @field_validator("reason_for_review")
    @classmethod
    def check_reason(cls, v: str) -> str:
        return require_text(v, "reason_for_review")

    @field_validator("created_by", mode="before")
    @classmethod
    def default_author(cls, v: str | None) -> str:
        if v is None or not str(v).strip():
            return "Unknown"
        return str(v).strip()


class HospitalAtNightUpdate(CamelModel):
    """Partial update merged into an entry.

    Used for status transitions, reassignment and writing back the comment
    list (which is replaced as a whole).
    """

    review_dates: list[ReviewDate] | None = Field(None, min_length=1)
    priority: Priority | None = None
    assigned_roles: list[ReviewRole] | None = None
    reason_for_review: str | None = None
    review_status: ReviewStatus | None = None
    review_type: ReviewType | None = None
    specialty: Specialty | None = None
    status_changed_at: datetime | None = None
    comments: list[Comment] | None = None

    @field_validator("assigned_roles")
    @classmethod
    def check_roles(cls, v: list[ReviewRole] | None) -> list[ReviewRole] | None:
        return _dedupe_roles(v)

    @field_validator("reason_for_review")
    @classmethod
    def check_reason(cls, v: str | None) -> str | None:
        return require_text(v, "reason_for_review")

    def changes(self) -> dict:
        """Supplied fields; status_changed_at may be explicitly cleared."""
        data = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None and name != "status_changed_at":
                continue
            data[name] = value
        return data


class HospitalAtNightEntry(CamelModel):
    """Stored review request."""

    id: str
    patient_id: str
    review_dates: list[ReviewDate]
    priority: Priority
    assigned_roles: list[ReviewRole]
    reason_for_review: str
    review_status: ReviewStatus = ReviewStatus.PENDING
    review_type: ReviewType = ReviewType.SCHEDULED
    specialty: Specialty
    status_changed_at: datetime | None = None
    created_at: datetime
    created_by: str
    comments: list[Comment] = Field(default_factory=list)


class HospitalAtNightWithPatient(HospitalAtNightEntry):
    """Review entry joined with its patient and that patient's latest note."""

    patient: Patient | None = None
    latest_handover: HandoverNote | None = None

    @computed_field(alias="partiallyComplete")
    @property
    def partially_complete(self) -> bool:
        return is_partially_complete(self)

    @computed_field(alias="hasOutstandingFutureDates")
    @property
    def outstanding_future_dates(self) -> bool:
        return has_outstanding_future_dates(self)


class StatusChangeRequest(CamelModel):
    """Mark an entry Complete (all dates or today only) or reopen it."""

    status: ReviewStatus
    complete_today_only: bool = False


class CommentCreate(CamelModel):
    """New comment on a review entry."""

    text: str
    created_by: str

    @field_validator("text", "created_by")
    @classmethod
    def check_required_text(cls, v: str, info) -> str:
        return require_text(v, info.field_name)
