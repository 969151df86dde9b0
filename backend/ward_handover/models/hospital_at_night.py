"""
Hospital at Night database model.

An out-of-hours review request for a patient. Review dates and the
comment thread are nested documents stored as JSON.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from sqlalchemy import JSON, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ward_handover.models.base import Base, UTCDateTime

if TYPE_CHECKING:
    from ward_handover.models.patient import Patient


class HospitalAtNightEntry(Base):
    """
    Out-of-hours review request.

    review_dates: [{"date": "YYYY-MM-DD", "completedAt": ISO-8601 | null}, ...]
    comments: [{"id", "text", "createdBy", "createdAt"}, ...]
    """

    __tablename__ = "hospital_at_night"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    patient_id: Mapped[str] = mapped_column(
        ForeignKey("patients.id", ondelete="CASCADE"), nullable=False
    )

    review_dates: Mapped[list] = mapped_column(JSON, nullable=False)
    priority: Mapped[str] = mapped_column(String(16), nullable=False)
    assigned_roles: Mapped[list] = mapped_column(JSON, nullable=False)
    reason_for_review: Mapped[str] = mapped_column(Text, nullable=False)
    review_status: Mapped[str] = mapped_column(String(16), nullable=False, default="Pending")
    review_type: Mapped[str] = mapped_column(String(16), nullable=False, default="Scheduled")
    specialty: Mapped[str] = mapped_column(String(32), nullable=False)
    status_changed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    created_by: Mapped[str] = mapped_column(String(128), nullable=False, default="Unknown")
    comments: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    patient: Mapped["Patient"] = relationship("Patient", back_populates="hospital_at_night_entries")

    __table_args__ = (
        Index("ix_hospital_at_night_patient", "patient_id"),
        Index("ix_hospital_at_night_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<HospitalAtNightEntry(id={self.id}, patient='{self.patient_id}', "
            f"priority='{self.priority}', status='{self.review_status}')>"
        )
