"""
Handover note database model.

An SBAR (Situation, Background, Assessment, Recommendation) note written
for one patient at a shift handover.
"""

from datetime import date
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ward_handover.models.base import Base

if TYPE_CHECKING:
    from ward_handover.models.patient import Patient


class HandoverNote(Base):
    """SBAR handover note. Edits overwrite in place; there is no history."""

    __tablename__ = "handover_notes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    patient_id: Mapped[str] = mapped_column(
        ForeignKey("patients.id", ondelete="CASCADE"), nullable=False
    )

    created_by: Mapped[str] = mapped_column(String(128), nullable=False)
    shift_date: Mapped[date] = mapped_column(Date, nullable=False)
    shift_type: Mapped[str] = mapped_column(String(16), nullable=False)

    # SBAR
    situation: Mapped[str] = mapped_column(Text, nullable=False)
    background: Mapped[str] = mapped_column(Text, nullable=False)
    assessment: Mapped[str] = mapped_column(Text, nullable=False)
    recommendation: Mapped[str] = mapped_column(Text, nullable=False)

    patient: Mapped["Patient"] = relationship("Patient", back_populates="handover_notes")

    __table_args__ = (
        Index("ix_handover_patient", "patient_id"),
        Index("ix_handover_date", "shift_date"),
        Index("ix_handover_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<HandoverNote(id={self.id}, patient='{self.patient_id}', shift='{self.shift_date}')>"
