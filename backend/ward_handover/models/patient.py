"""
Patient database model.

Represents an inpatient on a ward with demographics, clinical status
and relationships to handover notes and out-of-hours review entries.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from sqlalchemy import Boolean, Date, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ward_handover.models.base import Base, UTCDateTime, utcnow

if TYPE_CHECKING:
    from ward_handover.models.handover import HandoverNote
    from ward_handover.models.hospital_at_night import HospitalAtNightEntry


class Patient(Base):
    """
    Patient model representing a ward inpatient.

    Discharge is a soft delete (is_active=False). A hard delete removes
    the row together with its handover notes and review entries.
    """

    __tablename__ = "patients"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    # NHS number, stored normalised (10 digits, no whitespace)
    nhs_number: Mapped[str] = mapped_column(String(10), nullable=False, index=True)

    first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    last_name: Mapped[str] = mapped_column(String(128), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)

    # Location
    ward: Mapped[str] = mapped_column(String(64), nullable=False)
    bed_number: Mapped[str] = mapped_column(String(16), nullable=False)

    # Clinical
    consultant: Mapped[str] = mapped_column(String(128), nullable=False)
    admission_date: Mapped[date] = mapped_column(Date, nullable=False)
    diagnosis: Mapped[str] = mapped_column(Text, nullable=False)
    allergies: Mapped[str] = mapped_column(Text, nullable=False, default="")
    resuscitation_status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="Not Discussed"
    )
    early_warning_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False
    )

    # Relationships
    handover_notes: Mapped[list["HandoverNote"]] = relationship(
        "HandoverNote",
        back_populates="patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    hospital_at_night_entries: Mapped[list["HospitalAtNightEntry"]] = relationship(
        "HospitalAtNightEntry",
        back_populates="patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_patients_ward", "ward"),
        Index("ix_patients_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Patient(id={self.id}, ward='{self.ward}', bed='{self.bed_number}')>"
