"""Initial database schema for Ward Handover

Revision ID: 001
Revises:
Create Date: 2025-01-20 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create patients table
    op.create_table(
        "patients",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("nhs_number", sa.String(10), nullable=False),
        sa.Column("first_name", sa.String(128), nullable=False),
        sa.Column("last_name", sa.String(128), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("ward", sa.String(64), nullable=False),
        sa.Column("bed_number", sa.String(16), nullable=False),
        sa.Column("consultant", sa.String(128), nullable=False),
        sa.Column("admission_date", sa.Date(), nullable=False),
        sa.Column("diagnosis", sa.Text(), nullable=False),
        sa.Column("allergies", sa.Text(), nullable=False),
        sa.Column("resuscitation_status", sa.String(32), nullable=False),
        sa.Column("early_warning_score", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_patients")),
    )
    op.create_index(op.f("ix_patients_nhs_number"), "patients", ["nhs_number"], unique=False)
    op.create_index("ix_patients_ward", "patients", ["ward"], unique=False)
    op.create_index("ix_patients_active", "patients", ["is_active"], unique=False)

    # Create handover_notes table
    op.create_table(
        "handover_notes",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("patient_id", sa.String(36), nullable=False),
        sa.Column("created_by", sa.String(128), nullable=False),
        sa.Column("shift_date", sa.Date(), nullable=False),
        sa.Column("shift_type", sa.String(16), nullable=False),
        sa.Column("situation", sa.Text(), nullable=False),
        sa.Column("background", sa.Text(), nullable=False),
        sa.Column("assessment", sa.Text(), nullable=False),
        sa.Column("recommendation", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["patient_id"],
            ["patients.id"],
            name=op.f("fk_handover_notes_patient_id_patients"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_handover_notes")),
    )
    op.create_index("ix_handover_patient", "handover_notes", ["patient_id"], unique=False)
    op.create_index("ix_handover_date", "handover_notes", ["shift_date"], unique=False)
    op.create_index("ix_handover_created_at", "handover_notes", ["created_at"], unique=False)

    # Create hospital_at_night table
    op.create_table(
        "hospital_at_night",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("patient_id", sa.String(36), nullable=False),
        sa.Column("review_dates", sa.JSON(), nullable=False),
        sa.Column("priority", sa.String(16), nullable=False),
        sa.Column("assigned_roles", sa.JSON(), nullable=False),
        sa.Column("reason_for_review", sa.Text(), nullable=False),
        sa.Column("review_status", sa.String(16), nullable=False),
        sa.Column("review_type", sa.String(16), nullable=False),
        sa.Column("specialty", sa.String(32), nullable=False),
        sa.Column("status_changed_at", sa.DateTime(), nullable=True),
        sa.Column("created_by", sa.String(128), nullable=False),
        sa.Column("comments", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["patient_id"],
            ["patients.id"],
            name=op.f("fk_hospital_at_night_patient_id_patients"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_hospital_at_night")),
    )
    op.create_index("ix_hospital_at_night_patient", "hospital_at_night", ["patient_id"], unique=False)
    op.create_index(
        "ix_hospital_at_night_created_at", "hospital_at_night", ["created_at"], unique=False
    )


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table("hospital_at_night")
    op.drop_table("handover_notes")
    op.drop_table("patients")
