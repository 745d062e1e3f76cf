"""clinic_schema

Revision ID: 001_clinic_schema
Revises: None
Create Date: 2025-01-15

Creates the clinic tables: patients, catalogs (services, medications),
provider schedules, appointments, treatments with attachments,
prescriptions, billings and the stock movement ledger.
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_clinic_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
    ]


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), primary_key=True)


def upgrade() -> None:
    """Create clinic tables."""

    # ==========================================================================
    # 1. Registry and catalogs
    # ==========================================================================
    op.create_table(
        "patients",
        _id(),
        sa.Column("hn", sa.String(20), nullable=True, comment="Hospital number"),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("hn", name="uq_patients_hn"),
    )
    op.create_index("ix_patients_hn", "patients", ["hn"])

    op.create_table(
        "services",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column(
            "service_mode",
            sa.String(20),
            nullable=False,
            server_default="onsite",
            comment="onsite or online; online services get a meeting link",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )

    op.create_table(
        "medications",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=True),
        sa.Column("stock_quantity", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )

    op.create_table(
        "provider_schedules",
        _id(),
        sa.Column("provider_id", sa.String(36), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False, comment="0=Sunday .. 6=Saturday"),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_provider_schedules_provider_id", "provider_schedules", ["provider_id"])

    # ==========================================================================
    # 2. Appointments and treatments
    # ==========================================================================
    op.create_table(
        "appointments",
        _id(),
        sa.Column("patient_id", sa.String(36), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("provider_id", sa.String(36), nullable=True),
        sa.Column("appointment_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("appointment_type", sa.String(50), nullable=True, server_default="consultation"),
        sa.Column("status", sa.String(20), nullable=False, server_default="scheduled"),
        sa.Column("chief_complaint", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("location_id", sa.String(36), nullable=True),
        sa.Column("google_event_id", sa.String(255), nullable=True),
        sa.Column("meet_link", sa.String(500), nullable=True),
        *_timestamps(),
    )
    for column in ("patient_id", "provider_id", "appointment_date", "status"):
        op.create_index(f"ix_appointments_{column}", "appointments", [column])

    op.create_table(
        "treatments",
        _id(),
        sa.Column("patient_id", sa.String(36), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("provider_id", sa.String(36), nullable=True),
        sa.Column("appointment_id", sa.String(36), sa.ForeignKey("appointments.id"), nullable=True),
        sa.Column("treatment_date", sa.Date(), nullable=False),
        sa.Column("symptoms", sa.Text(), nullable=True),
        sa.Column("diagnosis", sa.Text(), nullable=True),
        sa.Column("diagnosis_code", sa.String(20), nullable=True),
        sa.Column("treatment_plan", sa.Text(), nullable=True),
        sa.Column("procedures", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("vital_signs", sa.JSON(), nullable=True),
        sa.Column("follow_up_date", sa.Date(), nullable=True),
        sa.Column("follow_up_notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    for column in ("patient_id", "provider_id", "treatment_date"):
        op.create_index(f"ix_treatments_{column}", "treatments", [column])

    op.create_table(
        "treatment_files",
        _id(),
        sa.Column(
            "treatment_id", sa.String(36), sa.ForeignKey("treatments.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("patient_id", sa.String(36), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_url", sa.String(1000), nullable=False),
        sa.Column("file_type", sa.String(100), nullable=True),
        sa.Column("file_size", sa.BigInteger(), nullable=True),
        sa.Column("uploaded_by", sa.String(36), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_treatment_files_treatment_id", "treatment_files", ["treatment_id"])

    # ==========================================================================
    # 3. Prescriptions and billings
    # ==========================================================================
    op.create_table(
        "prescriptions",
        _id(),
        sa.Column("patient_id", sa.String(36), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("treatment_id", sa.String(36), sa.ForeignKey("treatments.id"), nullable=True),
        sa.Column("provider_id", sa.String(36), nullable=True),
        sa.Column("prescription_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    for column in ("patient_id", "treatment_id", "status"):
        op.create_index(f"ix_prescriptions_{column}", "prescriptions", [column])

    op.create_table(
        "prescription_items",
        _id(),
        sa.Column(
            "prescription_id",
            sa.String(36),
            sa.ForeignKey("prescriptions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("medication_id", sa.String(36), sa.ForeignKey("medications.id"), nullable=True),
        sa.Column("medication_name", sa.String(255), nullable=False),
        sa.Column("dosage", sa.String(100), nullable=False, server_default="-"),
        sa.Column("frequency", sa.String(100), nullable=True),
        sa.Column("duration", sa.String(100), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("instructions", sa.Text(), nullable=True),
    )
    op.create_index("ix_prescription_items_prescription_id", "prescription_items", ["prescription_id"])

    op.create_table(
        "billings",
        _id(),
        sa.Column("invoice_number", sa.String(30), nullable=False, comment="INV-YYYYMMDD-NNNN"),
        sa.Column("patient_id", sa.String(36), sa.ForeignKey("patients.id"), nullable=False),
        sa.Column("treatment_id", sa.String(36), sa.ForeignKey("treatments.id"), nullable=True),
        sa.Column("appointment_id", sa.String(36), sa.ForeignKey("appointments.id"), nullable=True),
        sa.Column("billing_date", sa.Date(), nullable=False),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("total", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_by", sa.String(36), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("invoice_number", name="uq_billings_invoice_number"),
    )
    for column in ("patient_id", "treatment_id", "appointment_id", "billing_date"):
        op.create_index(f"ix_billings_{column}", "billings", [column])

    op.create_table(
        "billing_items",
        _id(),
        sa.Column("billing_id", sa.String(36), sa.ForeignKey("billings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("item_type", sa.String(20), nullable=False, comment="treatment or medication"),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
    )
    op.create_index("ix_billing_items_billing_id", "billing_items", ["billing_id"])

    # ==========================================================================
    # 4. Stock ledger
    # ==========================================================================
    op.create_table(
        "stock_movements",
        _id(),
        sa.Column("medication_id", sa.String(36), sa.ForeignKey("medications.id"), nullable=False),
        sa.Column("movement_type", sa.String(20), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("previous_stock", sa.Integer(), nullable=False),
        sa.Column("new_stock", sa.Integer(), nullable=False),
        sa.Column("reference_type", sa.String(50), nullable=True),
        sa.Column("reference_id", sa.String(36), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(36), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_stock_movements_medication_id", "stock_movements", ["medication_id"])


def downgrade() -> None:
    """Drop clinic tables in reverse dependency order."""
    for table in (
        "stock_movements",
        "billing_items",
        "billings",
        "prescription_items",
        "prescriptions",
        "treatment_files",
        "treatments",
        "appointments",
        "provider_schedules",
        "medications",
        "services",
        "patients",
    ):
        op.drop_table(table)
