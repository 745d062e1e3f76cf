"""
Clinic SQLAlchemy Models

Database models for clinic domain persistence. Status and kind columns
store the enum string values.
"""

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Column,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.core.domain import generate_uuid_str
from app.database.base import Base, TimestampMixin


class PatientModel(Base, TimestampMixin):
    """Patient registry row. Maintained by the patient screens, read here for names."""

    __tablename__ = "patients"

    id = Column(String(36), primary_key=True, default=generate_uuid_str)
    hn = Column(String(20), unique=True, nullable=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class TreatmentModel(Base, TimestampMixin):
    """SQLAlchemy model for Treatment entity."""

    __tablename__ = "treatments"

    id = Column(String(36), primary_key=True, default=generate_uuid_str)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)
    provider_id = Column(String(36), nullable=True, index=True)
    appointment_id = Column(String(36), ForeignKey("appointments.id"), nullable=True)
    treatment_date = Column(Date, nullable=False, index=True)

    # Clinical free text
    symptoms = Column(Text, nullable=True)
    diagnosis = Column(Text, nullable=True)
    diagnosis_code = Column(String(20), nullable=True)
    treatment_plan = Column(Text, nullable=True)
    procedures = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    vital_signs = Column(JSON, nullable=True)

    follow_up_date = Column(Date, nullable=True)
    follow_up_notes = Column(Text, nullable=True)


class TreatmentFileModel(Base, TimestampMixin):
    __tablename__ = "treatment_files"

    id = Column(String(36), primary_key=True, default=generate_uuid_str)
    treatment_id = Column(String(36), ForeignKey("treatments.id", ondelete="CASCADE"), nullable=False, index=True)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False)
    file_name = Column(String(255), nullable=False)
    file_url = Column(String(1000), nullable=False)
    file_type = Column(String(100), nullable=True)
    file_size = Column(BigInteger, nullable=True)
    uploaded_by = Column(String(36), nullable=True)


class PrescriptionModel(Base, TimestampMixin):
    """SQLAlchemy model for Prescription aggregate."""

    __tablename__ = "prescriptions"

    id = Column(String(36), primary_key=True, default=generate_uuid_str)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)
    treatment_id = Column(String(36), ForeignKey("treatments.id"), nullable=True, index=True)
    provider_id = Column(String(36), nullable=True)
    prescription_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default="pending", index=True)
    notes = Column(Text, nullable=True)

    items = relationship(
        "PrescriptionItemModel",
        order_by="PrescriptionItemModel.position",
        lazy="selectin",
        cascade="all, delete-orphan",
    )


class PrescriptionItemModel(Base):
    __tablename__ = "prescription_items"

    id = Column(String(36), primary_key=True, default=generate_uuid_str)
    prescription_id = Column(
        String(36), ForeignKey("prescriptions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)
    medication_id = Column(String(36), ForeignKey("medications.id"), nullable=True)
    medication_name = Column(String(255), nullable=False)
    dosage = Column(String(100), nullable=False, default="-")
    frequency = Column(String(100), nullable=True)
    duration = Column(String(100), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    instructions = Column(Text, nullable=True)


class BillingModel(Base, TimestampMixin):
    """SQLAlchemy model for Billing aggregate."""

    __tablename__ = "billings"
    __table_args__ = (UniqueConstraint("invoice_number", name="uq_billings_invoice_number"),)

    id = Column(String(36), primary_key=True, default=generate_uuid_str)
    invoice_number = Column(String(30), nullable=False)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)
    treatment_id = Column(String(36), ForeignKey("treatments.id"), nullable=True, index=True)
    appointment_id = Column(String(36), ForeignKey("appointments.id"), nullable=True, index=True)
    billing_date = Column(Date, nullable=False, index=True)
    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    payment_status = Column(String(20), nullable=False, default="pending")
    created_by = Column(String(36), nullable=True)
    notes = Column(Text, nullable=True)

    items = relationship(
        "BillingItemModel",
        order_by="BillingItemModel.position",
        lazy="selectin",
        cascade="all, delete-orphan",
    )


class BillingItemModel(Base):
    __tablename__ = "billing_items"

    id = Column(String(36), primary_key=True, default=generate_uuid_str)
    billing_id = Column(String(36), ForeignKey("billings.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    description = Column(String(255), nullable=False)
    item_type = Column(String(20), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(12, 2), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)


class AppointmentModel(Base, TimestampMixin):
    """SQLAlchemy model for Appointment entity."""

    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_uuid_str)
    patient_id = Column(String(36), ForeignKey("patients.id"), nullable=False, index=True)
    provider_id = Column(String(36), nullable=True, index=True)

    # Scheduling
    appointment_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=True)
    appointment_type = Column(String(50), default="consultation")
    status = Column(String(20), nullable=False, default="scheduled", index=True)

    chief_complaint = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    location_id = Column(String(36), nullable=True)

    # External links
    google_event_id = Column(String(255), nullable=True)
    meet_link = Column(String(500), nullable=True)

    patient = relationship("PatientModel", lazy="joined")


class ServiceModel(Base, TimestampMixin):
    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=generate_uuid_str)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    duration_minutes = Column(Integer, nullable=True)
    service_mode = Column(String(20), nullable=False, default="onsite")
    is_active = Column(Boolean, nullable=False, default=True)


class MedicationModel(Base, TimestampMixin):
    __tablename__ = "medications"

    id = Column(String(36), primary_key=True, default=generate_uuid_str)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(12, 2), nullable=True)
    stock_quantity = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)


class ProviderScheduleModel(Base, TimestampMixin):
    """Weekly working window of a provider (day_of_week 0=Sunday)."""

    __tablename__ = "provider_schedules"

    id = Column(String(36), primary_key=True, default=generate_uuid_str)
    provider_id = Column(String(36), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)


class StockMovementModel(Base, TimestampMixin):
    __tablename__ = "stock_movements"

    id = Column(String(36), primary_key=True, default=generate_uuid_str)
    medication_id = Column(String(36), ForeignKey("medications.id"), nullable=False, index=True)
    movement_type = Column(String(20), nullable=False)
    quantity = Column(Integer, nullable=False)
    previous_stock = Column(Integer, nullable=False)
    new_stock = Column(Integer, nullable=False)
    reference_type = Column(String(50), nullable=True)
    reference_id = Column(String(36), nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(String(36), nullable=True)
