"""
Clinic API Schemas

Pydantic schemas for API request/response validation.
"""

from datetime import date, time
from decimal import Decimal

from pydantic import Base64Bytes, BaseModel, Field

from app.domains.clinic.application.dto import (
    AttachmentUpload,
    BookableSlotsResult,
    EncounterForm,
    EncounterResult,
    FollowUpRequest,
    LinkedAppointmentEdit,
    MedicationLine,
    ServiceSelection,
)
from app.domains.clinic.domain.value_objects import VitalSigns

# =============================================================================
# Encounter request
# =============================================================================


class VitalSignsSchema(BaseModel):
    pulse: float | None = None
    systolic: float | None = None
    diastolic: float | None = None
    weight: float | None = None
    height: float | None = None
    temperature: float | None = None
    respiratory_rate: float | None = None
    oxygen_saturation: float | None = None


class ServiceSelectionSchema(BaseModel):
    """Treatment service line as priced on the screen."""

    service_id: str | None = None
    service_name: str
    unit_price: Decimal = Decimal("0")
    quantity: int = Field(default=1, ge=1)
    duration_minutes: int | None = Field(default=None, ge=0)

    def to_dto(self) -> ServiceSelection:
        return ServiceSelection(
            service_id=self.service_id,
            service_name=self.service_name,
            unit_price=self.unit_price,
            quantity=self.quantity,
            duration_minutes=self.duration_minutes,
        )


class MedicationLineSchema(BaseModel):
    medication_id: str | None = None
    medication_name: str
    quantity: int = Field(default=1, ge=1)
    dosage: str | None = None
    frequency: str | None = None
    duration: str | None = None
    instructions: str | None = None

    def to_dto(self) -> MedicationLine:
        return MedicationLine(**self.model_dump())


class AttachmentSchema(BaseModel):
    """File attached to the treatment, content base64 encoded."""

    file_name: str = Field(..., min_length=1)
    content: Base64Bytes
    content_type: str | None = None


class FollowUpSchema(BaseModel):
    start_time: time | None = None
    provider_id: str | None = None
    appointment_type: str = "follow_up"
    chief_complaint: str | None = None
    location_id: str | None = None
    notes: str | None = None
    services: list[ServiceSelectionSchema] = Field(default_factory=list)


class LinkedAppointmentEditSchema(BaseModel):
    appointment_date: date | None = None
    start_time: time | None = None
    appointment_type: str | None = None
    provider_id: str | None = None
    chief_complaint: str | None = None
    location_id: str | None = None
    notes: str | None = None


class EncounterRequest(BaseModel):
    """Treatment screen save request schema."""

    patient_id: str = Field(..., min_length=1)
    treatment_date: date
    provider_id: str | None = None
    appointment_id: str | None = None

    symptoms: str | None = None
    diagnosis: str | None = None
    diagnosis_code: str | None = None
    treatment_plan: str | None = None
    procedures: str | None = None
    clinical_notes: str | None = None
    vital_signs: VitalSignsSchema = Field(default_factory=VitalSignsSchema)

    services: list[ServiceSelectionSchema] = Field(default_factory=list)
    medications: list[MedicationLineSchema] = Field(default_factory=list)
    attachments: list[AttachmentSchema] = Field(default_factory=list)

    follow_up_date: date | None = None
    follow_up_notes: str | None = None
    follow_up: FollowUpSchema = Field(default_factory=FollowUpSchema)

    unlock_linked_appointment: bool = False
    linked_appointment_edit: LinkedAppointmentEditSchema | None = None

    def to_form(self) -> EncounterForm:
        """Convert to the application form. Raises ValidationException on invalid vitals."""
        linked_edit = None
        if self.linked_appointment_edit is not None:
            linked_edit = LinkedAppointmentEdit(**self.linked_appointment_edit.model_dump())

        return EncounterForm(
            patient_id=self.patient_id,
            treatment_date=self.treatment_date,
            provider_id=self.provider_id,
            appointment_id=self.appointment_id,
            symptoms=self.symptoms,
            diagnosis=self.diagnosis,
            diagnosis_code=self.diagnosis_code,
            treatment_plan=self.treatment_plan,
            procedures=self.procedures,
            clinical_notes=self.clinical_notes,
            vital_signs=VitalSigns.from_mapping(self.vital_signs.model_dump()),
            services=[s.to_dto() for s in self.services],
            medications=[m.to_dto() for m in self.medications],
            attachments=[
                AttachmentUpload(file_name=a.file_name, content=a.content, content_type=a.content_type)
                for a in self.attachments
            ],
            follow_up_date=self.follow_up_date,
            follow_up_notes=self.follow_up_notes,
            follow_up=FollowUpRequest(
                start_time=self.follow_up.start_time,
                provider_id=self.follow_up.provider_id,
                appointment_type=self.follow_up.appointment_type,
                chief_complaint=self.follow_up.chief_complaint,
                location_id=self.follow_up.location_id,
                notes=self.follow_up.notes,
                services=[s.to_dto() for s in self.follow_up.services],
            ),
            unlock_linked_appointment=self.unlock_linked_appointment,
            linked_appointment_edit=linked_edit,
        )


# =============================================================================
# Responses
# =============================================================================


class SagaWarningResponse(BaseModel):
    step: str
    message: str


class EncounterResponse(BaseModel):
    """Encounter save response schema."""

    treatment_id: str
    state: str
    states: list[str]
    warnings: list[SagaWarningResponse] = Field(default_factory=list)
    saved: list[str] = Field(default_factory=list)
    prescription_id: str | None = None
    billing_id: str | None = None
    follow_up_appointment_id: str | None = None
    follow_up_billing_id: str | None = None
    follow_up_locked: bool = False
    meeting_link: str | None = None
    uploaded_files: int = 0

    @classmethod
    def from_result(cls, result: EncounterResult) -> "EncounterResponse":
        return cls(
            treatment_id=result.treatment_id,
            state=result.final_state.value,
            states=[s.value for s in result.states],
            warnings=[SagaWarningResponse(**w.to_dict()) for w in result.warnings],
            saved=result.confirmation_parts(),
            prescription_id=result.prescription_id,
            billing_id=result.billing_id,
            follow_up_appointment_id=result.follow_up_appointment_id,
            follow_up_billing_id=result.follow_up_billing_id,
            follow_up_locked=result.follow_up_locked,
            meeting_link=result.meeting_link,
            uploaded_files=result.uploaded_files,
        )


class BusySlotResponse(BaseModel):
    time: str
    reason: str

    class Config:
        from_attributes = True


class BookableSlotsResponse(BaseModel):
    """Slot grid of a provider on one day."""

    date: date
    slots: list[str]
    available: list[str]
    busy: list[BusySlotResponse]
    is_disabled: bool
    is_day_off: bool
    has_schedule: bool
    working_hours: str | None = None
    calendar_unavailable: bool = False

    @classmethod
    def from_result(cls, result: BookableSlotsResult) -> "BookableSlotsResponse":
        return cls(
            date=result.day,
            slots=result.slots,
            available=result.available,
            busy=[BusySlotResponse.model_validate(b) for b in result.busy],
            is_disabled=result.is_disabled,
            is_day_off=result.is_day_off,
            has_schedule=result.has_schedule,
            working_hours=result.working_hours,
            calendar_unavailable=result.calendar_unavailable,
        )


class DisabledDaysResponse(BaseModel):
    provider_id: str
    start: date
    end: date
    disabled_days: list[date]


class StockMovementResponse(BaseModel):
    """Stock movement response schema."""

    id: str | None = None
    medication_id: str
    movement_type: str
    quantity: int
    previous_stock: int
    new_stock: int
    reference_id: str | None = None
    notes: str | None = None

    class Config:
        from_attributes = True


class DispenseResponse(BaseModel):
    prescription_id: str
    status: str
    movements: list[StockMovementResponse]
