# ============================================================================
# SCOPE: APPLICATION LAYER (Clinic)
# Description: Data Transfer Objects for the encounter workflow and slots.
# ============================================================================
"""Encounter DTOs.

Input forms submitted from the treatment screen and the results returned
by the encounter workflow and the availability queries.
"""

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from enum import Enum
from typing import Any

from app.domains.clinic.domain.value_objects.schedule import BusySlot
from app.domains.clinic.domain.value_objects.statuses import AppointmentType
from app.domains.clinic.domain.value_objects.vital_signs import VitalSigns

# =============================================================================
# Request DTOs
# =============================================================================


@dataclass(frozen=True)
class CurrentActor:
    """The signed-in user performing the action."""

    user_id: str | None = None


@dataclass(frozen=True)
class MedicationLine:
    """A medication chosen on the form. Lines without a medication ID or name are ignored."""

    medication_id: str | None
    medication_name: str
    quantity: int = 1
    dosage: str | None = None
    frequency: str | None = None
    duration: str | None = None
    instructions: str | None = None

    @property
    def is_resolved(self) -> bool:
        return bool(self.medication_id and self.medication_name)


@dataclass(frozen=True)
class ServiceSelection:
    """A treatment service chosen on the form, priced as shown to the user."""

    service_id: str | None
    service_name: str
    unit_price: Decimal = Decimal("0")
    quantity: int = 1
    duration_minutes: int | None = None


@dataclass(frozen=True)
class AttachmentUpload:
    file_name: str
    content: bytes
    content_type: str | None = None

    @property
    def extension(self) -> str:
        _, dot, ext = self.file_name.rpartition(".")
        return ext.lower() if dot and ext else "bin"


@dataclass(frozen=True)
class FollowUpRequest:
    """Follow-up booking details. The date lives on the treatment itself."""

    start_time: time | None = None
    provider_id: str | None = None
    appointment_type: str = AppointmentType.FOLLOW_UP.value
    chief_complaint: str | None = None
    location_id: str | None = None
    notes: str | None = None
    services: list[ServiceSelection] = field(default_factory=list)

    @property
    def total_duration_minutes(self) -> int:
        return sum((service.duration_minutes or 0) * service.quantity for service in self.services)


@dataclass(frozen=True)
class LinkedAppointmentEdit:
    """Edits to the appointment the treatment originated from."""

    appointment_date: date | None = None
    start_time: time | None = None
    appointment_type: str | None = None
    provider_id: str | None = None
    chief_complaint: str | None = None
    location_id: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class EncounterForm:
    """Everything submitted by one save of the treatment screen."""

    patient_id: str
    treatment_date: date
    provider_id: str | None = None
    appointment_id: str | None = None

    symptoms: str | None = None
    diagnosis: str | None = None
    diagnosis_code: str | None = None
    treatment_plan: str | None = None
    procedures: str | None = None
    clinical_notes: str | None = None
    vital_signs: VitalSigns = field(default_factory=VitalSigns)

    services: list[ServiceSelection] = field(default_factory=list)
    medications: list[MedicationLine] = field(default_factory=list)
    attachments: list[AttachmentUpload] = field(default_factory=list)

    follow_up_date: date | None = None
    follow_up_notes: str | None = None
    follow_up: FollowUpRequest = field(default_factory=FollowUpRequest)

    unlock_linked_appointment: bool = False
    linked_appointment_edit: LinkedAppointmentEdit | None = None

    def resolved_medications(self) -> list[MedicationLine]:
        return [line for line in self.medications if line.is_resolved]

    def clinical_fields(self) -> dict[str, Any]:
        """Editable treatment fields in the shape Treatment.patch accepts."""
        return {
            "treatment_date": self.treatment_date,
            "symptoms": self.symptoms,
            "diagnosis": self.diagnosis,
            "diagnosis_code": self.diagnosis_code,
            "treatment_plan": self.treatment_plan,
            "procedures": self.procedures,
            "clinical_notes": self.clinical_notes,
            "vital_signs": self.vital_signs.to_sparse_dict(),
            "follow_up_date": self.follow_up_date,
            "follow_up_notes": self.follow_up_notes,
        }


@dataclass(frozen=True)
class BookableSlotsRequest:
    provider_id: str
    day: date
    today: date | None = None
    exclude_appointment_id: str | None = None
    external_busy: list[BusySlot] = field(default_factory=list)


# =============================================================================
# Workflow state
# =============================================================================


class SagaStep(str, Enum):
    """Steps that can report a warning."""

    TREATMENT = "treatment"
    ATTACHMENTS = "attachments"
    PRESCRIPTION = "prescription"
    BILLING = "billing"
    LINKED_APPOINTMENT = "linked_appointment"
    FOLLOW_UP = "follow_up"
    FOLLOW_UP_BILLING = "follow_up_billing"
    CALENDAR_SYNC = "calendar_sync"
    MEETING_LINK = "meeting_link"
    NOTIFICATION = "notification"


class SagaState(str, Enum):
    DRAFT = "draft"
    TREATMENT_SAVED = "treatment_saved"
    PRESCRIPTION_DONE = "prescription_done"
    PRESCRIPTION_SKIPPED = "prescription_skipped"
    PRESCRIPTION_FAILED = "prescription_failed"
    BILLING_DONE = "billing_done"
    BILLING_SKIPPED = "billing_skipped"
    BILLING_FAILED = "billing_failed"
    FOLLOW_UP_DONE = "follow_up_done"
    FOLLOW_UP_SKIPPED = "follow_up_skipped"
    FOLLOW_UP_FAILED = "follow_up_failed"
    COMPLETE = "complete"


@dataclass(frozen=True)
class SagaWarning:
    """A non-blocking failure reported back to the user."""

    step: SagaStep
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"step": self.step.value, "message": self.message}


# =============================================================================
# Result DTOs
# =============================================================================


@dataclass
class EncounterResult:
    """Outcome of one create or update of an encounter."""

    treatment_id: str
    warnings: list[SagaWarning] = field(default_factory=list)
    states: list[SagaState] = field(default_factory=list)
    prescription_id: str | None = None
    billing_id: str | None = None
    follow_up_appointment_id: str | None = None
    follow_up_billing_id: str | None = None
    meeting_link: str | None = None
    follow_up_locked: bool = False
    uploaded_files: int = 0

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def final_state(self) -> SagaState:
        return self.states[-1] if self.states else SagaState.DRAFT

    def warning_messages(self) -> list[str]:
        return [warning.message for warning in self.warnings]

    def confirmation_parts(self) -> list[str]:
        """Names of the records produced, for the success message."""
        parts = ["treatment"]
        if self.prescription_id:
            parts.append("prescription")
        if self.billing_id:
            parts.append("billing")
        if self.follow_up_appointment_id and not self.follow_up_locked:
            parts.append("follow-up appointment")
        return parts


@dataclass
class BookableSlotsResult:
    day: date
    slots: list[str] = field(default_factory=list)
    busy: list[BusySlot] = field(default_factory=list)
    available: list[str] = field(default_factory=list)
    is_disabled: bool = False
    has_schedule: bool = False
    working_hours: str | None = None
    calendar_unavailable: bool = False

    @property
    def is_day_off(self) -> bool:
        """The provider keeps a schedule but does not work this day."""
        return self.has_schedule and not self.slots
