"""
Clinic status and kind enumerations.

Values match the strings stored in the database and exchanged with the
edge functions.
"""

from app.core.domain import StatusEnum


class PrescriptionStatus(StatusEnum):
    """Prescription lifecycle."""

    PENDING = "pending"
    DISPENSED = "dispensed"
    CANCELLED = "cancelled"

    def can_transition_to(self, target: "PrescriptionStatus") -> bool:
        return target in _PRESCRIPTION_TRANSITIONS.get(self, set())


_PRESCRIPTION_TRANSITIONS: dict[PrescriptionStatus, set[PrescriptionStatus]] = {
    PrescriptionStatus.PENDING: {PrescriptionStatus.DISPENSED, PrescriptionStatus.CANCELLED},
    PrescriptionStatus.DISPENSED: set(),
    PrescriptionStatus.CANCELLED: set(),
}


class PaymentStatus(StatusEnum):
    PENDING = "pending"
    PAID = "paid"
    PARTIAL = "partial"
    CANCELLED = "cancelled"


class AppointmentStatus(StatusEnum):
    """Appointment lifecycle. Cancelled appointments never occupy a slot."""

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"

    @property
    def occupies_slot(self) -> bool:
        return self != AppointmentStatus.CANCELLED


class AppointmentType(StatusEnum):
    CONSULTATION = "consultation"
    THERAPY = "therapy"
    FOLLOW_UP = "follow_up"
    EMERGENCY = "emergency"


class BillingItemKind(StatusEnum):
    """Kind of a billing line. Treatment services are stored as "treatment"."""

    TREATMENT_SERVICE = "treatment"
    MEDICATION = "medication"


class ServiceMode(StatusEnum):
    ONSITE = "onsite"
    ONLINE = "online"


class NotificationTrigger(StatusEnum):
    CREATED = "created"
    CONFIRMED = "confirmed"
    UPDATED = "updated"
    CANCELLED = "cancelled"


class StockMovementType(StatusEnum):
    IN = "in"
    OUT = "out"
    ADJUSTMENT = "adjustment"
