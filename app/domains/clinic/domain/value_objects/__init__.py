"""
Clinic Domain Value Objects
"""

from app.domains.clinic.domain.value_objects.schedule import (
    BusySlot,
    CalendarEvent,
    ScheduleWindow,
    ServiceInfo,
    add_minutes,
    format_slot,
    minutes_of,
    parse_slot,
    slot_from_minutes,
    weekday_index,
)
from app.domains.clinic.domain.value_objects.statuses import (
    AppointmentStatus,
    AppointmentType,
    BillingItemKind,
    NotificationTrigger,
    PaymentStatus,
    PrescriptionStatus,
    ServiceMode,
    StockMovementType,
)
from app.domains.clinic.domain.value_objects.vital_signs import VitalSigns

__all__ = [
    # Statuses
    "AppointmentStatus",
    "AppointmentType",
    "BillingItemKind",
    "NotificationTrigger",
    "PaymentStatus",
    "PrescriptionStatus",
    "ServiceMode",
    "StockMovementType",
    # Scheduling
    "BusySlot",
    "CalendarEvent",
    "ScheduleWindow",
    "ServiceInfo",
    "add_minutes",
    "format_slot",
    "minutes_of",
    "parse_slot",
    "slot_from_minutes",
    "weekday_index",
    # Measurements
    "VitalSigns",
]
