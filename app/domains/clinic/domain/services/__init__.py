"""
Clinic Domain Services

Pure logic: slot generation, busy slot merging, day availability,
billing composition and stock deduction.
"""

from app.domains.clinic.domain.services.billing_composer import BillingComposer, ComposedBilling
from app.domains.clinic.domain.services.busy_slots import (
    APPOINTMENT_BUSY_REASON,
    CALENDAR_BUSY_REASON,
    BusySlotMerger,
    busy_slots_from_appointments,
    busy_slots_from_calendar_events,
    expand_range,
)
from app.domains.clinic.domain.services.day_availability import DisabledDayPredicate
from app.domains.clinic.domain.services.slot_generator import SlotGenerator, active_windows, windows_for_day
from app.domains.clinic.domain.services.stock_deduction import StockDeduction

__all__ = [
    "BillingComposer",
    "ComposedBilling",
    "APPOINTMENT_BUSY_REASON",
    "CALENDAR_BUSY_REASON",
    "BusySlotMerger",
    "busy_slots_from_appointments",
    "busy_slots_from_calendar_events",
    "expand_range",
    "DisabledDayPredicate",
    "SlotGenerator",
    "active_windows",
    "windows_for_day",
    "StockDeduction",
]
