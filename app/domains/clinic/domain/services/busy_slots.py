"""
Busy slot derivation and merging.

Occupied slots come from the provider's own appointments and from events
on the provider's external calendar. Callers may add more busy slots of
their own; every source is expanded to the same slot grid and merged.
"""

from collections.abc import Iterable, Sequence
from datetime import date

from ..entities.appointment import Appointment
from ..value_objects.schedule import BusySlot, CalendarEvent, minutes_of, slot_from_minutes

APPOINTMENT_BUSY_REASON = "มีนัดหมายแล้ว"
CALENDAR_BUSY_REASON = "ไม่ว่าง (Google Calendar)"

_END_OF_DAY = 23 * 60 + 59


def expand_range(start_minute: int, end_minute: int, interval_minutes: int, reason: str) -> list[BusySlot]:
    """Slots covering [start, end) on the interval grid."""
    return [
        BusySlot(time=slot_from_minutes(minute), reason=reason)
        for minute in range(start_minute, end_minute, interval_minutes)
    ]


def busy_slots_from_appointments(
    appointments: Iterable[Appointment],
    provider_id: str,
    day: date,
    interval_minutes: int,
    exclude_appointment_id: str | None = None,
) -> list[BusySlot]:
    """
    Slots occupied by the provider's non-cancelled appointments on ``day``.

    ``exclude_appointment_id`` drops the appointment being edited so it does
    not block its own time.
    """
    busy: list[BusySlot] = []
    for appointment in appointments:
        if appointment.is_cancelled or appointment.start_time is None:
            continue
        if appointment.provider_id != provider_id or appointment.appointment_date != day:
            continue
        if exclude_appointment_id and appointment.id == exclude_appointment_id:
            continue
        start, end = appointment.occupied_range(interval_minutes)
        reason = (appointment.patient_name or "").strip() or APPOINTMENT_BUSY_REASON
        busy.extend(expand_range(start, end, interval_minutes, reason))
    return busy


def busy_slots_from_calendar_events(
    events: Iterable[CalendarEvent],
    provider_id: str,
    day: date,
    interval_minutes: int,
    mirrored_event_ids: Iterable[str] = (),
) -> list[BusySlot]:
    """
    Slots blocked by external calendar events on ``day``.

    Events that mirror one of our own appointments are skipped, the
    appointment already accounts for them. All-day events block the whole day.
    """
    mirrored = {event_id for event_id in mirrored_event_ids if event_id}
    busy: list[BusySlot] = []
    for event in events:
        if event.is_cancelled or event.id in mirrored:
            continue
        if event.provider_id and event.provider_id != provider_id:
            continue
        if event.start.date() != day:
            continue

        if event.all_day:
            start, end = 0, _END_OF_DAY
        else:
            start = minutes_of(event.start.time())
            if event.end is None:
                end = start + interval_minutes
            elif event.end.date() > day:
                end = _END_OF_DAY
            else:
                end = minutes_of(event.end.time())
        busy.extend(expand_range(start, end, interval_minutes, event.summary or CALENDAR_BUSY_REASON))
    return busy


class BusySlotMerger:
    """
    Merges busy slot sources into one list without duplicate times.

    Sources are read in order and the first reason seen for a time wins,
    so fetched slots should be passed before externally supplied ones.
    """

    def merge(self, *sources: Sequence[BusySlot] | None) -> list[BusySlot]:
        seen: set[str] = set()
        merged: list[BusySlot] = []
        for source in sources:
            for slot in source or ():
                if slot.time in seen:
                    continue
                seen.add(slot.time)
                merged.append(slot)
        return merged

    @staticmethod
    def busy_times(slots: Iterable[BusySlot]) -> set[str]:
        return {slot.time for slot in slots}
