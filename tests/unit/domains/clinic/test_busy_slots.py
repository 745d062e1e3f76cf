# ============================================================================
# Tests for busy slot derivation and merging
# ============================================================================
"""Unit tests for busy slots from appointments, calendar events and merging."""

from datetime import date, datetime, time

from app.domains.clinic.domain.entities import Appointment
from app.domains.clinic.domain.services import (
    APPOINTMENT_BUSY_REASON,
    CALENDAR_BUSY_REASON,
    BusySlotMerger,
    busy_slots_from_appointments,
    busy_slots_from_calendar_events,
)
from app.domains.clinic.domain.value_objects import AppointmentStatus, BusySlot, CalendarEvent

DAY = date(2025, 1, 15)


def appointment(**overrides) -> Appointment:
    values = {
        "id": "appt-1",
        "patient_id": "patient-1",
        "provider_id": "dr-1",
        "appointment_date": DAY,
        "start_time": time(10, 0),
        "end_time": time(11, 0),
        "patient_name": "Somchai Jaidee",
    }
    values.update(overrides)
    return Appointment(**values)


def times(slots: list[BusySlot]) -> list[str]:
    return [slot.time for slot in slots]


class TestBusyFromAppointments:
    def test_expands_to_interval_grid(self) -> None:
        busy = busy_slots_from_appointments([appointment()], "dr-1", DAY, 30)
        assert times(busy) == ["10:00", "10:30"]
        assert busy[0].reason == "Somchai Jaidee"

    def test_missing_end_time_uses_one_interval(self) -> None:
        busy = busy_slots_from_appointments([appointment(end_time=None)], "dr-1", DAY, 30)
        assert times(busy) == ["10:00"]

    def test_cancelled_appointments_do_not_block(self) -> None:
        cancelled = appointment(status=AppointmentStatus.CANCELLED)
        assert busy_slots_from_appointments([cancelled], "dr-1", DAY, 30) == []

    def test_excluded_appointment_does_not_block_itself(self) -> None:
        busy = busy_slots_from_appointments([appointment()], "dr-1", DAY, 30, exclude_appointment_id="appt-1")
        assert busy == []

    def test_other_provider_and_date_ignored(self) -> None:
        others = [
            appointment(id="a", provider_id="dr-2"),
            appointment(id="b", appointment_date=date(2025, 1, 16)),
        ]
        assert busy_slots_from_appointments(others, "dr-1", DAY, 30) == []

    def test_blank_patient_name_uses_default_reason(self) -> None:
        busy = busy_slots_from_appointments([appointment(patient_name="  ")], "dr-1", DAY, 30)
        assert {slot.reason for slot in busy} == {APPOINTMENT_BUSY_REASON}


class TestBusyFromCalendar:
    def test_timed_event(self) -> None:
        event = CalendarEvent(
            id="ev-1",
            start=datetime(2025, 1, 15, 14, 0),
            end=datetime(2025, 1, 15, 15, 0),
            summary="Meeting",
        )
        busy = busy_slots_from_calendar_events([event], "dr-1", DAY, 30)
        assert times(busy) == ["14:00", "14:30"]
        assert busy[0].reason == "Meeting"

    def test_all_day_event_blocks_whole_day(self) -> None:
        event = CalendarEvent(id="ev-1", start=datetime(2025, 1, 15), all_day=True)
        busy = busy_slots_from_calendar_events([event], "dr-1", DAY, 30)
        assert busy[0].time == "00:00"
        assert busy[-1].time == "23:30"
        assert len(busy) == 48
        assert busy[0].reason == CALENDAR_BUSY_REASON

    def test_event_without_end_blocks_one_interval(self) -> None:
        event = CalendarEvent(id="ev-1", start=datetime(2025, 1, 15, 9, 0))
        assert times(busy_slots_from_calendar_events([event], "dr-1", DAY, 30)) == ["09:00"]

    def test_event_ending_next_day_blocks_until_midnight(self) -> None:
        event = CalendarEvent(id="ev-1", start=datetime(2025, 1, 15, 22, 0), end=datetime(2025, 1, 16, 2, 0))
        assert times(busy_slots_from_calendar_events([event], "dr-1", DAY, 30)) == [
            "22:00",
            "22:30",
            "23:00",
            "23:30",
        ]

    def test_mirrored_and_cancelled_events_skipped(self) -> None:
        events = [
            CalendarEvent(id="mirror", start=datetime(2025, 1, 15, 10, 0), end=datetime(2025, 1, 15, 11, 0)),
            CalendarEvent(
                id="gone",
                start=datetime(2025, 1, 15, 12, 0),
                end=datetime(2025, 1, 15, 13, 0),
                status="cancelled",
            ),
        ]
        busy = busy_slots_from_calendar_events(events, "dr-1", DAY, 30, mirrored_event_ids=["mirror"])
        assert busy == []

    def test_other_provider_event_skipped(self) -> None:
        event = CalendarEvent(
            id="ev-1",
            start=datetime(2025, 1, 15, 9, 0),
            end=datetime(2025, 1, 15, 10, 0),
            provider_id="dr-2",
        )
        assert busy_slots_from_calendar_events([event], "dr-1", DAY, 30) == []


class TestBusySlotMerger:
    def test_first_reason_wins(self) -> None:
        merger = BusySlotMerger()
        merged = merger.merge(
            [BusySlot(time="10:00", reason="calendar")],
            [BusySlot(time="10:00", reason="appointment"), BusySlot(time="10:30", reason="appointment")],
            [BusySlot(time="10:30", reason="external"), BusySlot(time="11:00", reason="external")],
        )
        assert [(s.time, s.reason) for s in merged] == [
            ("10:00", "calendar"),
            ("10:30", "appointment"),
            ("11:00", "external"),
        ]

    def test_merge_is_idempotent(self) -> None:
        merger = BusySlotMerger()
        sources = (
            [BusySlot(time="09:00", reason="a"), BusySlot(time="09:30", reason="a")],
            [BusySlot(time="09:30", reason="b"), BusySlot(time="10:00", reason="b")],
        )
        once = merger.merge(*sources)
        twice = merger.merge(*sources, *sources)
        assert merger.busy_times(once) == merger.busy_times(twice)
        assert once == twice

    def test_no_duplicate_times(self) -> None:
        merger = BusySlotMerger()
        merged = merger.merge([BusySlot(time="09:00", reason="a")] * 3, None, [])
        assert len(merged) == 1
        assert merger.busy_times(merged) == {"09:00"}

    def test_merge_order_does_not_change_busy_times(self) -> None:
        """Should report the same busy times whichever source comes first."""
        merger = BusySlotMerger()
        appointments = [BusySlot(time="09:00", reason="Somchai"), BusySlot(time="09:30", reason="Somchai")]
        calendar = [BusySlot(time="09:30", reason="Google Calendar"), BusySlot(time="10:00", reason="Google Calendar")]

        forward = merger.merge(appointments, calendar)
        backward = merger.merge(calendar, appointments)

        assert merger.busy_times(forward) == merger.busy_times(backward) == {"09:00", "09:30", "10:00"}
        assert {s.time: s.reason for s in forward}["09:30"] == "Somchai"
        assert {s.time: s.reason for s in backward}["09:30"] == "Google Calendar"
