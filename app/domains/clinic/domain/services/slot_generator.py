"""
Slot Generator for the Clinic Domain

Turns provider working-hour windows (or the clinic default hours) into the
candidate "HH:MM" slots of one date.
"""

from collections.abc import Sequence
from datetime import date, time

from app.core.domain import ValidationException

from ..value_objects.schedule import (
    ScheduleWindow,
    format_slot,
    minutes_of,
    slot_from_minutes,
    weekday_index,
)


def active_windows(windows: Sequence[ScheduleWindow] | None) -> list[ScheduleWindow]:
    return [window for window in windows or () if window.is_active]


def windows_for_day(windows: Sequence[ScheduleWindow] | None, day: date) -> list[ScheduleWindow]:
    """Active windows that apply to the weekday of ``day``."""
    weekday = weekday_index(day)
    return [window for window in active_windows(windows) if window.weekday == weekday]


class SlotGenerator:
    """
    Generates candidate slots for a provider on a date.

    A provider with at least one active window anywhere in the week "has a
    schedule": only its windows for the requested weekday are enumerated and
    a weekday without windows yields no slots. A provider without any active
    window falls back to the default opening hours.

    Example:
        ```python
        generator = SlotGenerator(interval_minutes=30)
        generator.generate(date(2025, 1, 15), windows=[])
        # ["09:00", "09:30", ..., "19:30"]
        ```
    """

    def __init__(
        self,
        interval_minutes: int = 30,
        default_start_hour: int = 9,
        default_end_hour: int = 20,
    ):
        if interval_minutes <= 0:
            raise ValidationException("Slot interval must be positive", field="interval_minutes")
        self.interval_minutes = interval_minutes
        self.default_start_hour = default_start_hour
        self.default_end_hour = default_end_hour

    def generate(self, day: date, windows: Sequence[ScheduleWindow] | None = None) -> list[str]:
        """
        Candidate slots for ``day``, sorted and without duplicates.

        Args:
            day: Date to generate slots for
            windows: All schedule windows of the provider (any weekday)

        Returns:
            Ascending list of "HH:MM" strings
        """
        if not active_windows(windows):
            return self._enumerate(self.default_start_hour * 60, self.default_end_hour * 60)

        slots: set[str] = set()
        for window in windows_for_day(windows, day):
            slots.update(self._enumerate(minutes_of(window.start_time), minutes_of(window.end_time)))
        return sorted(slots)

    def _enumerate(self, start_minute: int, end_minute: int) -> list[str]:
        # end is exclusive
        return [slot_from_minutes(m) for m in range(start_minute, end_minute, self.interval_minutes)]

    def is_within_schedule(self, windows: Sequence[ScheduleWindow] | None, day: date, slot: time) -> bool:
        """
        Check if ``slot`` falls inside a working window of ``day``.

        Without windows for that weekday the time is not restricted.
        """
        day_windows = windows_for_day(windows, day)
        if not day_windows:
            return True
        return any(window.covers(slot) for window in day_windows)

    def working_hours_text(self, windows: Sequence[ScheduleWindow] | None, day: date) -> str | None:
        """
        Human readable working hours of ``day``, e.g. "09:00-12:00, 13:00-17:00".

        None when the provider has no schedule at all.
        """
        if not active_windows(windows):
            return None
        day_windows = sorted(windows_for_day(windows, day), key=lambda w: w.start_time)
        return ", ".join(window.label for window in day_windows)

    def default_hours_text(self) -> str:
        return f"{format_slot(time(self.default_start_hour))}-{self.default_end_hour:02d}:00"
