"""
Disabled day predicate for date pickers.
"""

from collections.abc import Sequence
from datetime import date, timedelta

from ..value_objects.schedule import ScheduleWindow, weekday_index
from .slot_generator import active_windows


class DisabledDayPredicate:
    """
    Decides which dates cannot be picked for a provider.

    A date is disabled when it is before ``today``; when the provider has a
    schedule and no active window on that weekday; or when the provider has
    no schedule and the date falls on the clinic's closed weekday.
    """

    def __init__(self, closed_weekday: int = 0):
        self.closed_weekday = closed_weekday

    def is_disabled(self, day: date, today: date, windows: Sequence[ScheduleWindow] | None = None) -> bool:
        if day < today:
            return True
        working = active_windows(windows)
        if working:
            return weekday_index(day) not in {window.weekday for window in working}
        return weekday_index(day) == self.closed_weekday

    __call__ = is_disabled

    def disabled_days(
        self,
        start: date,
        end: date,
        today: date,
        windows: Sequence[ScheduleWindow] | None = None,
    ) -> list[date]:
        """All disabled dates in the inclusive range [start, end]."""
        days: list[date] = []
        current = start
        while current <= end:
            if self.is_disabled(current, today, windows):
                days.append(current)
            current += timedelta(days=1)
        return days
