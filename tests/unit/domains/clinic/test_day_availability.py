# ============================================================================
# Tests for DisabledDayPredicate
# ============================================================================
"""Unit tests for which dates can be picked for a provider."""

from datetime import date, time

from app.domains.clinic.domain.services import DisabledDayPredicate
from app.domains.clinic.domain.value_objects import ScheduleWindow

TODAY = date(2025, 1, 13)  # Monday
SUNDAY = date(2025, 1, 19)
WEDNESDAY = date(2025, 1, 15)
THURSDAY = date(2025, 1, 16)

WEDNESDAY_WINDOW = ScheduleWindow(weekday=3, start_time=time(9, 0), end_time=time(12, 0))


class TestIsDisabled:
    def test_past_dates_always_disabled(self) -> None:
        predicate = DisabledDayPredicate()
        assert predicate.is_disabled(date(2025, 1, 8), TODAY, [WEDNESDAY_WINDOW]) is True
        assert predicate.is_disabled(date(2025, 1, 10), TODAY) is True

    def test_today_is_not_past(self) -> None:
        assert DisabledDayPredicate().is_disabled(TODAY, TODAY) is False

    def test_without_schedule_only_closed_weekday_disabled(self) -> None:
        predicate = DisabledDayPredicate(closed_weekday=0)
        assert predicate.is_disabled(SUNDAY, TODAY) is True
        assert predicate.is_disabled(WEDNESDAY, TODAY) is False

    def test_with_schedule_only_working_weekdays_enabled(self) -> None:
        predicate = DisabledDayPredicate()
        assert predicate.is_disabled(WEDNESDAY, TODAY, [WEDNESDAY_WINDOW]) is False
        assert predicate.is_disabled(THURSDAY, TODAY, [WEDNESDAY_WINDOW]) is True

    def test_schedule_overrides_closed_weekday(self) -> None:
        """Should enable Sunday when the provider works Sundays."""
        sunday_window = ScheduleWindow(weekday=0, start_time=time(9, 0), end_time=time(12, 0))
        assert DisabledDayPredicate().is_disabled(SUNDAY, TODAY, [sunday_window]) is False

    def test_inactive_windows_ignored(self) -> None:
        inactive = ScheduleWindow(weekday=4, start_time=time(9, 0), end_time=time(12, 0), is_active=False)
        predicate = DisabledDayPredicate()
        # Only inactive windows: treated as no schedule
        assert predicate.is_disabled(THURSDAY, TODAY, [inactive]) is False
        assert predicate.is_disabled(THURSDAY, TODAY, [inactive, WEDNESDAY_WINDOW]) is True

    def test_callable(self) -> None:
        predicate = DisabledDayPredicate()
        assert predicate(SUNDAY, TODAY) is True


class TestDisabledDays:
    def test_range_is_inclusive(self) -> None:
        days = DisabledDayPredicate().disabled_days(date(2025, 1, 12), SUNDAY, TODAY)
        # Sunday 12th is past and closed, Sunday 19th is closed
        assert days == [date(2025, 1, 12), SUNDAY]

    def test_with_schedule(self) -> None:
        days = DisabledDayPredicate().disabled_days(TODAY, SUNDAY, TODAY, [WEDNESDAY_WINDOW])
        assert WEDNESDAY not in days
        assert len(days) == 6
