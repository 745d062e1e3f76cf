"""
Scheduling value objects and time helpers.

Slots are "HH:MM" strings. Weekdays use 0=Sunday .. 6=Saturday, the
convention stored in provider schedules.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from app.core.domain import ValidationException, ValueObject
from app.domains.clinic.domain.value_objects.statuses import ServiceMode


def weekday_index(day: date) -> int:
    """Weekday of ``day`` with Sunday as 0."""
    return (day.weekday() + 1) % 7


def format_slot(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def parse_slot(value: str) -> time:
    """Parse "HH:MM" (seconds, if present, are ignored)."""
    try:
        hours, minutes = value.split(":")[:2]
        return time(int(hours), int(minutes))
    except (ValueError, AttributeError) as e:
        raise ValidationException(f"Invalid time slot: {value!r}", field="time") from e


def minutes_of(value: time) -> int:
    return value.hour * 60 + value.minute


def slot_from_minutes(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def add_minutes(start: time, minutes: int) -> time:
    """Add minutes to a time of day, wrapping past midnight."""
    return (datetime.combine(date.min, start) + timedelta(minutes=minutes)).time()


@dataclass(frozen=True)
class ScheduleWindow(ValueObject):
    """A provider's working window on one weekday."""

    weekday: int
    start_time: time
    end_time: time
    is_active: bool = True
    provider_id: str | None = None

    def _validate(self) -> None:
        if not 0 <= self.weekday <= 6:
            raise ValidationException(f"Weekday must be 0-6, got {self.weekday}", field="weekday")
        if self.end_time <= self.start_time:
            raise ValidationException("Schedule window must end after it starts", field="end_time")

    def covers(self, slot: time) -> bool:
        return self.start_time <= slot < self.end_time

    @property
    def label(self) -> str:
        return f"{format_slot(self.start_time)}-{format_slot(self.end_time)}"


@dataclass(frozen=True)
class BusySlot(ValueObject):
    """An occupied "HH:MM" slot with a human-readable reason."""

    time: str
    reason: str


@dataclass(frozen=True)
class CalendarEvent(ValueObject):
    """
    An event read from a provider's external calendar.

    All-day events carry ``all_day=True`` and cover the whole day.
    """

    id: str
    start: datetime
    end: datetime | None = None
    summary: str | None = None
    status: str | None = None
    provider_id: str | None = None
    all_day: bool = False

    @property
    def is_cancelled(self) -> bool:
        return self.status == "cancelled"


@dataclass(frozen=True)
class ServiceInfo(ValueObject):
    """Catalog entry for a treatment service."""

    id: str
    name: str
    price: Decimal = Decimal("0")
    duration_minutes: int | None = None
    service_mode: ServiceMode = ServiceMode.ONSITE

    @property
    def is_remote(self) -> bool:
        return self.service_mode == ServiceMode.ONLINE
