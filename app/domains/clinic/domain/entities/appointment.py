"""
Appointment Entity for the Clinic Domain

Follow-up appointments are created by the encounter workflow; the
originating appointment of a treatment can be edited from it when unlocked.
"""

from dataclasses import dataclass
from datetime import date, time

from app.core.domain import AggregateRoot, InvalidOperationException

from ..value_objects.schedule import add_minutes, minutes_of
from ..value_objects.statuses import AppointmentStatus, AppointmentType


@dataclass(eq=False)
class Appointment(AggregateRoot[str]):
    """
    Appointment aggregate root.

    Example:
        ```python
        appointment = Appointment(
            patient_id="p-1",
            provider_id="dr-1",
            appointment_date=date(2025, 1, 15),
            start_time=time(10, 0),
            end_time=time(10, 30),
        )
        ```
    """

    patient_id: str = ""
    provider_id: str | None = None
    appointment_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    appointment_type: str = AppointmentType.FOLLOW_UP.value
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    chief_complaint: str | None = None
    notes: str | None = None
    location_id: str | None = None
    patient_name: str | None = None

    # External links
    calendar_event_id: str | None = None
    meeting_link: str | None = None

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.CANCELLED

    def occupied_range(self, default_minutes: int) -> tuple[int, int]:
        """
        Occupied [start, end) in minutes since midnight.

        Appointments without an end time occupy ``default_minutes``.
        """
        if self.start_time is None:
            raise InvalidOperationException("occupied_range", "no start time")
        start = minutes_of(self.start_time)
        end = minutes_of(self.end_time) if self.end_time else start + default_minutes
        if end <= start:
            end = start + default_minutes
        return start, end

    def overlaps(self, other: "Appointment", default_minutes: int) -> bool:
        """Check if two appointments on the same date overlap in time."""
        if self.appointment_date != other.appointment_date:
            return False
        start, end = self.occupied_range(default_minutes)
        other_start, other_end = other.occupied_range(default_minutes)
        return start < other_end and other_start < end

    def apply_edit(
        self,
        appointment_date: date | None = None,
        start_time: time | None = None,
        appointment_type: str | None = None,
        provider_id: str | None = None,
        chief_complaint: str | None = None,
        location_id: str | None = None,
        notes: str | None = None,
    ) -> None:
        """
        Apply an edit coming from the encounter screen.

        Date, time and type keep their current value when not given; the
        remaining fields are replaced as submitted.
        """
        if self.is_cancelled:
            raise InvalidOperationException("edit", self.status.value)
        if appointment_date is not None:
            self.appointment_date = appointment_date
        if start_time is not None:
            self.start_time = start_time
        if appointment_type:
            self.appointment_type = appointment_type
        self.provider_id = provider_id
        self.chief_complaint = chief_complaint
        self.location_id = location_id
        self.notes = notes
        self.touch()

    def attach_calendar_event(self, event_id: str) -> None:
        self.calendar_event_id = event_id
        self.touch()

    def attach_meeting_link(self, link: str) -> None:
        self.meeting_link = link
        self.touch()

    @staticmethod
    def compute_end_time(start_time: time, duration_minutes: int) -> time | None:
        """End of an appointment lasting ``duration_minutes``; None for zero duration."""
        if duration_minutes <= 0:
            return None
        return add_minutes(start_time, duration_minutes)
