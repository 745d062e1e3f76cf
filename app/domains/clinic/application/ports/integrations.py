"""
External integration ports: calendar, notifications, file storage.

Implementations talk to edge functions and object storage over HTTP and
raise IntegrationException on failure.
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import Protocol, runtime_checkable

from app.domains.clinic.domain.value_objects.schedule import CalendarEvent
from app.domains.clinic.domain.value_objects.statuses import NotificationTrigger


@dataclass(frozen=True)
class CalendarEventDetails:
    """Appointment data pushed to a provider's calendar."""

    appointment_date: date
    start_time: time
    end_time: time | None = None
    appointment_type: str | None = None
    chief_complaint: str | None = None
    notes: str | None = None
    patient_name: str | None = None
    service_names: list[str] = field(default_factory=list)


@runtime_checkable
class ICalendarSync(Protocol):
    """Provider calendar integration."""

    async def sync_event(
        self,
        appointment_id: str,
        details: CalendarEventDetails,
        provider_id: str,
        existing_event_id: str | None = None,
    ) -> str | None:
        """
        Create (or update) the calendar event of an appointment.

        Returns:
            External event ID, or None when the provider has no calendar
        """
        ...

    async def create_meeting_link(
        self,
        appointment_id: str,
        details: CalendarEventDetails,
        provider_id: str,
    ) -> str | None:
        """
        Create an online meeting for a remote appointment.

        Returns:
            Meeting URL, or None when none could be created
        """
        ...

    async def fetch_events(self, provider_id: str, day: date) -> list[CalendarEvent]:
        """Events on the provider's calendar for one day."""
        ...


@runtime_checkable
class INotificationDispatcher(Protocol):
    """Appointment notification (email) dispatch. Fire and forget."""

    async def notify(self, appointment_id: str, trigger: NotificationTrigger) -> None:
        ...


@runtime_checkable
class IFileStorage(Protocol):
    """Object storage for treatment attachments."""

    async def upload(self, path: str, content: bytes, content_type: str | None = None) -> str:
        """
        Upload bytes under ``path``.

        Returns:
            Public URL of the stored object
        """
        ...
