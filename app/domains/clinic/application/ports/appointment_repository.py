"""
Appointment Repository Port
"""

from datetime import date
from typing import Protocol, runtime_checkable

from app.domains.clinic.domain.entities.appointment import Appointment


@runtime_checkable
class IAppointmentRepository(Protocol):
    """Appointment repository interface."""

    async def find_by_id(self, appointment_id: str) -> Appointment | None:
        """
        Find appointment by ID.

        Args:
            appointment_id: Appointment identifier

        Returns:
            Appointment if found, None otherwise
        """
        ...

    async def find_by_patient_and_date(self, patient_id: str, appointment_date: date) -> list[Appointment]:
        """
        Appointments of a patient on a date, newest first.

        Used to detect an already booked follow-up.
        """
        ...

    async def find_by_provider_and_date(
        self,
        provider_id: str | None,
        appointment_date: date,
        include_cancelled: bool = False,
    ) -> list[Appointment]:
        """
        Appointments on a date, ordered by start time.

        Args:
            provider_id: Restrict to one provider; None returns every provider
            appointment_date: Date to look up
            include_cancelled: Also return cancelled appointments

        Returns:
            List of appointments
        """
        ...

    async def create(self, appointment: Appointment) -> Appointment:
        """Insert an appointment."""
        ...

    async def update(self, appointment: Appointment) -> Appointment:
        """Persist changes to an existing appointment."""
        ...
