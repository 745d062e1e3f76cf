"""
Appointment Repository Implementation

SQLAlchemy implementation of IAppointmentRepository.
"""

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import EntityNotFoundException, generate_uuid_str
from app.domains.clinic.application.ports.appointment_repository import IAppointmentRepository
from app.domains.clinic.domain.entities.appointment import Appointment
from app.domains.clinic.domain.value_objects.statuses import AppointmentStatus
from app.domains.clinic.infrastructure.persistence.sqlalchemy.models import AppointmentModel

logger = logging.getLogger(__name__)


class SQLAlchemyAppointmentRepository(IAppointmentRepository):
    """
    SQLAlchemy implementation of appointment repository.

    Handles all appointment data persistence operations. Writes commit
    immediately so external functions reading the row by id can see it.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, appointment_id: str) -> Appointment | None:
        """Find appointment by ID."""
        result = await self.session.execute(select(AppointmentModel).where(AppointmentModel.id == appointment_id))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find_by_patient_and_date(self, patient_id: str, appointment_date: date) -> list[Appointment]:
        """Appointments of a patient on a date, newest first."""
        result = await self.session.execute(
            select(AppointmentModel)
            .where(
                AppointmentModel.patient_id == patient_id,
                AppointmentModel.appointment_date == appointment_date,
            )
            .order_by(AppointmentModel.created_at.desc())
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def find_by_provider_and_date(
        self,
        provider_id: str | None,
        appointment_date: date,
        include_cancelled: bool = False,
    ) -> list[Appointment]:
        """Appointments on a date ordered by start time."""
        query = select(AppointmentModel).where(AppointmentModel.appointment_date == appointment_date)

        if provider_id:
            query = query.where(AppointmentModel.provider_id == provider_id)

        if not include_cancelled:
            query = query.where(AppointmentModel.status != AppointmentStatus.CANCELLED.value)

        query = query.order_by(AppointmentModel.start_time)

        result = await self.session.execute(query)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def create(self, appointment: Appointment) -> Appointment:
        """Insert an appointment."""
        model = AppointmentModel(id=generate_uuid_str(), patient_id=appointment.patient_id)
        self._apply(model, appointment)
        self.session.add(model)
        await self._commit(f"creating appointment for patient {appointment.patient_id}")

        appointment.id = model.id
        logger.info(f"Appointment {model.id} created for {appointment.appointment_date} {appointment.start_time}")
        return appointment

    async def update(self, appointment: Appointment) -> Appointment:
        """Persist changes to an appointment."""
        model = await self.session.get(AppointmentModel, appointment.id)
        if model is None:
            raise EntityNotFoundException("Appointment", appointment.id)
        self._apply(model, appointment)
        await self._commit(f"updating appointment {appointment.id}")
        appointment.increment_version()
        return appointment

    async def _commit(self, action: str) -> None:
        try:
            await self.session.commit()
        except Exception as e:
            logger.error(f"Error {action}: {e}")
            await self.session.rollback()
            raise

    @staticmethod
    def _apply(model: AppointmentModel, appointment: Appointment) -> None:
        model.provider_id = appointment.provider_id
        model.appointment_date = appointment.appointment_date
        model.start_time = appointment.start_time
        model.end_time = appointment.end_time
        model.appointment_type = appointment.appointment_type
        model.status = appointment.status.value
        model.chief_complaint = appointment.chief_complaint
        model.notes = appointment.notes
        model.location_id = appointment.location_id
        model.google_event_id = appointment.calendar_event_id
        model.meet_link = appointment.meeting_link

    def _to_entity(self, model: AppointmentModel) -> Appointment:
        """Convert model to entity."""
        patient = getattr(model, "patient", None)
        return Appointment(
            id=model.id,
            patient_id=model.patient_id,
            provider_id=model.provider_id,
            appointment_date=model.appointment_date,
            start_time=model.start_time,
            end_time=model.end_time,
            appointment_type=model.appointment_type or "consultation",
            status=AppointmentStatus.from_string(model.status or "scheduled"),
            chief_complaint=model.chief_complaint,
            notes=model.notes,
            location_id=model.location_id,
            patient_name=patient.full_name if patient is not None else None,
            calendar_event_id=model.google_event_id,
            meeting_link=model.meet_link,
        )
