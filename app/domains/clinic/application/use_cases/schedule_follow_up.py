"""
Schedule Follow-Up Use Case

Books the follow-up appointment of an encounter and runs its side steps:
billing, calendar sync, online meeting link and notification. Each side
step is independent; a failure in one is reported and the others still run.
"""

import logging
from datetime import date

from app.core.domain import AppointmentConflictException
from app.domains.clinic.application.dto.encounter_dtos import (
    CurrentActor,
    FollowUpRequest,
    SagaState,
    SagaStep,
)
from app.domains.clinic.application.ports import (
    CalendarEventDetails,
    IAppointmentRepository,
    IBillingRepository,
    ICalendarSync,
    INotificationDispatcher,
    IServiceCatalog,
)
from app.domains.clinic.application.use_cases import encounter_saga as messages
from app.domains.clinic.application.use_cases.encounter_saga import EncounterSaga
from app.domains.clinic.domain.entities.appointment import Appointment
from app.domains.clinic.domain.entities.billing import Billing
from app.domains.clinic.domain.services.billing_composer import BillingComposer
from app.domains.clinic.domain.value_objects.schedule import format_slot
from app.domains.clinic.domain.value_objects.statuses import AppointmentStatus, NotificationTrigger

logger = logging.getLogger(__name__)


class ScheduleFollowUpUseCase:
    """
    Use case for booking an encounter's follow-up appointment.

    Single Responsibility: follow-up booking and its side steps
    Dependency Inversion: depends on ports, not implementations
    """

    def __init__(
        self,
        appointment_repository: IAppointmentRepository,
        billing_repository: IBillingRepository,
        service_catalog: IServiceCatalog,
        calendar_sync: ICalendarSync,
        notifier: INotificationDispatcher,
        actor: CurrentActor,
        billing_composer: BillingComposer | None = None,
        conflict_check: bool = True,
        slot_interval_minutes: int = 30,
    ):
        self.appointments = appointment_repository
        self.billings = billing_repository
        self.service_catalog = service_catalog
        self.calendar_sync = calendar_sync
        self.notifier = notifier
        self.actor = actor
        self.billing_composer = billing_composer or BillingComposer()
        self.conflict_check = conflict_check
        self.slot_interval_minutes = slot_interval_minutes

    async def execute(
        self,
        saga: EncounterSaga,
        patient_id: str,
        follow_up_date: date,
        request: FollowUpRequest,
        notes: str | None = None,
    ) -> None:
        """
        Book the follow-up and record the outcome on ``saga``.

        Args:
            saga: Saga of the current encounter save
            patient_id: Patient of the encounter
            follow_up_date: Date chosen on the treatment
            request: Time, provider and services for the follow-up
            notes: Follow-up notes of the treatment
        """
        if request.start_time is None or not request.provider_id:
            if request.start_time is None:
                saga.warn(SagaStep.FOLLOW_UP, messages.FOLLOW_UP_NO_TIME)
            if not request.provider_id:
                saga.warn(SagaStep.FOLLOW_UP, messages.FOLLOW_UP_NO_PROVIDER)
            saga.advance(SagaState.FOLLOW_UP_SKIPPED)
            return

        candidate = Appointment(
            patient_id=patient_id,
            provider_id=request.provider_id,
            appointment_date=follow_up_date,
            start_time=request.start_time,
            end_time=Appointment.compute_end_time(request.start_time, request.total_duration_minutes),
            appointment_type=request.appointment_type or "follow_up",
            status=AppointmentStatus.SCHEDULED,
            chief_complaint=request.chief_complaint,
            location_id=request.location_id,
            notes=notes or request.notes,
        )

        try:
            if self.conflict_check:
                await self._ensure_slot_free(candidate)
            appointment = await self.appointments.create(candidate)
        except AppointmentConflictException as e:
            saga.warn(SagaStep.FOLLOW_UP, messages.FOLLOW_UP_SLOT_TAKEN, e)
            saga.advance(SagaState.FOLLOW_UP_FAILED)
            return
        except Exception as e:
            logger.error(f"Error creating follow-up appointment for patient {patient_id}: {e}", exc_info=True)
            saga.warn(SagaStep.FOLLOW_UP, messages.FOLLOW_UP_CREATE_FAILED, e)
            saga.advance(SagaState.FOLLOW_UP_FAILED)
            return

        saga.follow_up_appointment_id = appointment.id
        logger.info(f"Follow-up appointment {appointment.id} booked for {follow_up_date} {request.start_time}")

        await self._bill(saga, appointment, request)
        details = self._event_details(appointment, request)
        await self._sync_calendar(saga, appointment, details)
        await self._create_meeting_link(saga, appointment, details, request)
        await self._notify(saga, appointment)

        saga.advance(SagaState.FOLLOW_UP_DONE)

    async def _ensure_slot_free(self, candidate: Appointment) -> None:
        booked = await self.appointments.find_by_provider_and_date(candidate.provider_id, candidate.appointment_date)
        for existing in booked:
            if existing.is_cancelled or existing.start_time is None:
                continue
            if existing.overlaps(candidate, self.slot_interval_minutes):
                raise AppointmentConflictException(
                    provider_id=candidate.provider_id or "",
                    slot=f"{candidate.appointment_date} {format_slot(candidate.start_time)}",
                )

    async def _bill(self, saga: EncounterSaga, appointment: Appointment, request: FollowUpRequest) -> None:
        services = [s for s in request.services if s.service_id and s.unit_price > 0]
        if not services:
            return
        try:
            composed = self.billing_composer.compose(services, [], {})
            if composed.is_empty:
                return
            billing = Billing(
                patient_id=appointment.patient_id,
                appointment_id=appointment.id,
                billing_date=appointment.appointment_date,
                created_by=self.actor.user_id,
                items=composed.items,
                subtotal=composed.subtotal,
                total=composed.total,
            )
            created = await self.billings.create(billing)
            saga.follow_up_billing_id = created.id
        except Exception as e:
            logger.error(f"Error creating billing for follow-up {appointment.id}: {e}", exc_info=True)
            saga.warn(SagaStep.FOLLOW_UP_BILLING, messages.FOLLOW_UP_BILLING_FAILED, e)

    async def _sync_calendar(
        self, saga: EncounterSaga, appointment: Appointment, details: CalendarEventDetails
    ) -> None:
        if not appointment.provider_id:
            return
        try:
            event_id = await self.calendar_sync.sync_event(appointment.id, details, appointment.provider_id)
            if event_id:
                appointment.attach_calendar_event(event_id)
                await self.appointments.update(appointment)
        except Exception as e:
            logger.warning(f"Calendar sync failed for appointment {appointment.id}: {e}")
            saga.warn(SagaStep.CALENDAR_SYNC, messages.CALENDAR_SYNC_FAILED, e)

    async def _create_meeting_link(
        self,
        saga: EncounterSaga,
        appointment: Appointment,
        details: CalendarEventDetails,
        request: FollowUpRequest,
    ) -> None:
        service_ids = [s.service_id for s in request.services if s.service_id]
        if not service_ids or not appointment.provider_id:
            return
        try:
            catalog = await self.service_catalog.get_services(service_ids)
            if not any(info.is_remote for info in catalog.values()):
                return
            link = await self.calendar_sync.create_meeting_link(appointment.id, details, appointment.provider_id)
            if link:
                appointment.attach_meeting_link(link)
                await self.appointments.update(appointment)
                saga.meeting_link = link
        except Exception as e:
            logger.warning(f"Meeting link creation failed for appointment {appointment.id}: {e}")
            saga.warn(SagaStep.MEETING_LINK, messages.MEETING_LINK_FAILED, e)

    async def _notify(self, saga: EncounterSaga, appointment: Appointment) -> None:
        try:
            await self.notifier.notify(appointment.id, NotificationTrigger.CREATED)
        except Exception as e:
            logger.warning(f"Notification failed for appointment {appointment.id}: {e}")
            saga.warn(SagaStep.NOTIFICATION, messages.NOTIFICATION_FAILED, e)

    @staticmethod
    def _event_details(appointment: Appointment, request: FollowUpRequest) -> CalendarEventDetails:
        return CalendarEventDetails(
            appointment_date=appointment.appointment_date,
            start_time=appointment.start_time,
            end_time=appointment.end_time,
            appointment_type=appointment.appointment_type,
            chief_complaint=appointment.chief_complaint,
            notes=appointment.notes,
            patient_name=appointment.patient_name,
            service_names=[s.service_name for s in request.services],
        )
