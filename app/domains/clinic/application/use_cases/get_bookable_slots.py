"""
Get Bookable Slots Use Case

Candidate slots of a provider on a date, the busy ones among them and
whether the date can be picked at all.
"""

import logging
from datetime import date

from app.domains.clinic.application.dto.encounter_dtos import BookableSlotsRequest, BookableSlotsResult
from app.domains.clinic.application.ports import IAppointmentRepository, ICalendarSync, IProviderScheduleSource
from app.domains.clinic.domain.services.busy_slots import (
    BusySlotMerger,
    busy_slots_from_appointments,
    busy_slots_from_calendar_events,
)
from app.domains.clinic.domain.services.day_availability import DisabledDayPredicate
from app.domains.clinic.domain.services.slot_generator import SlotGenerator, active_windows

logger = logging.getLogger(__name__)


class GetBookableSlotsUseCase:
    """
    Use case for a provider's slot grid on one day.

    Calendar events are optional input: when the calendar cannot be read
    the result is still returned, flagged with ``calendar_unavailable``.
    """

    def __init__(
        self,
        schedule_source: IProviderScheduleSource,
        appointment_repository: IAppointmentRepository,
        slot_generator: SlotGenerator,
        disabled_day_predicate: DisabledDayPredicate,
        calendar_sync: ICalendarSync | None = None,
        merger: BusySlotMerger | None = None,
    ):
        self.schedule_source = schedule_source
        self.appointments = appointment_repository
        self.slot_generator = slot_generator
        self.disabled_day_predicate = disabled_day_predicate
        self.calendar_sync = calendar_sync
        self.merger = merger or BusySlotMerger()

    async def execute(self, request: BookableSlotsRequest) -> BookableSlotsResult:
        """
        Compute the slot grid.

        Args:
            request: Provider, day and optional caller supplied busy slots

        Returns:
            Candidate, busy and available slots with day flags
        """
        today = request.today or date.today()
        interval = self.slot_generator.interval_minutes

        windows = await self.schedule_source.get_windows(request.provider_id)
        slots = self.slot_generator.generate(request.day, windows)

        appointments = await self.appointments.find_by_provider_and_date(request.provider_id, request.day)
        from_appointments = busy_slots_from_appointments(
            appointments,
            request.provider_id,
            request.day,
            interval,
            exclude_appointment_id=request.exclude_appointment_id,
        )

        from_calendar = []
        calendar_unavailable = False
        if self.calendar_sync is not None:
            try:
                events = await self.calendar_sync.fetch_events(request.provider_id, request.day)
                from_calendar = busy_slots_from_calendar_events(
                    events,
                    request.provider_id,
                    request.day,
                    interval,
                    mirrored_event_ids=[a.calendar_event_id for a in appointments if a.calendar_event_id],
                )
            except Exception as e:
                logger.warning(f"Calendar events unavailable for provider {request.provider_id}: {e}")
                calendar_unavailable = True

        busy = self.merger.merge(from_calendar, from_appointments, request.external_busy)
        busy_times = self.merger.busy_times(busy)

        return BookableSlotsResult(
            day=request.day,
            slots=slots,
            busy=busy,
            available=[slot for slot in slots if slot not in busy_times],
            is_disabled=self.disabled_day_predicate.is_disabled(request.day, today, windows),
            has_schedule=bool(active_windows(windows)),
            working_hours=self.slot_generator.working_hours_text(windows, request.day),
            calendar_unavailable=calendar_unavailable,
        )

    async def disabled_days(self, provider_id: str, start: date, end: date, today: date | None = None) -> list[date]:
        """Dates in [start, end] that cannot be picked for the provider."""
        windows = await self.schedule_source.get_windows(provider_id)
        return self.disabled_day_predicate.disabled_days(start, end, today or date.today(), windows)
