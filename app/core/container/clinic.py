"""
Clinic Domain Container.

Single Responsibility: Wire all clinic domain dependencies.
"""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.clinic.application.dto import CurrentActor
from app.domains.clinic.application.use_cases import (
    DispensePrescriptionUseCase,
    EncounterOrchestrator,
    GetBookableSlotsUseCase,
    ScheduleFollowUpUseCase,
)
from app.domains.clinic.domain.services import BillingComposer, DisabledDayPredicate, SlotGenerator
from app.domains.clinic.infrastructure.repositories import (
    SQLAlchemyAppointmentRepository,
    SQLAlchemyBillingRepository,
    SQLAlchemyMedicationCatalog,
    SQLAlchemyPrescriptionRepository,
    SQLAlchemyProviderScheduleSource,
    SQLAlchemyServiceCatalog,
    SQLAlchemyStockLedger,
    SQLAlchemyTreatmentFileRepository,
    SQLAlchemyTreatmentRepository,
)

if TYPE_CHECKING:
    from app.core.container.base import BaseContainer

logger = logging.getLogger(__name__)


class ClinicContainer:
    """
    Clinic domain container.

    Repositories and use cases are created per request around the request's
    session; domain services and HTTP clients are shared.
    """

    def __init__(self, base: "BaseContainer"):
        """
        Initialize clinic container.

        Args:
            base: BaseContainer with shared singletons
        """
        self._base = base
        settings = base.settings
        self._slot_generator = SlotGenerator(
            interval_minutes=settings.SLOT_INTERVAL_MINUTES,
            default_start_hour=settings.DEFAULT_START_HOUR,
            default_end_hour=settings.DEFAULT_END_HOUR,
        )
        self._disabled_day_predicate = DisabledDayPredicate(closed_weekday=settings.DEFAULT_CLOSED_WEEKDAY)
        self._billing_composer = BillingComposer()

    # ==================== DOMAIN SERVICES ====================

    def get_slot_generator(self) -> SlotGenerator:
        return self._slot_generator

    def get_disabled_day_predicate(self) -> DisabledDayPredicate:
        return self._disabled_day_predicate

    # ==================== USE CASES ====================

    def create_follow_up_scheduler(self, db: AsyncSession, actor: CurrentActor) -> ScheduleFollowUpUseCase:
        """Create ScheduleFollowUpUseCase with dependencies."""
        return ScheduleFollowUpUseCase(
            appointment_repository=SQLAlchemyAppointmentRepository(session=db),
            billing_repository=SQLAlchemyBillingRepository(session=db),
            service_catalog=SQLAlchemyServiceCatalog(session=db),
            calendar_sync=self._base.get_calendar_sync(),
            notifier=self._base.get_notifier(),
            actor=actor,
            billing_composer=self._billing_composer,
            conflict_check=self._base.settings.FOLLOW_UP_CONFLICT_CHECK,
            slot_interval_minutes=self._base.settings.SLOT_INTERVAL_MINUTES,
        )

    def create_encounter_orchestrator(self, db: AsyncSession, actor: CurrentActor) -> EncounterOrchestrator:
        """Create EncounterOrchestrator with dependencies."""
        return EncounterOrchestrator(
            treatment_repository=SQLAlchemyTreatmentRepository(session=db),
            treatment_file_repository=SQLAlchemyTreatmentFileRepository(session=db),
            prescription_repository=SQLAlchemyPrescriptionRepository(session=db),
            billing_repository=SQLAlchemyBillingRepository(session=db),
            appointment_repository=SQLAlchemyAppointmentRepository(session=db),
            medication_catalog=SQLAlchemyMedicationCatalog(session=db),
            file_storage=self._base.get_file_storage(),
            follow_up_scheduler=self.create_follow_up_scheduler(db, actor),
            actor=actor,
            billing_composer=self._billing_composer,
        )

    def create_get_bookable_slots_use_case(self, db: AsyncSession) -> GetBookableSlotsUseCase:
        """Create GetBookableSlotsUseCase with dependencies."""
        return GetBookableSlotsUseCase(
            schedule_source=SQLAlchemyProviderScheduleSource(session=db),
            appointment_repository=SQLAlchemyAppointmentRepository(session=db),
            slot_generator=self._slot_generator,
            disabled_day_predicate=self._disabled_day_predicate,
            calendar_sync=self._base.get_calendar_sync(),
        )

    def create_dispense_prescription_use_case(
        self, db: AsyncSession, actor: CurrentActor
    ) -> DispensePrescriptionUseCase:
        """Create DispensePrescriptionUseCase with dependencies."""
        return DispensePrescriptionUseCase(
            prescription_repository=SQLAlchemyPrescriptionRepository(session=db),
            stock_ledger=SQLAlchemyStockLedger(session=db),
            actor=actor,
        )
