"""
Encounter Orchestrator

Saves the treatment screen in one action: the treatment record first,
then its attachments, prescription, billing and follow-up appointment.

Only the treatment write can fail the whole save. Everything after it is
advisory: failures become warnings on the result and the remaining steps
still run. Steps are not rolled back.
"""

import logging
import time
from datetime import date
from uuid import uuid4

from app.core.domain import EntityNotFoundException, TreatmentPersistenceError, ValidationException
from app.domains.clinic.application.dto.encounter_dtos import (
    AttachmentUpload,
    CurrentActor,
    EncounterForm,
    EncounterResult,
    MedicationLine,
    SagaState,
    SagaStep,
    ServiceSelection,
)
from app.domains.clinic.application.ports import (
    IAppointmentRepository,
    IBillingRepository,
    IFileStorage,
    IMedicationCatalog,
    IPrescriptionRepository,
    ITreatmentFileRepository,
    ITreatmentRepository,
)
from app.domains.clinic.application.use_cases import encounter_saga as messages
from app.domains.clinic.application.use_cases.encounter_saga import EncounterSaga
from app.domains.clinic.application.use_cases.schedule_follow_up import ScheduleFollowUpUseCase
from app.domains.clinic.domain.entities.billing import Billing
from app.domains.clinic.domain.entities.prescription import Prescription, PrescriptionItem
from app.domains.clinic.domain.entities.treatment import Treatment, TreatmentFile
from app.domains.clinic.domain.services.billing_composer import BillingComposer, ComposedBilling
from app.domains.clinic.domain.value_objects.statuses import AppointmentType

logger = logging.getLogger(__name__)


def attachment_path(patient_id: str, treatment_id: str, upload: AttachmentUpload) -> str:
    """Storage path: {patient}/{treatment}/{millis}-{random}.{ext}"""
    millis = int(time.time() * 1000)
    return f"{patient_id}/{treatment_id}/{millis}-{uuid4().hex[:8]}.{upload.extension}"


class EncounterOrchestrator:
    """
    Controller of the encounter save workflow.

    Example:
        ```python
        orchestrator = container.create_encounter_orchestrator(session, actor)
        result = await orchestrator.create(form)
        if result.has_warnings:
            ...
        ```
    """

    def __init__(
        self,
        treatment_repository: ITreatmentRepository,
        treatment_file_repository: ITreatmentFileRepository,
        prescription_repository: IPrescriptionRepository,
        billing_repository: IBillingRepository,
        appointment_repository: IAppointmentRepository,
        medication_catalog: IMedicationCatalog,
        file_storage: IFileStorage,
        follow_up_scheduler: ScheduleFollowUpUseCase,
        actor: CurrentActor,
        billing_composer: BillingComposer | None = None,
    ):
        self.treatments = treatment_repository
        self.treatment_files = treatment_file_repository
        self.prescriptions = prescription_repository
        self.billings = billing_repository
        self.appointments = appointment_repository
        self.medication_catalog = medication_catalog
        self.file_storage = file_storage
        self.follow_up_scheduler = follow_up_scheduler
        self.actor = actor
        self.billing_composer = billing_composer or BillingComposer()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create(self, form: EncounterForm) -> EncounterResult:
        """
        Create a treatment and everything derived from it.

        Raises:
            ValidationException: The form has no patient
            TreatmentPersistenceError: The treatment could not be written
        """
        self._validate(form)
        saga = EncounterSaga()

        treatment = Treatment(
            patient_id=form.patient_id,
            provider_id=form.provider_id or self.actor.user_id,
            appointment_id=form.appointment_id,
            **form.clinical_fields(),
        )
        try:
            treatment = await self.treatments.save(treatment)
        except Exception as e:
            logger.error(f"Error saving treatment for patient {form.patient_id}: {e}", exc_info=True)
            raise TreatmentPersistenceError("Treatment could not be saved", original_error=e) from e

        saga.treatment_saved(treatment.id)
        logger.info(f"Treatment {treatment.id} created for patient {treatment.patient_id}")

        await self._upload_attachments(saga, treatment, form.attachments)
        await self._create_prescription(saga, treatment, form.resolved_medications())

        if form.follow_up_date:
            await self.follow_up_scheduler.execute(
                saga, treatment.patient_id, form.follow_up_date, form.follow_up, form.follow_up_notes
            )
        else:
            saga.advance(SagaState.FOLLOW_UP_SKIPPED)

        await self._create_billing(saga, treatment, form)

        return saga.complete()

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    async def update(self, treatment_id: str, form: EncounterForm) -> EncounterResult:
        """
        Update a treatment and reconcile its derived records.

        Raises:
            ValidationException: The form has no patient
            EntityNotFoundException: No treatment with this ID
            TreatmentPersistenceError: The treatment could not be written
        """
        self._validate(form)
        treatment = await self.treatments.find_by_id(treatment_id)
        if treatment is None:
            raise EntityNotFoundException("Treatment", treatment_id)

        stored_follow_up_date = treatment.follow_up_date
        saga = EncounterSaga()

        treatment.patch(provider_id=form.provider_id or treatment.provider_id, **form.clinical_fields())
        try:
            treatment = await self.treatments.save(treatment)
        except Exception as e:
            logger.error(f"Error updating treatment {treatment_id}: {e}", exc_info=True)
            raise TreatmentPersistenceError(
                "Treatment could not be updated", treatment_id=treatment_id, original_error=e
            ) from e

        saga.treatment_saved(treatment.id)
        logger.info(f"Treatment {treatment.id} updated")

        await self._upload_attachments(saga, treatment, form.attachments)
        await self._update_linked_appointment(saga, treatment, form)
        await self._reconcile_prescription(saga, treatment, form.resolved_medications())
        await self._reconcile_billing(saga, treatment, form)
        await self._reconcile_follow_up(saga, treatment, form, stored_follow_up_date)

        return saga.complete()

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(form: EncounterForm) -> None:
        if not form.patient_id:
            raise ValidationException("A patient must be selected", field="patient_id")

    async def _upload_attachments(
        self, saga: EncounterSaga, treatment: Treatment, uploads: list[AttachmentUpload]
    ) -> None:
        for upload in uploads:
            try:
                path = attachment_path(treatment.patient_id, treatment.id, upload)
                url = await self.file_storage.upload(path, upload.content, upload.content_type)
                await self.treatment_files.add(
                    TreatmentFile(
                        treatment_id=treatment.id,
                        patient_id=treatment.patient_id,
                        file_name=upload.file_name,
                        file_url=url,
                        file_type=upload.content_type,
                        file_size=len(upload.content),
                        uploaded_by=self.actor.user_id,
                    )
                )
                saga.uploaded_files += 1
            except Exception as e:
                saga.warn(SagaStep.ATTACHMENTS, messages.ATTACHMENT_FAILED.format(file_name=upload.file_name), e)

    def _prescription_items(self, medications: list[MedicationLine]) -> list[PrescriptionItem]:
        return [
            PrescriptionItem(
                medication_id=line.medication_id,
                medication_name=line.medication_name,
                dosage=line.dosage or "-",
                frequency=line.frequency,
                duration=line.duration,
                quantity=line.quantity,
                instructions=line.instructions,
            )
            for line in medications
        ]

    async def _create_prescription(
        self, saga: EncounterSaga, treatment: Treatment, medications: list[MedicationLine]
    ) -> None:
        if not medications:
            saga.advance(SagaState.PRESCRIPTION_SKIPPED)
            return
        try:
            prescription = Prescription(
                patient_id=treatment.patient_id,
                treatment_id=treatment.id,
                provider_id=self.actor.user_id or treatment.provider_id,
                prescription_date=treatment.treatment_date,
                notes=treatment.prescription_notes(),
                items=self._prescription_items(medications),
            )
            created = await self.prescriptions.create(prescription)
            saga.prescription_id = created.id
            saga.advance(SagaState.PRESCRIPTION_DONE)
        except Exception as e:
            logger.error(f"Error creating prescription for treatment {treatment.id}: {e}", exc_info=True)
            saga.warn(SagaStep.PRESCRIPTION, messages.PRESCRIPTION_CREATE_FAILED, e)
            saga.advance(SagaState.PRESCRIPTION_FAILED)

    async def _reconcile_prescription(
        self, saga: EncounterSaga, treatment: Treatment, medications: list[MedicationLine]
    ) -> None:
        # Without medications on the form the stored prescription is left as is
        if not medications:
            saga.advance(SagaState.PRESCRIPTION_SKIPPED)
            return
        try:
            existing = await self.prescriptions.find_by_treatment(treatment.id)
            if existing is None:
                await self._create_prescription(saga, treatment, medications)
                return

            existing.provider_id = self.actor.user_id or existing.provider_id
            existing.notes = treatment.prescription_notes()
            existing.replace_items(self._prescription_items(medications))
            saved = await self.prescriptions.replace_items(existing, existing.items)
            saga.prescription_id = saved.id
            saga.advance(SagaState.PRESCRIPTION_DONE)
        except Exception as e:
            logger.error(f"Error updating prescription for treatment {treatment.id}: {e}", exc_info=True)
            saga.warn(SagaStep.PRESCRIPTION, messages.PRESCRIPTION_UPDATE_FAILED, e)
            saga.advance(SagaState.PRESCRIPTION_FAILED)

    async def _price_lines(
        self, services: list[ServiceSelection], medications: list[MedicationLine]
    ) -> ComposedBilling:
        medication_ids = [line.medication_id for line in medications if line.medication_id]
        prices = await self.medication_catalog.get_prices(medication_ids) if medication_ids else {}
        return self.billing_composer.compose(services, medications, prices)

    async def _create_billing(self, saga: EncounterSaga, treatment: Treatment, form: EncounterForm) -> None:
        services = [s for s in form.services if s.service_id and s.unit_price > 0]
        medications = form.resolved_medications()
        if not services and not medications:
            saga.advance(SagaState.BILLING_SKIPPED)
            return
        try:
            composed = await self._price_lines(services, medications)
            if composed.is_empty:
                saga.advance(SagaState.BILLING_SKIPPED)
                return
            billing = Billing(
                patient_id=treatment.patient_id,
                treatment_id=treatment.id,
                billing_date=treatment.treatment_date,
                created_by=self.actor.user_id,
                items=composed.items,
                subtotal=composed.subtotal,
                total=composed.total,
            )
            created = await self.billings.create(billing)
            saga.billing_id = created.id
            saga.advance(SagaState.BILLING_DONE)
        except Exception as e:
            logger.error(f"Error creating billing for treatment {treatment.id}: {e}", exc_info=True)
            saga.warn(SagaStep.BILLING, messages.BILLING_CREATE_FAILED, e)
            saga.advance(SagaState.BILLING_FAILED)

    async def _reconcile_billing(self, saga: EncounterSaga, treatment: Treatment, form: EncounterForm) -> None:
        services = [s for s in form.services if (s.service_id or s.service_name) and s.unit_price > 0]
        medications = form.resolved_medications()
        if not services and not medications:
            saga.advance(SagaState.BILLING_SKIPPED)
            return
        try:
            composed = await self._price_lines(services, medications)
            existing = await self.billings.find_by_treatment(treatment.id)
            if existing is not None:
                existing.replace_items(composed.items)
                saved = await self.billings.replace_items(existing, existing.items)
                saga.billing_id = saved.id
                saga.advance(SagaState.BILLING_DONE)
                return
            if composed.is_empty:
                saga.advance(SagaState.BILLING_SKIPPED)
                return
            created = await self.billings.create(
                Billing(
                    patient_id=treatment.patient_id,
                    treatment_id=treatment.id,
                    billing_date=treatment.treatment_date,
                    created_by=self.actor.user_id,
                    items=composed.items,
                    subtotal=composed.subtotal,
                    total=composed.total,
                )
            )
            saga.billing_id = created.id
            saga.advance(SagaState.BILLING_DONE)
        except Exception as e:
            logger.error(f"Error updating billing for treatment {treatment.id}: {e}", exc_info=True)
            saga.warn(SagaStep.BILLING, messages.BILLING_UPDATE_FAILED, e)
            saga.advance(SagaState.BILLING_FAILED)

    async def _update_linked_appointment(self, saga: EncounterSaga, treatment: Treatment, form: EncounterForm) -> None:
        edit = form.linked_appointment_edit
        if not (treatment.appointment_id and form.unlock_linked_appointment and edit):
            return
        try:
            appointment = await self.appointments.find_by_id(treatment.appointment_id)
            if appointment is None:
                raise EntityNotFoundException("Appointment", treatment.appointment_id)
            appointment.apply_edit(
                appointment_date=edit.appointment_date,
                start_time=edit.start_time,
                appointment_type=edit.appointment_type,
                provider_id=edit.provider_id,
                chief_complaint=edit.chief_complaint,
                location_id=edit.location_id,
                notes=edit.notes,
            )
            await self.appointments.update(appointment)
        except Exception as e:
            saga.warn(SagaStep.LINKED_APPOINTMENT, messages.LINKED_APPOINTMENT_FAILED, e)

    async def _reconcile_follow_up(
        self,
        saga: EncounterSaga,
        treatment: Treatment,
        form: EncounterForm,
        stored_follow_up_date: date | None,
    ) -> None:
        """
        An appointment of the patient on the stored follow-up date locks the
        section: nothing is rebooked. On a newly chosen date only an existing
        follow-up appointment blocks booking, and the caller is warned.
        """
        new_date = form.follow_up_date if form.follow_up_date != stored_follow_up_date else None
        try:
            if stored_follow_up_date:
                booked = await self.appointments.find_by_patient_and_date(treatment.patient_id, stored_follow_up_date)
                if booked:
                    saga.follow_up_locked = True
                    saga.follow_up_appointment_id = booked[0].id
                    logger.info(f"Follow-up for treatment {treatment.id} already booked ({booked[0].id})")
                    saga.advance(SagaState.FOLLOW_UP_SKIPPED)
                    return

            if new_date:
                duplicates = [
                    a
                    for a in await self.appointments.find_by_patient_and_date(treatment.patient_id, new_date)
                    if a.appointment_type == AppointmentType.FOLLOW_UP.value and not a.is_cancelled
                ]
                if duplicates:
                    saga.follow_up_appointment_id = duplicates[0].id
                    saga.warn(SagaStep.FOLLOW_UP, messages.FOLLOW_UP_ALREADY_BOOKED)
                    saga.advance(SagaState.FOLLOW_UP_SKIPPED)
                    return
        except Exception as e:
            saga.warn(SagaStep.FOLLOW_UP, messages.FOLLOW_UP_LOOKUP_FAILED, e)
            saga.advance(SagaState.FOLLOW_UP_FAILED)
            return

        if not form.follow_up_date:
            saga.advance(SagaState.FOLLOW_UP_SKIPPED)
            return

        await self.follow_up_scheduler.execute(
            saga, treatment.patient_id, form.follow_up_date, form.follow_up, form.follow_up_notes
        )
