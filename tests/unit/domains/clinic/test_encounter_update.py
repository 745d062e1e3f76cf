# ============================================================================
# Tests for EncounterOrchestrator.update
# ============================================================================
"""Unit tests for editing an encounter and reconciling derived records."""

from datetime import date, time
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from app.core.domain import EntityNotFoundException, TreatmentPersistenceError
from app.domains.clinic.application.dto import (
    EncounterForm,
    FollowUpRequest,
    LinkedAppointmentEdit,
    MedicationLine,
    SagaState,
    SagaStep,
    ServiceSelection,
)
from app.domains.clinic.application.use_cases import encounter_saga as messages
from app.domains.clinic.domain.entities import Appointment, Billing, BillingItem, Prescription, PrescriptionItem, Treatment
from app.domains.clinic.domain.value_objects import BillingItemKind, PrescriptionStatus

TREATMENT_DATE = date(2025, 1, 15)
STORED_FOLLOW_UP = date(2025, 1, 22)
NEW_FOLLOW_UP = date(2025, 1, 29)

MEDICATIONS = [
    MedicationLine(medication_id="med-1", medication_name="Paracetamol", quantity=2),
    MedicationLine(medication_id="med-3", medication_name="Ibuprofen", quantity=1),
]


@pytest.fixture
def stored_treatment(treatment_repo) -> Treatment:
    treatment = Treatment(
        id="treatment-1",
        patient_id="patient-1",
        provider_id="dr-1",
        treatment_date=TREATMENT_DATE,
        diagnosis="Flu",
        follow_up_date=STORED_FOLLOW_UP,
        appointment_id="origin-1",
    )
    treatment_repo.rows[treatment.id] = treatment
    return treatment


@pytest.fixture
def origin_appointment(appointment_repo) -> Appointment:
    return appointment_repo.add(
        Appointment(
            id="origin-1",
            patient_id="patient-1",
            provider_id="dr-1",
            appointment_date=TREATMENT_DATE,
            start_time=time(9, 0),
            chief_complaint="Fever",
        )
    )


def make_form(**overrides) -> EncounterForm:
    values = {"patient_id": "patient-1", "treatment_date": TREATMENT_DATE, "diagnosis": "Influenza A"}
    values.update(overrides)
    return EncounterForm(**values)


@pytest.mark.unit
@pytest.mark.use_case
class TestUpdateTreatment:
    @pytest.mark.asyncio
    async def test_unknown_treatment(self, orchestrator) -> None:
        with pytest.raises(EntityNotFoundException):
            await orchestrator.update("missing", make_form())

    @pytest.mark.asyncio
    async def test_patches_clinical_fields_and_keeps_provider(self, orchestrator, stored_treatment) -> None:
        result = await orchestrator.update(stored_treatment.id, make_form(symptoms="Cough"))

        assert stored_treatment.diagnosis == "Influenza A"
        assert stored_treatment.symptoms == "Cough"
        assert stored_treatment.provider_id == "dr-1"
        assert stored_treatment.follow_up_date is None
        assert result.treatment_id == "treatment-1"

    @pytest.mark.asyncio
    async def test_save_failure_aborts(self, orchestrator, treatment_repo, stored_treatment, prescription_repo) -> None:
        treatment_repo.save = AsyncMock(side_effect=RuntimeError("deadlock"))

        with pytest.raises(TreatmentPersistenceError) as exc_info:
            await orchestrator.update(stored_treatment.id, make_form(medications=MEDICATIONS))

        assert exc_info.value.treatment_id == "treatment-1"
        assert prescription_repo.rows == {}


@pytest.mark.unit
@pytest.mark.use_case
class TestReconcilePrescription:
    @pytest.mark.asyncio
    async def test_repeated_updates_do_not_duplicate(self, orchestrator, stored_treatment, prescription_repo) -> None:
        """Should leave one prescription with exactly N items after two saves."""
        form = make_form(medications=MEDICATIONS)

        await orchestrator.update(stored_treatment.id, form)
        await orchestrator.update(stored_treatment.id, form)

        assert len(prescription_repo.rows) == 1
        [prescription] = prescription_repo.rows.values()
        assert [item.medication_name for item in prescription.items] == ["Paracetamol", "Ibuprofen"]
        assert prescription.notes == "จากการวินิจฉัย: Influenza A"

    @pytest.mark.asyncio
    async def test_items_replaced_on_existing(self, orchestrator, stored_treatment, prescription_repo) -> None:
        prescription_repo.rows["rx-old"] = Prescription(
            id="rx-old",
            patient_id="patient-1",
            treatment_id="treatment-1",
            items=[PrescriptionItem(medication_id="med-9", medication_name="Old")],
        )

        result = await orchestrator.update(stored_treatment.id, make_form(medications=MEDICATIONS[:1]))

        assert result.prescription_id == "rx-old"
        assert [item.medication_name for item in prescription_repo.rows["rx-old"].items] == ["Paracetamol"]

    @pytest.mark.asyncio
    async def test_no_medications_leaves_prescription_untouched(
        self, orchestrator, stored_treatment, prescription_repo
    ) -> None:
        prescription_repo.rows["rx-old"] = Prescription(
            id="rx-old",
            treatment_id="treatment-1",
            items=[PrescriptionItem(medication_id="med-9", medication_name="Old")],
        )

        result = await orchestrator.update(stored_treatment.id, make_form())

        assert len(prescription_repo.rows["rx-old"].items) == 1
        assert SagaState.PRESCRIPTION_SKIPPED in result.states

    @pytest.mark.asyncio
    async def test_dispensed_prescription_is_a_warning(self, orchestrator, stored_treatment, prescription_repo) -> None:
        prescription_repo.rows["rx-old"] = Prescription(
            id="rx-old",
            treatment_id="treatment-1",
            status=PrescriptionStatus.DISPENSED,
            items=[PrescriptionItem(medication_id="med-9", medication_name="Old")],
        )

        result = await orchestrator.update(stored_treatment.id, make_form(medications=MEDICATIONS))

        assert result.warning_messages() == [messages.PRESCRIPTION_UPDATE_FAILED]
        assert prescription_repo.rows["rx-old"].items[0].medication_name == "Old"


@pytest.mark.unit
@pytest.mark.use_case
class TestReconcileBilling:
    @pytest.mark.asyncio
    async def test_existing_billing_items_replaced(self, orchestrator, stored_treatment, billing_repo) -> None:
        billing_repo.rows["bill-old"] = Billing(
            id="bill-old",
            invoice_number="INV-20250115-0001",
            patient_id="patient-1",
            treatment_id="treatment-1",
            items=[BillingItem.priced("Old", BillingItemKind.TREATMENT_SERVICE, 1, Decimal("999"))],
            total=Decimal("999"),
        )
        form = make_form(
            services=[ServiceSelection(service_id=None, service_name="Cupping", unit_price=Decimal("200"))]
        )

        result = await orchestrator.update(stored_treatment.id, form)

        billing = billing_repo.rows["bill-old"]
        assert result.billing_id == "bill-old"
        assert [item.description for item in billing.items] == ["Cupping"]
        assert billing.total == Decimal("200")
        assert billing.invoice_number == "INV-20250115-0001"

    @pytest.mark.asyncio
    async def test_creates_billing_when_missing(self, orchestrator, stored_treatment, billing_repo) -> None:
        form = make_form(medications=MEDICATIONS[:1])

        result = await orchestrator.update(stored_treatment.id, form)

        assert billing_repo.rows[result.billing_id].total == Decimal("25.00")

    @pytest.mark.asyncio
    async def test_nothing_billable_skips(self, orchestrator, stored_treatment, billing_repo) -> None:
        result = await orchestrator.update(stored_treatment.id, make_form())

        assert billing_repo.rows == {}
        assert SagaState.BILLING_SKIPPED in result.states


@pytest.mark.unit
@pytest.mark.use_case
class TestReconcileFollowUp:
    @pytest.mark.asyncio
    async def test_locked_by_appointment_on_stored_date(self, orchestrator, stored_treatment, appointment_repo) -> None:
        """Should not rebook when the patient already has the follow-up."""
        appointment_repo.add(
            Appointment(
                id="booked-1",
                patient_id="patient-1",
                provider_id="dr-1",
                appointment_date=STORED_FOLLOW_UP,
                start_time=time(10, 0),
            )
        )
        form = make_form(
            follow_up_date=NEW_FOLLOW_UP,
            follow_up=FollowUpRequest(start_time=time(11, 0), provider_id="dr-1"),
        )

        result = await orchestrator.update(stored_treatment.id, form)

        assert result.follow_up_locked is True
        assert result.follow_up_appointment_id == "booked-1"
        assert len(appointment_repo.rows) == 1
        assert "follow-up appointment" not in result.confirmation_parts()

    @pytest.mark.asyncio
    async def test_other_appointment_on_new_date_does_not_lock(
        self, orchestrator, stored_treatment, appointment_repo
    ) -> None:
        """Should book the follow-up next to an unrelated visit on the new date."""
        appointment_repo.add(
            Appointment(
                id="other",
                patient_id="patient-1",
                provider_id="dr-9",
                appointment_date=NEW_FOLLOW_UP,
                start_time=time(15, 0),
                appointment_type="consultation",
            )
        )
        form = make_form(
            follow_up_date=NEW_FOLLOW_UP,
            follow_up=FollowUpRequest(start_time=time(10, 0), provider_id="dr-1"),
        )

        result = await orchestrator.update(stored_treatment.id, form)

        assert result.follow_up_locked is False
        assert set(appointment_repo.rows) == {"other", result.follow_up_appointment_id}
        assert appointment_repo.rows[result.follow_up_appointment_id].provider_id == "dr-1"
        assert result.warnings == []

    @pytest.mark.asyncio
    async def test_existing_follow_up_on_new_date_warns(
        self, orchestrator, stored_treatment, appointment_repo
    ) -> None:
        appointment_repo.add(
            Appointment(
                id="booked-2",
                patient_id="patient-1",
                provider_id="dr-2",
                appointment_date=NEW_FOLLOW_UP,
                start_time=time(15, 0),
                appointment_type="follow_up",
            )
        )
        form = make_form(
            follow_up_date=NEW_FOLLOW_UP,
            follow_up=FollowUpRequest(start_time=time(9, 0), provider_id="dr-1"),
        )

        result = await orchestrator.update(stored_treatment.id, form)

        assert len(appointment_repo.rows) == 1
        assert result.follow_up_locked is False
        assert result.follow_up_appointment_id == "booked-2"
        assert result.warning_messages() == [messages.FOLLOW_UP_ALREADY_BOOKED]
        assert SagaState.FOLLOW_UP_SKIPPED in result.states

    @pytest.mark.asyncio
    async def test_books_when_nothing_exists(self, orchestrator, stored_treatment, appointment_repo) -> None:
        form = make_form(
            follow_up_date=NEW_FOLLOW_UP,
            follow_up=FollowUpRequest(start_time=time(11, 0), provider_id="dr-1"),
        )

        result = await orchestrator.update(stored_treatment.id, form)

        assert result.follow_up_locked is False
        assert appointment_repo.rows[result.follow_up_appointment_id].appointment_date == NEW_FOLLOW_UP
        assert SagaState.FOLLOW_UP_DONE in result.states

    @pytest.mark.asyncio
    async def test_lookup_failure_is_a_warning(self, orchestrator, stored_treatment, appointment_repo) -> None:
        appointment_repo.find_by_patient_and_date = AsyncMock(side_effect=RuntimeError("timeout"))

        result = await orchestrator.update(stored_treatment.id, make_form(follow_up_date=NEW_FOLLOW_UP))

        assert result.warning_messages() == [messages.FOLLOW_UP_LOOKUP_FAILED]
        assert SagaState.FOLLOW_UP_FAILED in result.states

    @pytest.mark.asyncio
    async def test_cleared_follow_up_date_skips(self, orchestrator, stored_treatment) -> None:
        result = await orchestrator.update(stored_treatment.id, make_form())
        assert result.states[-2] == SagaState.FOLLOW_UP_SKIPPED


@pytest.mark.unit
@pytest.mark.use_case
class TestLinkedAppointment:
    @pytest.mark.asyncio
    async def test_edit_applied_when_unlocked(self, orchestrator, stored_treatment, origin_appointment) -> None:
        form = make_form(
            unlock_linked_appointment=True,
            linked_appointment_edit=LinkedAppointmentEdit(start_time=time(9, 30), provider_id="dr-2"),
        )

        await orchestrator.update(stored_treatment.id, form)

        assert origin_appointment.start_time == time(9, 30)
        assert origin_appointment.provider_id == "dr-2"
        assert origin_appointment.chief_complaint is None

    @pytest.mark.asyncio
    async def test_locked_edit_is_ignored(
        self, orchestrator, stored_treatment, origin_appointment, appointment_repo
    ) -> None:
        form = make_form(linked_appointment_edit=LinkedAppointmentEdit(start_time=time(9, 30)))

        await orchestrator.update(stored_treatment.id, form)

        assert origin_appointment.start_time == time(9, 0)
        assert appointment_repo.updates == []

    @pytest.mark.asyncio
    async def test_missing_linked_appointment_is_a_warning(self, orchestrator, stored_treatment) -> None:
        form = make_form(
            unlock_linked_appointment=True,
            linked_appointment_edit=LinkedAppointmentEdit(notes="moved"),
        )

        result = await orchestrator.update(stored_treatment.id, form)

        assert [w.step for w in result.warnings] == [SagaStep.LINKED_APPOINTMENT]
