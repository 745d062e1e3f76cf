"""
Shared fixtures for clinic domain tests.

In-memory implementations of the clinic ports. Individual tests replace
single methods with AsyncMock side effects to simulate failures.
"""

from datetime import date, time
from decimal import Decimal
from itertools import count

import pytest

from app.domains.clinic.application.dto import CurrentActor
from app.domains.clinic.application.ports import CalendarEventDetails
from app.domains.clinic.application.use_cases import EncounterOrchestrator, ScheduleFollowUpUseCase
from app.domains.clinic.domain.entities import (
    Appointment,
    Billing,
    BillingItem,
    Prescription,
    PrescriptionItem,
    StockMovement,
    Treatment,
    TreatmentFile,
)
from app.domains.clinic.domain.value_objects import (
    CalendarEvent,
    NotificationTrigger,
    PrescriptionStatus,
    ScheduleWindow,
    ServiceInfo,
    ServiceMode,
)


# ============================================================================
# IN-MEMORY PORTS
# ============================================================================


class InMemoryTreatmentRepository:
    def __init__(self):
        self.rows: dict[str, Treatment] = {}
        self._ids = count(1)

    async def find_by_id(self, treatment_id: str) -> Treatment | None:
        return self.rows.get(treatment_id)

    async def save(self, treatment: Treatment) -> Treatment:
        if treatment.id is None:
            treatment.id = f"treatment-{next(self._ids)}"
        self.rows[treatment.id] = treatment
        return treatment


class InMemoryTreatmentFileRepository:
    def __init__(self):
        self.rows: list[TreatmentFile] = []

    async def add(self, treatment_file: TreatmentFile) -> TreatmentFile:
        treatment_file.id = f"file-{len(self.rows) + 1}"
        self.rows.append(treatment_file)
        return treatment_file

    async def find_by_treatment(self, treatment_id: str) -> list[TreatmentFile]:
        return [row for row in self.rows if row.treatment_id == treatment_id]


class InMemoryPrescriptionRepository:
    def __init__(self):
        self.rows: dict[str, Prescription] = {}
        self._ids = count(1)

    async def find_by_id(self, prescription_id: str) -> Prescription | None:
        return self.rows.get(prescription_id)

    async def find_by_treatment(self, treatment_id: str) -> Prescription | None:
        for prescription in self.rows.values():
            if prescription.treatment_id == treatment_id and prescription.is_active:
                return prescription
        return None

    async def create(self, prescription: Prescription) -> Prescription:
        prescription.id = f"rx-{next(self._ids)}"
        for item in prescription.items:
            item.prescription_id = prescription.id
        self.rows[prescription.id] = prescription
        return prescription

    async def replace_items(self, prescription: Prescription, items: list[PrescriptionItem]) -> Prescription:
        prescription.items = list(items)
        self.rows[prescription.id] = prescription
        return prescription

    async def update_status(self, prescription_id: str, status: PrescriptionStatus) -> None:
        self.rows[prescription_id].status = status


class InMemoryBillingRepository:
    def __init__(self):
        self.rows: dict[str, Billing] = {}
        self._ids = count(1)

    async def find_by_treatment(self, treatment_id: str) -> Billing | None:
        return next((b for b in self.rows.values() if b.treatment_id == treatment_id), None)

    async def find_by_appointment(self, appointment_id: str) -> Billing | None:
        return next((b for b in self.rows.values() if b.appointment_id == appointment_id), None)

    async def create(self, billing: Billing) -> Billing:
        billing.id = f"bill-{next(self._ids)}"
        billing.invoice_number = f"INV-{billing.billing_date:%Y%m%d}-{len(self.rows) + 1:04d}"
        billing.replace_items(billing.items)
        self.rows[billing.id] = billing
        return billing

    async def replace_items(self, billing: Billing, items: list[BillingItem]) -> Billing:
        billing.replace_items(items)
        self.rows[billing.id] = billing
        return billing


class InMemoryAppointmentRepository:
    def __init__(self):
        self.rows: dict[str, Appointment] = {}
        self.updates: list[str] = []
        self._ids = count(1)

    def add(self, appointment: Appointment) -> Appointment:
        if appointment.id is None:
            appointment.id = f"existing-{len(self.rows) + 1}"
        self.rows[appointment.id] = appointment
        return appointment

    async def find_by_id(self, appointment_id: str) -> Appointment | None:
        return self.rows.get(appointment_id)

    async def find_by_patient_and_date(self, patient_id: str, appointment_date: date) -> list[Appointment]:
        return [
            a for a in self.rows.values() if a.patient_id == patient_id and a.appointment_date == appointment_date
        ]

    async def find_by_provider_and_date(
        self, provider_id: str, appointment_date: date, include_cancelled: bool = False
    ) -> list[Appointment]:
        return [
            a
            for a in self.rows.values()
            if a.provider_id == provider_id
            and a.appointment_date == appointment_date
            and (include_cancelled or not a.is_cancelled)
        ]

    async def create(self, appointment: Appointment) -> Appointment:
        appointment.id = f"appt-{next(self._ids)}"
        self.rows[appointment.id] = appointment
        return appointment

    async def update(self, appointment: Appointment) -> Appointment:
        self.rows[appointment.id] = appointment
        self.updates.append(appointment.id)
        return appointment


class InMemoryMedicationCatalog:
    def __init__(self, prices: dict[str, Decimal] | None = None):
        self.prices = prices or {}

    async def get_prices(self, medication_ids: list[str]) -> dict[str, Decimal]:
        return {mid: self.prices[mid] for mid in medication_ids if mid in self.prices}


class InMemoryServiceCatalog:
    def __init__(self, services: dict[str, ServiceInfo] | None = None):
        self.services = services or {}

    async def get_services(self, service_ids: list[str]) -> dict[str, ServiceInfo]:
        return {sid: self.services[sid] for sid in service_ids if sid in self.services}


class InMemoryScheduleSource:
    def __init__(self, windows: list[ScheduleWindow] | None = None):
        self.windows = windows or []

    async def get_windows(self, provider_id: str) -> list[ScheduleWindow]:
        return [w for w in self.windows if w.provider_id in (None, provider_id)]


class InMemoryStockLedger:
    def __init__(self, stock: dict[str, int] | None = None):
        self.stock = stock or {}
        self.movements: list[StockMovement] = []

    async def get_stock(self, medication_id: str) -> int:
        return self.stock.get(medication_id, 0)

    async def apply(self, movement: StockMovement) -> StockMovement:
        movement.id = f"move-{len(self.movements) + 1}"
        self.stock[movement.medication_id] = movement.new_stock
        self.movements.append(movement)
        return movement


class FakeCalendarSync:
    def __init__(self):
        self.synced: list[tuple[str, CalendarEventDetails]] = []
        self.meeting_requests: list[str] = []
        self.events: list[CalendarEvent] = []
        self.event_id: str | None = "gcal-1"
        self.meet_link: str | None = "https://meet.example.com/abc-defg-hij"

    async def sync_event(self, appointment_id, details, provider_id, existing_event_id=None):
        self.synced.append((appointment_id, details))
        return self.event_id

    async def create_meeting_link(self, appointment_id, details, provider_id):
        self.meeting_requests.append(appointment_id)
        return self.meet_link

    async def fetch_events(self, provider_id, day):
        return list(self.events)


class FakeNotifier:
    def __init__(self):
        self.sent: list[tuple[str, NotificationTrigger]] = []

    async def notify(self, appointment_id: str, trigger: NotificationTrigger) -> None:
        self.sent.append((appointment_id, trigger))


class FakeFileStorage:
    def __init__(self):
        self.uploaded: dict[str, bytes] = {}

    async def upload(self, path: str, content: bytes, content_type: str | None = None) -> str:
        self.uploaded[path] = content
        return f"https://files.example.com/{path}"


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def actor() -> CurrentActor:
    return CurrentActor(user_id="staff-1")


@pytest.fixture
def treatment_repo():
    return InMemoryTreatmentRepository()


@pytest.fixture
def treatment_file_repo():
    return InMemoryTreatmentFileRepository()


@pytest.fixture
def prescription_repo():
    return InMemoryPrescriptionRepository()


@pytest.fixture
def billing_repo():
    return InMemoryBillingRepository()


@pytest.fixture
def appointment_repo():
    return InMemoryAppointmentRepository()


@pytest.fixture
def medication_catalog():
    return InMemoryMedicationCatalog({"med-1": Decimal("12.50"), "med-2": Decimal("0")})


@pytest.fixture
def service_catalog():
    return InMemoryServiceCatalog(
        {
            "svc-onsite": ServiceInfo(id="svc-onsite", name="Massage", price=Decimal("500"), duration_minutes=60),
            "svc-online": ServiceInfo(
                id="svc-online",
                name="Video consult",
                price=Decimal("300"),
                duration_minutes=30,
                service_mode=ServiceMode.ONLINE,
            ),
        }
    )


@pytest.fixture
def calendar_sync():
    return FakeCalendarSync()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def file_storage():
    return FakeFileStorage()


@pytest.fixture
def stock_ledger():
    return InMemoryStockLedger({"med-1": 10, "med-2": 1})


@pytest.fixture
def follow_up_scheduler(appointment_repo, billing_repo, service_catalog, calendar_sync, notifier, actor):
    return ScheduleFollowUpUseCase(
        appointment_repository=appointment_repo,
        billing_repository=billing_repo,
        service_catalog=service_catalog,
        calendar_sync=calendar_sync,
        notifier=notifier,
        actor=actor,
    )


@pytest.fixture
def orchestrator(
    treatment_repo,
    treatment_file_repo,
    prescription_repo,
    billing_repo,
    appointment_repo,
    medication_catalog,
    file_storage,
    follow_up_scheduler,
    actor,
):
    return EncounterOrchestrator(
        treatment_repository=treatment_repo,
        treatment_file_repository=treatment_file_repo,
        prescription_repository=prescription_repo,
        billing_repository=billing_repo,
        appointment_repository=appointment_repo,
        medication_catalog=medication_catalog,
        file_storage=file_storage,
        follow_up_scheduler=follow_up_scheduler,
        actor=actor,
    )


@pytest.fixture
def schedule_source():
    """dr-1 works Wednesdays 09:00-12:00."""
    return InMemoryScheduleSource(
        [ScheduleWindow(weekday=3, start_time=time(9, 0), end_time=time(12, 0), provider_id="dr-1")]
    )
