"""
Clinic Domain Ports

Interfaces (ports) for the clinic domain following Clean Architecture.
"""

from app.domains.clinic.application.ports.appointment_repository import IAppointmentRepository
from app.domains.clinic.application.ports.billing_repository import IBillingRepository
from app.domains.clinic.application.ports.catalogs import (
    IMedicationCatalog,
    IProviderScheduleSource,
    IServiceCatalog,
    IStockLedger,
)
from app.domains.clinic.application.ports.integrations import (
    CalendarEventDetails,
    ICalendarSync,
    IFileStorage,
    INotificationDispatcher,
)
from app.domains.clinic.application.ports.prescription_repository import IPrescriptionRepository
from app.domains.clinic.application.ports.treatment_repository import (
    ITreatmentFileRepository,
    ITreatmentRepository,
)

__all__ = [
    "IAppointmentRepository",
    "IBillingRepository",
    "IMedicationCatalog",
    "IPrescriptionRepository",
    "IProviderScheduleSource",
    "IServiceCatalog",
    "IStockLedger",
    "ITreatmentFileRepository",
    "ITreatmentRepository",
    "CalendarEventDetails",
    "ICalendarSync",
    "IFileStorage",
    "INotificationDispatcher",
]
