"""
Clinic Repository Implementations
"""

from app.domains.clinic.infrastructure.repositories.appointment_repository import SQLAlchemyAppointmentRepository
from app.domains.clinic.infrastructure.repositories.billing_repository import SQLAlchemyBillingRepository
from app.domains.clinic.infrastructure.repositories.catalog_repository import (
    SQLAlchemyMedicationCatalog,
    SQLAlchemyProviderScheduleSource,
    SQLAlchemyServiceCatalog,
    SQLAlchemyStockLedger,
)
from app.domains.clinic.infrastructure.repositories.prescription_repository import SQLAlchemyPrescriptionRepository
from app.domains.clinic.infrastructure.repositories.treatment_repository import (
    SQLAlchemyTreatmentFileRepository,
    SQLAlchemyTreatmentRepository,
)

__all__ = [
    "SQLAlchemyAppointmentRepository",
    "SQLAlchemyBillingRepository",
    "SQLAlchemyMedicationCatalog",
    "SQLAlchemyPrescriptionRepository",
    "SQLAlchemyProviderScheduleSource",
    "SQLAlchemyServiceCatalog",
    "SQLAlchemyStockLedger",
    "SQLAlchemyTreatmentFileRepository",
    "SQLAlchemyTreatmentRepository",
]
