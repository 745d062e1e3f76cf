"""
Clinic Domain Entities
"""

from app.domains.clinic.domain.entities.appointment import Appointment
from app.domains.clinic.domain.entities.billing import Billing, BillingItem
from app.domains.clinic.domain.entities.prescription import Prescription, PrescriptionItem
from app.domains.clinic.domain.entities.stock_movement import StockMovement
from app.domains.clinic.domain.entities.treatment import Treatment, TreatmentFile

__all__ = [
    "Appointment",
    "Billing",
    "BillingItem",
    "Prescription",
    "PrescriptionItem",
    "StockMovement",
    "Treatment",
    "TreatmentFile",
]
