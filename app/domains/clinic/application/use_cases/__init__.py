"""
Clinic Use Cases
"""

from app.domains.clinic.application.use_cases.dispense_prescription import DispensePrescriptionUseCase
from app.domains.clinic.application.use_cases.encounter_orchestrator import EncounterOrchestrator
from app.domains.clinic.application.use_cases.encounter_saga import EncounterSaga
from app.domains.clinic.application.use_cases.get_bookable_slots import GetBookableSlotsUseCase
from app.domains.clinic.application.use_cases.schedule_follow_up import ScheduleFollowUpUseCase

__all__ = [
    "DispensePrescriptionUseCase",
    "EncounterOrchestrator",
    "EncounterSaga",
    "GetBookableSlotsUseCase",
    "ScheduleFollowUpUseCase",
]
