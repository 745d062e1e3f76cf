"""
Clinic API Routes

FastAPI router for clinic endpoints: encounter saves, provider slot grids
and prescription dispensing.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.domains.clinic.api.dependencies import (
    get_bookable_slots_use_case,
    get_dispense_prescription_use_case,
    get_encounter_orchestrator,
)
from app.domains.clinic.api.schemas import (
    BookableSlotsResponse,
    DisabledDaysResponse,
    DispenseResponse,
    EncounterRequest,
    EncounterResponse,
    StockMovementResponse,
)
from app.domains.clinic.application.dto import BookableSlotsRequest
from app.domains.clinic.application.use_cases import (
    DispensePrescriptionUseCase,
    EncounterOrchestrator,
    GetBookableSlotsUseCase,
)
from app.domains.clinic.domain.value_objects import PrescriptionStatus

router = APIRouter(prefix="/clinic", tags=["Clinic"])

# Type aliases for use case dependencies
EncounterOrchestratorDep = Annotated[EncounterOrchestrator, Depends(get_encounter_orchestrator)]
BookableSlotsUseCaseDep = Annotated[GetBookableSlotsUseCase, Depends(get_bookable_slots_use_case)]
DispenseUseCaseDep = Annotated[DispensePrescriptionUseCase, Depends(get_dispense_prescription_use_case)]

MAX_DISABLED_DAYS_RANGE = 366


@router.post("/treatments", response_model=EncounterResponse, status_code=status.HTTP_201_CREATED)
async def create_treatment(request: EncounterRequest, orchestrator: EncounterOrchestratorDep):
    """Save a new treatment with its prescription, billing and follow-up."""
    result = await orchestrator.create(request.to_form())
    return EncounterResponse.from_result(result)


@router.put("/treatments/{treatment_id}", response_model=EncounterResponse)
async def update_treatment(treatment_id: str, request: EncounterRequest, orchestrator: EncounterOrchestratorDep):
    """Update a treatment and reconcile its downstream records."""
    result = await orchestrator.update(treatment_id, request.to_form())
    return EncounterResponse.from_result(result)


@router.get("/providers/{provider_id}/slots", response_model=BookableSlotsResponse)
async def get_provider_slots(
    provider_id: str,
    use_case: BookableSlotsUseCaseDep,
    day: Annotated[date, Query(alias="date")],
    exclude_appointment_id: str | None = None,
):
    """Candidate, busy and available slots of a provider on a day."""
    result = await use_case.execute(
        BookableSlotsRequest(
            provider_id=provider_id,
            day=day,
            exclude_appointment_id=exclude_appointment_id,
        )
    )
    return BookableSlotsResponse.from_result(result)


@router.get("/providers/{provider_id}/disabled-days", response_model=DisabledDaysResponse)
async def get_disabled_days(
    provider_id: str,
    use_case: BookableSlotsUseCaseDep,
    start: date,
    end: date,
):
    """Dates in the range that cannot be picked for the provider."""
    if end < start:
        raise HTTPException(status_code=400, detail="end must not be before start")
    if (end - start).days > MAX_DISABLED_DAYS_RANGE:
        raise HTTPException(status_code=400, detail=f"Range is limited to {MAX_DISABLED_DAYS_RANGE} days")

    days = await use_case.disabled_days(provider_id, start, end)
    return DisabledDaysResponse(provider_id=provider_id, start=start, end=end, disabled_days=days)


@router.post("/prescriptions/{prescription_id}/dispense", response_model=DispenseResponse)
async def dispense_prescription(prescription_id: str, use_case: DispenseUseCaseDep):
    """Mark a prescription dispensed and deduct stock."""
    movements = await use_case.execute(prescription_id)
    return DispenseResponse(
        prescription_id=prescription_id,
        status=PrescriptionStatus.DISPENSED.value,
        movements=[
            StockMovementResponse(
                id=m.id,
                medication_id=m.medication_id,
                movement_type=m.movement_type.value,
                quantity=m.quantity,
                previous_stock=m.previous_stock,
                new_stock=m.new_stock,
                reference_id=m.reference_id,
                notes=m.notes,
            )
            for m in movements
        ],
    )
