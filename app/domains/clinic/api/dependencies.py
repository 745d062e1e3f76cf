"""
Clinic API Dependencies

FastAPI dependencies for the clinic domain.
"""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.container import get_container
from app.database.async_db import get_async_db
from app.domains.clinic.application.dto import CurrentActor
from app.domains.clinic.application.use_cases import (
    DispensePrescriptionUseCase,
    EncounterOrchestrator,
    GetBookableSlotsUseCase,
)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_async_db)]


def get_current_actor(x_user_id: Annotated[str | None, Header()] = None) -> CurrentActor:
    """Signed-in user, forwarded by the gateway in the X-User-Id header."""
    return CurrentActor(user_id=x_user_id or None)


ActorDep = Annotated[CurrentActor, Depends(get_current_actor)]


def get_encounter_orchestrator(db: DbSession, actor: ActorDep) -> EncounterOrchestrator:
    """Get EncounterOrchestrator instance with database session."""
    container = get_container()
    return container.create_encounter_orchestrator(db, actor)


def get_bookable_slots_use_case(db: DbSession) -> GetBookableSlotsUseCase:
    """Get GetBookableSlotsUseCase instance with database session."""
    container = get_container()
    return container.create_get_bookable_slots_use_case(db)


def get_dispense_prescription_use_case(db: DbSession, actor: ActorDep) -> DispensePrescriptionUseCase:
    """Get DispensePrescriptionUseCase instance with database session."""
    container = get_container()
    return container.create_dispense_prescription_use_case(db, actor)


__all__ = [
    "DbSession",
    "get_current_actor",
    "get_encounter_orchestrator",
    "get_bookable_slots_use_case",
    "get_dispense_prescription_use_case",
]
