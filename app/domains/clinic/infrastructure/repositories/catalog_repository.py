"""
Catalog Repository Implementations

Medication prices and stock, treatment services and provider schedules.
"""

import logging
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import generate_uuid_str
from app.domains.clinic.application.ports.catalogs import (
    IMedicationCatalog,
    IProviderScheduleSource,
    IServiceCatalog,
    IStockLedger,
)
from app.domains.clinic.domain.entities.stock_movement import StockMovement
from app.domains.clinic.domain.value_objects.schedule import ScheduleWindow, ServiceInfo
from app.domains.clinic.domain.value_objects.statuses import ServiceMode
from app.domains.clinic.infrastructure.persistence.sqlalchemy.models import (
    MedicationModel,
    ProviderScheduleModel,
    ServiceModel,
    StockMovementModel,
)

logger = logging.getLogger(__name__)


class SQLAlchemyMedicationCatalog(IMedicationCatalog):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_prices(self, medication_ids: list[str]) -> dict[str, Decimal]:
        if not medication_ids:
            return {}
        result = await self.session.execute(
            select(MedicationModel.id, MedicationModel.price).where(MedicationModel.id.in_(medication_ids))
        )
        return {row.id: Decimal(row.price) for row in result.all() if row.price is not None}


class SQLAlchemyServiceCatalog(IServiceCatalog):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_services(self, service_ids: list[str]) -> dict[str, ServiceInfo]:
        if not service_ids:
            return {}
        result = await self.session.execute(select(ServiceModel).where(ServiceModel.id.in_(service_ids)))
        return {
            model.id: ServiceInfo(
                id=model.id,
                name=model.name,
                price=Decimal(model.price or 0),
                duration_minutes=model.duration_minutes,
                service_mode=ServiceMode.from_string(model.service_mode or ServiceMode.ONSITE.value),
            )
            for model in result.scalars().all()
        }


class SQLAlchemyProviderScheduleSource(IProviderScheduleSource):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_windows(self, provider_id: str) -> list[ScheduleWindow]:
        result = await self.session.execute(
            select(ProviderScheduleModel)
            .where(ProviderScheduleModel.provider_id == provider_id)
            .order_by(ProviderScheduleModel.day_of_week, ProviderScheduleModel.start_time)
        )
        return [
            ScheduleWindow(
                weekday=model.day_of_week,
                start_time=model.start_time,
                end_time=model.end_time,
                is_active=bool(model.is_active),
                provider_id=model.provider_id,
            )
            for model in result.scalars().all()
        ]


class SQLAlchemyStockLedger(IStockLedger):
    """Stock levels live on the medication row; movements are appended."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_stock(self, medication_id: str) -> int:
        result = await self.session.execute(
            select(MedicationModel.stock_quantity).where(MedicationModel.id == medication_id)
        )
        return result.scalar_one_or_none() or 0

    async def apply(self, movement: StockMovement) -> StockMovement:
        movement.id = movement.id or generate_uuid_str()
        await self.session.execute(
            update(MedicationModel)
            .where(MedicationModel.id == movement.medication_id)
            .values(stock_quantity=movement.new_stock)
        )
        self.session.add(
            StockMovementModel(
                id=movement.id,
                medication_id=movement.medication_id,
                movement_type=movement.movement_type.value,
                quantity=movement.quantity,
                previous_stock=movement.previous_stock,
                new_stock=movement.new_stock,
                reference_type=movement.reference_type,
                reference_id=movement.reference_id,
                notes=movement.notes,
                created_by=movement.created_by,
            )
        )
        await self.session.flush()
        logger.debug(f"Stock of {movement.medication_id}: {movement.previous_stock} -> {movement.new_stock}")
        return movement
