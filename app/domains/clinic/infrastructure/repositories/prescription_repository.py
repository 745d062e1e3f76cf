"""
Prescription Repository Implementation

SQLAlchemy implementation of IPrescriptionRepository.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import generate_uuid_str
from app.domains.clinic.application.ports.prescription_repository import IPrescriptionRepository
from app.domains.clinic.domain.entities.prescription import Prescription, PrescriptionItem
from app.domains.clinic.domain.value_objects.statuses import PrescriptionStatus
from app.domains.clinic.infrastructure.persistence.sqlalchemy.models import (
    PrescriptionItemModel,
    PrescriptionModel,
)

logger = logging.getLogger(__name__)


class SQLAlchemyPrescriptionRepository(IPrescriptionRepository):
    """
    SQLAlchemy implementation of prescription repository.

    Every write commits on its own; a failed write is rolled back without
    touching rows committed earlier. Item replacement deletes and inserts
    in one transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, prescription_id: str) -> Prescription | None:
        result = await self.session.execute(
            select(PrescriptionModel).where(PrescriptionModel.id == prescription_id)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find_by_treatment(self, treatment_id: str) -> Prescription | None:
        result = await self.session.execute(
            select(PrescriptionModel)
            .where(
                PrescriptionModel.treatment_id == treatment_id,
                PrescriptionModel.status != PrescriptionStatus.CANCELLED.value,
            )
            .order_by(PrescriptionModel.created_at.desc())
            .limit(1)
        )
        model = result.scalars().first()
        return self._to_entity(model) if model else None

    async def create(self, prescription: Prescription) -> Prescription:
        prescription_id = generate_uuid_str()
        model = PrescriptionModel(
            id=prescription_id,
            patient_id=prescription.patient_id,
            treatment_id=prescription.treatment_id,
            provider_id=prescription.provider_id,
            prescription_date=prescription.prescription_date,
            status=prescription.status.value,
            notes=prescription.notes,
        )
        try:
            self.session.add(model)
            self.session.add_all(self._item_models(prescription_id, prescription.items))
            await self.session.commit()
        except Exception as e:
            logger.error(f"Error creating prescription for treatment {prescription.treatment_id}: {e}")
            await self.session.rollback()
            raise

        prescription.id = prescription_id
        for item in prescription.items:
            item.prescription_id = prescription_id
        logger.info(f"Prescription {prescription_id} created with {len(prescription.items)} items")
        return prescription

    async def replace_items(self, prescription: Prescription, items: list[PrescriptionItem]) -> Prescription:
        try:
            await self.session.execute(
                update(PrescriptionModel)
                .where(PrescriptionModel.id == prescription.id)
                .values(
                    provider_id=prescription.provider_id,
                    notes=prescription.notes,
                    updated_at=datetime.now(UTC),
                )
            )
            await self.session.execute(
                delete(PrescriptionItemModel).where(PrescriptionItemModel.prescription_id == prescription.id)
            )
            self.session.add_all(self._item_models(prescription.id, items))
            await self.session.commit()
        except Exception as e:
            logger.error(f"Error replacing items of prescription {prescription.id}: {e}")
            await self.session.rollback()
            raise

        prescription.items = list(items)
        prescription.increment_version()
        logger.info(f"Prescription {prescription.id} items replaced ({len(items)} items)")
        return prescription

    async def update_status(self, prescription_id: str, status: PrescriptionStatus) -> None:
        await self.session.execute(
            update(PrescriptionModel)
            .where(PrescriptionModel.id == prescription_id)
            .values(status=status.value, updated_at=datetime.now(UTC))
        )

    @staticmethod
    def _item_models(prescription_id: str, items: list[PrescriptionItem]) -> list[PrescriptionItemModel]:
        models = []
        for position, item in enumerate(items):
            item.id = item.id or generate_uuid_str()
            item.prescription_id = prescription_id
            models.append(
                PrescriptionItemModel(
                    id=item.id,
                    prescription_id=prescription_id,
                    position=position,
                    medication_id=item.medication_id,
                    medication_name=item.medication_name,
                    dosage=item.dosage or "-",
                    frequency=item.frequency,
                    duration=item.duration,
                    quantity=item.quantity,
                    instructions=item.instructions,
                )
            )
        return models

    def _to_entity(self, model: PrescriptionModel) -> Prescription:
        """Convert model to entity."""
        return Prescription(
            id=model.id,
            patient_id=model.patient_id,
            treatment_id=model.treatment_id,
            provider_id=model.provider_id,
            prescription_date=model.prescription_date,
            status=PrescriptionStatus.from_string(model.status),
            notes=model.notes,
            items=[
                PrescriptionItem(
                    id=item.id,
                    prescription_id=model.id,
                    medication_id=item.medication_id,
                    medication_name=item.medication_name,
                    dosage=item.dosage,
                    frequency=item.frequency,
                    duration=item.duration,
                    quantity=item.quantity,
                    instructions=item.instructions,
                )
                for item in model.items
            ],
        )
