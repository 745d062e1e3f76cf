"""
Billing Repository Implementation

SQLAlchemy implementation of IBillingRepository.
"""

import logging
from datetime import UTC, date, datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import generate_uuid_str
from app.domains.clinic.application.ports.billing_repository import IBillingRepository
from app.domains.clinic.domain.entities.billing import Billing, BillingItem
from app.domains.clinic.domain.value_objects.statuses import BillingItemKind, PaymentStatus
from app.domains.clinic.infrastructure.persistence.sqlalchemy.models import BillingItemModel, BillingModel

logger = logging.getLogger(__name__)


def format_invoice_number(billing_date: date, sequence: int) -> str:
    """INV-YYYYMMDD-NNNN"""
    return f"INV-{billing_date:%Y%m%d}-{sequence:04d}"


class SQLAlchemyBillingRepository(IBillingRepository):
    """
    SQLAlchemy implementation of billing repository.

    Every write commits on its own. A failed insert (for example an invoice
    number taken concurrently) is rolled back and re-raised.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_treatment(self, treatment_id: str) -> Billing | None:
        result = await self.session.execute(
            select(BillingModel)
            .where(BillingModel.treatment_id == treatment_id)
            .order_by(BillingModel.created_at.desc())
            .limit(1)
        )
        model = result.scalars().first()
        return self._to_entity(model) if model else None

    async def find_by_appointment(self, appointment_id: str) -> Billing | None:
        result = await self.session.execute(
            select(BillingModel)
            .where(BillingModel.appointment_id == appointment_id)
            .order_by(BillingModel.created_at.desc())
            .limit(1)
        )
        model = result.scalars().first()
        return self._to_entity(model) if model else None

    async def next_invoice_number(self, billing_date: date) -> str:
        """Next sequential invoice number of the billing date."""
        prefix = format_invoice_number(billing_date, 0)[:-4]
        result = await self.session.execute(
            select(func.count()).select_from(BillingModel).where(BillingModel.invoice_number.like(f"{prefix}%"))
        )
        return format_invoice_number(billing_date, (result.scalar_one() or 0) + 1)

    async def create(self, billing: Billing) -> Billing:
        billing_id = generate_uuid_str()
        invoice_number = await self.next_invoice_number(billing.billing_date)
        billing.recalculate()

        model = BillingModel(
            id=billing_id,
            invoice_number=invoice_number,
            patient_id=billing.patient_id,
            treatment_id=billing.treatment_id,
            appointment_id=billing.appointment_id,
            billing_date=billing.billing_date,
            subtotal=billing.subtotal,
            total=billing.total,
            payment_status=billing.payment_status.value,
            created_by=billing.created_by,
            notes=billing.notes,
        )
        try:
            self.session.add(model)
            self.session.add_all(self._item_models(billing_id, billing.items))
            await self.session.commit()
        except Exception as e:
            logger.error(f"Error creating billing {invoice_number}: {e}")
            await self.session.rollback()
            raise

        billing.id = billing_id
        billing.invoice_number = invoice_number
        logger.info(f"Billing {billing.invoice_number} created, total {billing.total}")
        return billing

    async def replace_items(self, billing: Billing, items: list[BillingItem]) -> Billing:
        billing.items = list(items)
        billing.recalculate()

        try:
            await self.session.execute(
                update(BillingModel)
                .where(BillingModel.id == billing.id)
                .values(subtotal=billing.subtotal, total=billing.total, updated_at=datetime.now(UTC))
            )
            await self.session.execute(delete(BillingItemModel).where(BillingItemModel.billing_id == billing.id))
            self.session.add_all(self._item_models(billing.id, billing.items))
            await self.session.commit()
        except Exception as e:
            logger.error(f"Error replacing items of billing {billing.id}: {e}")
            await self.session.rollback()
            raise

        billing.increment_version()
        logger.info(f"Billing {billing.invoice_number} items replaced, total {billing.total}")
        return billing

    @staticmethod
    def _item_models(billing_id: str, items: list[BillingItem]) -> list[BillingItemModel]:
        models = []
        for position, item in enumerate(items):
            item.id = item.id or generate_uuid_str()
            item.billing_id = billing_id
            models.append(
                BillingItemModel(
                    id=item.id,
                    billing_id=billing_id,
                    position=position,
                    description=item.description,
                    item_type=item.kind.value,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total=item.total,
                )
            )
        return models

    def _to_entity(self, model: BillingModel) -> Billing:
        """Convert model to entity."""
        return Billing(
            id=model.id,
            invoice_number=model.invoice_number,
            patient_id=model.patient_id,
            treatment_id=model.treatment_id,
            appointment_id=model.appointment_id,
            billing_date=model.billing_date,
            subtotal=model.subtotal,
            total=model.total,
            payment_status=PaymentStatus.from_string(model.payment_status),
            created_by=model.created_by,
            notes=model.notes,
            items=[
                BillingItem(
                    id=item.id,
                    billing_id=model.id,
                    description=item.description,
                    kind=BillingItemKind.from_string(item.item_type),
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total=item.total,
                )
                for item in model.items
            ],
        )
