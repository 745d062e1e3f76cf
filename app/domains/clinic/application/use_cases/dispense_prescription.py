"""
Dispense Prescription Use Case

Marks a prescription dispensed and deducts the dispensed quantities from
medication stock.
"""

import logging

from app.core.domain import EntityNotFoundException
from app.domains.clinic.application.dto.encounter_dtos import CurrentActor
from app.domains.clinic.application.ports import IPrescriptionRepository, IStockLedger
from app.domains.clinic.domain.entities.stock_movement import StockMovement
from app.domains.clinic.domain.services.stock_deduction import StockDeduction

logger = logging.getLogger(__name__)


class DispensePrescriptionUseCase:
    """
    Use case for dispensing a prescription.

    Items without a medication reference are dispensed without a stock
    movement.
    """

    def __init__(
        self,
        prescription_repository: IPrescriptionRepository,
        stock_ledger: IStockLedger,
        actor: CurrentActor,
        stock_deduction: StockDeduction | None = None,
    ):
        self.prescriptions = prescription_repository
        self.stock_ledger = stock_ledger
        self.actor = actor
        self.stock_deduction = stock_deduction or StockDeduction()

    async def execute(self, prescription_id: str) -> list[StockMovement]:
        """
        Dispense the prescription.

        Raises:
            EntityNotFoundException: Unknown prescription
            InvalidOperationException: Prescription is not pending
        """
        prescription = await self.prescriptions.find_by_id(prescription_id)
        if prescription is None:
            raise EntityNotFoundException("Prescription", prescription_id)

        prescription.dispense()
        await self.prescriptions.update_status(prescription.id, prescription.status)

        movements: list[StockMovement] = []
        for item in prescription.items:
            if not item.medication_id:
                continue
            current = await self.stock_ledger.get_stock(item.medication_id)
            movement = self.stock_deduction.deduct(
                item, current, reference_id=prescription.id, created_by=self.actor.user_id
            )
            movements.append(await self.stock_ledger.apply(movement))

        logger.info(f"Prescription {prescription.id} dispensed ({len(movements)} stock movements)")
        return movements
