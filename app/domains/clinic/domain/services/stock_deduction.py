"""
Stock deduction when a prescription is dispensed.
"""

from ..entities.prescription import PrescriptionItem
from ..entities.stock_movement import StockMovement
from ..value_objects.statuses import StockMovementType

PRESCRIPTION_REFERENCE = "prescription"


class StockDeduction:
    """Computes the outgoing stock movement for one dispensed item."""

    def deduct(
        self,
        item: PrescriptionItem,
        current_stock: int,
        reference_id: str | None,
        created_by: str | None = None,
    ) -> StockMovement:
        """
        Stock never goes below zero; the movement still records the
        quantity that was dispensed.
        """
        new_stock = max(current_stock - item.quantity, 0)
        return StockMovement(
            medication_id=item.medication_id or "",
            movement_type=StockMovementType.OUT,
            quantity=item.quantity,
            previous_stock=current_stock,
            new_stock=new_stock,
            reference_type=PRESCRIPTION_REFERENCE,
            reference_id=reference_id,
            notes=f"จ่ายยา {item.medication_name} จำนวน {item.quantity}",
            created_by=created_by,
        )
