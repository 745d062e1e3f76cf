"""
Stock movement record produced when medication leaves the shelf.
"""

from dataclasses import dataclass

from app.core.domain import Entity

from ..value_objects.statuses import StockMovementType


@dataclass(eq=False)
class StockMovement(Entity[str]):
    medication_id: str = ""
    movement_type: StockMovementType = StockMovementType.OUT
    quantity: int = 0
    previous_stock: int = 0
    new_stock: int = 0
    reference_type: str | None = None
    reference_id: str | None = None
    notes: str | None = None
    created_by: str | None = None

    @property
    def delta(self) -> int:
        return self.new_stock - self.previous_stock
