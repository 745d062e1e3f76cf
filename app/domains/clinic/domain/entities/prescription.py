"""
Prescription Entity for the Clinic Domain
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from app.core.domain import AggregateRoot, Entity, InvalidOperationException, ValidationException

from ..value_objects.statuses import PrescriptionStatus


@dataclass(eq=False)
class PrescriptionItem(Entity[str]):
    """One prescribed medication line. Names are snapshots of the catalog."""

    prescription_id: str | None = None
    medication_id: str | None = None
    medication_name: str = ""
    dosage: str = "-"
    frequency: str | None = None
    duration: str | None = None
    quantity: int = 1
    instructions: str | None = None

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValidationException(
                f"Quantity for '{self.medication_name}' must be positive", field="quantity"
            )


@dataclass(eq=False)
class Prescription(AggregateRoot[str]):
    """
    Prescription aggregate root.

    Items are ordered and always replaced as a whole.
    """

    patient_id: str = ""
    treatment_id: str | None = None
    provider_id: str | None = None
    prescription_date: date = field(default_factory=date.today)
    status: PrescriptionStatus = PrescriptionStatus.PENDING
    notes: str | None = None
    items: list[PrescriptionItem] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.status != PrescriptionStatus.CANCELLED

    def replace_items(self, items: Iterable[PrescriptionItem]) -> None:
        """Swap the whole item set, keeping the submitted order."""
        if self.status == PrescriptionStatus.DISPENSED:
            raise InvalidOperationException("replace_items", self.status.value)
        new_items = list(items)
        for item in new_items:
            item.prescription_id = self.id
        self.items = new_items
        self.touch()

    def dispense(self) -> None:
        if not self.status.can_transition_to(PrescriptionStatus.DISPENSED):
            raise InvalidOperationException("dispense", self.status.value)
        self.status = PrescriptionStatus.DISPENSED
        self.touch()

    def cancel(self) -> None:
        if not self.status.can_transition_to(PrescriptionStatus.CANCELLED):
            raise InvalidOperationException("cancel", self.status.value)
        self.status = PrescriptionStatus.CANCELLED
        self.touch()
