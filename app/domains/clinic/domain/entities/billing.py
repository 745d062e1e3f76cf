"""
Billing Entity for the Clinic Domain
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from app.core.domain import AggregateRoot, Entity

from ..value_objects.statuses import BillingItemKind, PaymentStatus


@dataclass(eq=False)
class BillingItem(Entity[str]):
    """A priced line of a billing document."""

    billing_id: str | None = None
    description: str = ""
    kind: BillingItemKind = BillingItemKind.TREATMENT_SERVICE
    quantity: int = 1
    unit_price: Decimal = Decimal("0")
    total: Decimal = Decimal("0")

    @classmethod
    def priced(cls, description: str, kind: BillingItemKind, quantity: int, unit_price: Decimal) -> "BillingItem":
        """Create an item whose total is unit price times quantity."""
        return cls(
            description=description,
            kind=kind,
            quantity=quantity,
            unit_price=unit_price,
            total=unit_price * quantity,
        )


@dataclass(eq=False)
class Billing(AggregateRoot[str]):
    """
    Billing aggregate root.

    Scoped to either a treatment or a follow-up appointment. Subtotal and
    total are always recomputed from the items.
    """

    invoice_number: str | None = None
    patient_id: str = ""
    treatment_id: str | None = None
    appointment_id: str | None = None
    billing_date: date = field(default_factory=date.today)
    subtotal: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    payment_status: PaymentStatus = PaymentStatus.PENDING
    created_by: str | None = None
    notes: str | None = None
    items: list[BillingItem] = field(default_factory=list)

    def replace_items(self, items: Iterable[BillingItem]) -> None:
        new_items = list(items)
        for item in new_items:
            item.billing_id = self.id
        self.items = new_items
        self.recalculate()
        self.touch()

    def recalculate(self) -> None:
        self.subtotal = sum((item.total for item in self.items), Decimal("0"))
        self.total = self.subtotal
