"""
Billing Composer for the Clinic Domain

Pure pricing of the services and medications chosen during an encounter.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Protocol

from ..entities.billing import BillingItem
from ..value_objects.statuses import BillingItemKind

MEDICATION_DESCRIPTION_PREFIX = "ยา: "


class BillableService(Protocol):
    service_name: str
    quantity: int
    unit_price: Decimal


class BillableMedication(Protocol):
    medication_id: str | None
    medication_name: str
    quantity: int


@dataclass
class ComposedBilling:
    """Priced items and their totals."""

    items: list[BillingItem] = field(default_factory=list)
    subtotal: Decimal = Decimal("0")
    total: Decimal = Decimal("0")

    @property
    def is_empty(self) -> bool:
        return not self.items


class BillingComposer:
    """
    Builds billing items.

    Services with a positive unit price become treatment-service lines.
    Medication lines are priced from the catalog (unknown price counts as 0)
    and only kept when the line total is positive. Totals are exact sums of
    the line totals.

    Example:
        ```python
        composer = BillingComposer()
        composed = composer.compose(services, medications, {"med-1": Decimal("12.50")})
        composed.total
        ```
    """

    def compose(
        self,
        services: Sequence[BillableService],
        medications: Sequence[BillableMedication],
        price_catalog: Mapping[str, Decimal],
    ) -> ComposedBilling:
        items: list[BillingItem] = []

        for service in services:
            unit_price = Decimal(service.unit_price)
            if unit_price <= 0 or service.quantity <= 0:
                continue
            items.append(
                BillingItem.priced(
                    description=service.service_name,
                    kind=BillingItemKind.TREATMENT_SERVICE,
                    quantity=service.quantity,
                    unit_price=unit_price,
                )
            )

        for medication in medications:
            if not medication.medication_id or medication.quantity <= 0:
                continue
            unit_price = Decimal(price_catalog.get(medication.medication_id, Decimal("0")))
            item = BillingItem.priced(
                description=f"{MEDICATION_DESCRIPTION_PREFIX}{medication.medication_name}",
                kind=BillingItemKind.MEDICATION,
                quantity=medication.quantity,
                unit_price=unit_price,
            )
            if item.total > 0:
                items.append(item)

        subtotal = sum((item.total for item in items), Decimal("0"))
        return ComposedBilling(items=items, subtotal=subtotal, total=subtotal)
