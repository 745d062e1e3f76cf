"""
Billing Repository Port
"""

from typing import Protocol, runtime_checkable

from app.domains.clinic.domain.entities.billing import Billing, BillingItem


@runtime_checkable
class IBillingRepository(Protocol):
    """
    Billing repository interface.

    Invoice numbers are assigned by the repository on create.
    """

    async def find_by_treatment(self, treatment_id: str) -> Billing | None:
        """
        Find the billing of a treatment.

        Args:
            treatment_id: Treatment identifier

        Returns:
            Billing if one exists, None otherwise
        """
        ...

    async def find_by_appointment(self, appointment_id: str) -> Billing | None:
        """Find the billing scoped to an appointment."""
        ...

    async def create(self, billing: Billing) -> Billing:
        """Insert a billing with its items and a fresh invoice number."""
        ...

    async def replace_items(self, billing: Billing, items: list[BillingItem]) -> Billing:
        """
        Swap the whole item set and store recomputed totals atomically.

        Args:
            billing: Existing billing
            items: New items

        Returns:
            Billing with new items, subtotal and total
        """
        ...
