"""
Prescription Repository Port
"""

from typing import Protocol, runtime_checkable

from app.domains.clinic.domain.entities.prescription import Prescription, PrescriptionItem
from app.domains.clinic.domain.value_objects.statuses import PrescriptionStatus


@runtime_checkable
class IPrescriptionRepository(Protocol):
    """
    Prescription repository interface.

    Item sets are replaced atomically: readers never see a prescription
    with its old items deleted and the new ones missing.
    """

    async def find_by_id(self, prescription_id: str) -> Prescription | None:
        """
        Find prescription by ID, items included.

        Args:
            prescription_id: Prescription identifier

        Returns:
            Prescription if found, None otherwise
        """
        ...

    async def find_by_treatment(self, treatment_id: str) -> Prescription | None:
        """
        Find the active prescription of a treatment.

        Args:
            treatment_id: Treatment identifier

        Returns:
            Most recent non-cancelled prescription, or None
        """
        ...

    async def create(self, prescription: Prescription) -> Prescription:
        """Insert a prescription with its items."""
        ...

    async def replace_items(self, prescription: Prescription, items: list[PrescriptionItem]) -> Prescription:
        """
        Update prescription header fields and swap its whole item set.

        Args:
            prescription: Prescription with updated provider/notes
            items: New ordered items

        Returns:
            Prescription holding the new items
        """
        ...

    async def update_status(self, prescription_id: str, status: PrescriptionStatus) -> None:
        """Persist a status change."""
        ...
