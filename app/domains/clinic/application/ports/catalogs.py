"""
Catalog, schedule and stock ports.

Read-mostly collaborators owned by other parts of the clinic system.
"""

from decimal import Decimal
from typing import Protocol, runtime_checkable

from app.domains.clinic.domain.entities.stock_movement import StockMovement
from app.domains.clinic.domain.value_objects.schedule import ScheduleWindow, ServiceInfo


@runtime_checkable
class IMedicationCatalog(Protocol):
    """Medication price lookup."""

    async def get_prices(self, medication_ids: list[str]) -> dict[str, Decimal]:
        """
        Unit prices of the given medications.

        Args:
            medication_ids: Medication identifiers

        Returns:
            Mapping of medication ID to price; unknown IDs are absent
        """
        ...


@runtime_checkable
class IServiceCatalog(Protocol):
    """Treatment service lookup (price, duration, delivery mode)."""

    async def get_services(self, service_ids: list[str]) -> dict[str, ServiceInfo]:
        """Catalog entries by ID; unknown IDs are absent."""
        ...


@runtime_checkable
class IProviderScheduleSource(Protocol):
    """Provider working-hour windows."""

    async def get_windows(self, provider_id: str) -> list[ScheduleWindow]:
        """All windows of a provider, any weekday, active or not."""
        ...


@runtime_checkable
class IStockLedger(Protocol):
    """Medication stock levels and their movement history."""

    async def get_stock(self, medication_id: str) -> int:
        """Current stock of a medication (0 when unknown)."""
        ...

    async def apply(self, movement: StockMovement) -> StockMovement:
        """Set the medication stock to ``movement.new_stock`` and record the movement."""
        ...
