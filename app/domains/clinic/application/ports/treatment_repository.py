"""
Treatment Repository Ports

Interfaces for treatment and treatment attachment data access.
"""

from typing import Protocol, runtime_checkable

from app.domains.clinic.domain.entities.treatment import Treatment, TreatmentFile


@runtime_checkable
class ITreatmentRepository(Protocol):
    """
    Treatment repository interface.

    Example:
        ```python
        class SQLAlchemyTreatmentRepository(ITreatmentRepository):
            async def find_by_id(self, treatment_id: str) -> Treatment | None:
                ...
        ```
    """

    async def find_by_id(self, treatment_id: str) -> Treatment | None:
        """
        Find treatment by ID.

        Args:
            treatment_id: Treatment identifier

        Returns:
            Treatment if found, None otherwise
        """
        ...

    async def save(self, treatment: Treatment) -> Treatment:
        """
        Insert a new treatment or update an existing one.

        Args:
            treatment: Treatment to persist

        Returns:
            The persisted treatment with its ID assigned
        """
        ...


@runtime_checkable
class ITreatmentFileRepository(Protocol):
    """Attachment metadata interface."""

    async def add(self, treatment_file: TreatmentFile) -> TreatmentFile:
        """Record metadata of an uploaded attachment."""
        ...

    async def find_by_treatment(self, treatment_id: str) -> list[TreatmentFile]:
        """Attachments of a treatment, oldest first."""
        ...
