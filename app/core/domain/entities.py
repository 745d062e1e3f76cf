"""
Base Entity Classes

Entities keep their identity across state changes. Clinic records use
string UUIDs as identifiers so they can be assigned before persistence.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Generic, TypeVar
from uuid import uuid4

TId = TypeVar("TId")


@dataclass(eq=False)
class Entity(Generic[TId]):
    """
    Base class for all domain entities.

    Two entities are equal when they carry the same non-null ID.
    """

    id: TId | None = field(default=None)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Entity):
            return False
        if self.id is None or other.id is None:
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id) if self.id is not None else id(self)

    def is_new(self) -> bool:
        """Check if entity has not been persisted yet."""
        return self.id is None

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now(UTC)


@dataclass(eq=False)
class AggregateRoot(Entity[TId], Generic[TId]):
    """
    Entry point to an aggregate.

    Child rows (prescription items, billing items) are only changed through
    their aggregate root so totals and ordering stay consistent.
    """

    version: int = field(default=0)

    def increment_version(self) -> None:
        """Increment version after a persisted mutation."""
        self.version += 1


def generate_uuid_str() -> str:
    """Generate a new UUID as string."""
    return str(uuid4())
