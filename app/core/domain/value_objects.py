"""
Base Value Object Classes

Value objects are immutable and compared by value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Self


@dataclass(frozen=True)
class ValueObject:
    """
    Base class for all value objects.

    Subclasses override ``_validate`` to enforce their constraints at
    construction time.
    """

    def __post_init__(self):
        self._validate()

    def _validate(self) -> None:
        """Validate the value object. Override in subclasses."""
        pass


class StatusEnum(str, Enum):
    """
    Base class for status enumerations.

    Values are stored as plain strings in the database and JSON payloads.
    """

    @classmethod
    def values(cls) -> list[str]:
        """Get all possible values."""
        return [member.value for member in cls]

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create enum from string value (case-insensitive)."""
        value_lower = value.lower()
        for member in cls:
            if member.value.lower() == value_lower:
                return member
        raise ValueError(f"Invalid {cls.__name__}: {value}. Valid values: {cls.values()}")
