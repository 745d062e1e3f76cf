"""
Vital signs value object.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

from app.core.domain import ValidationException, ValueObject


@dataclass(frozen=True)
class VitalSigns(ValueObject):
    """
    Measurements taken during an encounter.

    Every field is optional; only recorded measurements are persisted.
    """

    pulse: float | None = None  # BPM
    systolic: float | None = None  # mmHg
    diastolic: float | None = None  # mmHg
    weight: float | None = None  # kg
    height: float | None = None  # cm
    temperature: float | None = None  # Celsius
    respiratory_rate: float | None = None  # breaths/min
    oxygen_saturation: float | None = None  # %

    def _validate(self) -> None:
        for name, value in asdict(self).items():
            if value is not None and value < 0:
                raise ValidationException(f"Vital sign '{name}' cannot be negative", field=name)
        if self.oxygen_saturation is not None and self.oxygen_saturation > 100:
            raise ValidationException("Oxygen saturation must be between 0 and 100", field="oxygen_saturation")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "VitalSigns":
        """Build from a loose mapping, ignoring unknown keys and blank strings."""
        if not data:
            return cls()
        known = cls.__dataclass_fields__.keys()
        values: dict[str, float] = {}
        for key, raw in data.items():
            if key not in known or raw is None or raw == "":
                continue
            values[key] = float(raw)
        return cls(**values)

    def to_sparse_dict(self) -> dict[str, float] | None:
        """Only the recorded measurements, or None when nothing was measured."""
        recorded = {name: value for name, value in asdict(self).items() if value is not None}
        return recorded or None

    @property
    def blood_pressure(self) -> str | None:
        if self.systolic and self.diastolic:
            return f"{self.systolic:g}/{self.diastolic:g}"
        return None

    @property
    def bmi(self) -> float | None:
        if self.weight and self.height:
            meters = self.height / 100
            return round(self.weight / (meters * meters), 1)
        return None
