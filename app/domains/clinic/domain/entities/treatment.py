"""
Treatment Entity for the Clinic Domain

The treatment record is the root of the encounter workflow. Prescription,
billing and follow-up records are derived from it, never the other way.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from app.core.domain import AggregateRoot, Entity


@dataclass(eq=False)
class Treatment(AggregateRoot[str]):
    """Clinical encounter record."""

    patient_id: str = ""
    provider_id: str | None = None
    treatment_date: date = field(default_factory=date.today)

    # Clinical free text
    symptoms: str | None = None
    diagnosis: str | None = None
    diagnosis_code: str | None = None
    treatment_plan: str | None = None
    procedures: str | None = None
    clinical_notes: str | None = None

    # Sparse map of recorded measurements
    vital_signs: dict[str, float] | None = None

    follow_up_date: date | None = None
    follow_up_notes: str | None = None

    # Source appointment, if the encounter started from one
    appointment_id: str | None = None

    _PATCHABLE = (
        "provider_id",
        "treatment_date",
        "symptoms",
        "diagnosis",
        "diagnosis_code",
        "treatment_plan",
        "procedures",
        "clinical_notes",
        "vital_signs",
        "follow_up_date",
        "follow_up_notes",
    )

    def patch(self, **changes: Any) -> None:
        """Overwrite the editable clinical fields."""
        for name, value in changes.items():
            if name not in self._PATCHABLE:
                raise AttributeError(f"Treatment field '{name}' cannot be patched")
            setattr(self, name, value)
        self.touch()

    def prescription_notes(self) -> str | None:
        """Notes carried onto a prescription derived from this treatment."""
        if not self.diagnosis:
            return None
        return f"จากการวินิจฉัย: {self.diagnosis}"


@dataclass(eq=False)
class TreatmentFile(Entity[str]):
    """Metadata of an attachment uploaded for a treatment."""

    treatment_id: str = ""
    patient_id: str = ""
    file_name: str = ""
    file_url: str = ""
    file_type: str | None = None
    file_size: int | None = None
    uploaded_by: str | None = None
