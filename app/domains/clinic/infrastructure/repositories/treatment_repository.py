"""
Treatment Repository Implementation

SQLAlchemy implementation of ITreatmentRepository and ITreatmentFileRepository.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import EntityNotFoundException, generate_uuid_str
from app.domains.clinic.application.ports.treatment_repository import (
    ITreatmentFileRepository,
    ITreatmentRepository,
)
from app.domains.clinic.domain.entities.treatment import Treatment, TreatmentFile
from app.domains.clinic.infrastructure.persistence.sqlalchemy.models import TreatmentFileModel, TreatmentModel

logger = logging.getLogger(__name__)


class SQLAlchemyTreatmentRepository(ITreatmentRepository):
    """
    SQLAlchemy implementation of treatment repository.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, treatment_id: str) -> Treatment | None:
        """Find treatment by ID."""
        result = await self.session.execute(select(TreatmentModel).where(TreatmentModel.id == treatment_id))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def save(self, treatment: Treatment) -> Treatment:
        """Insert or update treatment and commit it."""
        if treatment.id is None:
            model = TreatmentModel(id=generate_uuid_str(), patient_id=treatment.patient_id)
            self._apply(model, treatment)
            self.session.add(model)
            await self._commit(f"inserting treatment for patient {treatment.patient_id}")
            treatment.id = model.id
            logger.debug(f"Inserted treatment {model.id}")
            return treatment

        model = await self.session.get(TreatmentModel, treatment.id)
        if model is None:
            raise EntityNotFoundException("Treatment", treatment.id)
        self._apply(model, treatment)
        await self._commit(f"updating treatment {treatment.id}")
        treatment.increment_version()
        return treatment

    async def _commit(self, action: str) -> None:
        try:
            await self.session.commit()
        except Exception as e:
            logger.error(f"Error {action}: {e}")
            await self.session.rollback()
            raise

    @staticmethod
    def _apply(model: TreatmentModel, treatment: Treatment) -> None:
        model.provider_id = treatment.provider_id
        model.appointment_id = treatment.appointment_id
        model.treatment_date = treatment.treatment_date
        model.symptoms = treatment.symptoms
        model.diagnosis = treatment.diagnosis
        model.diagnosis_code = treatment.diagnosis_code
        model.treatment_plan = treatment.treatment_plan
        model.procedures = treatment.procedures
        model.notes = treatment.clinical_notes
        model.vital_signs = treatment.vital_signs
        model.follow_up_date = treatment.follow_up_date
        model.follow_up_notes = treatment.follow_up_notes

    def _to_entity(self, model: TreatmentModel) -> Treatment:
        """Convert model to entity."""
        return Treatment(
            id=model.id,
            patient_id=model.patient_id,
            provider_id=model.provider_id,
            appointment_id=model.appointment_id,
            treatment_date=model.treatment_date,
            symptoms=model.symptoms,
            diagnosis=model.diagnosis,
            diagnosis_code=model.diagnosis_code,
            treatment_plan=model.treatment_plan,
            procedures=model.procedures,
            clinical_notes=model.notes,
            vital_signs=model.vital_signs or None,
            follow_up_date=model.follow_up_date,
            follow_up_notes=model.follow_up_notes,
        )


class SQLAlchemyTreatmentFileRepository(ITreatmentFileRepository):
    """Attachment metadata persistence."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, treatment_file: TreatmentFile) -> TreatmentFile:
        model = TreatmentFileModel(
            id=generate_uuid_str(),
            treatment_id=treatment_file.treatment_id,
            patient_id=treatment_file.patient_id,
            file_name=treatment_file.file_name,
            file_url=treatment_file.file_url,
            file_type=treatment_file.file_type,
            file_size=treatment_file.file_size,
            uploaded_by=treatment_file.uploaded_by,
        )
        self.session.add(model)
        try:
            await self.session.commit()
        except Exception as e:
            logger.error(f"Error saving attachment {treatment_file.file_name}: {e}")
            await self.session.rollback()
            raise
        treatment_file.id = model.id
        return treatment_file

    async def find_by_treatment(self, treatment_id: str) -> list[TreatmentFile]:
        result = await self.session.execute(
            select(TreatmentFileModel)
            .where(TreatmentFileModel.treatment_id == treatment_id)
            .order_by(TreatmentFileModel.created_at)
        )
        return [
            TreatmentFile(
                id=m.id,
                treatment_id=m.treatment_id,
                patient_id=m.patient_id,
                file_name=m.file_name,
                file_url=m.file_url,
                file_type=m.file_type,
                file_size=m.file_size,
                uploaded_by=m.uploaded_by,
            )
            for m in result.scalars().all()
        ]
