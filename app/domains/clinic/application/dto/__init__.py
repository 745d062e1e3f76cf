# ============================================================================
# SCOPE: APPLICATION LAYER (Clinic)
# Description: Data Transfer Objects exports.
# ============================================================================
"""Application DTOs for the Clinic domain."""

from .encounter_dtos import (
    AttachmentUpload,
    BookableSlotsRequest,
    BookableSlotsResult,
    CurrentActor,
    EncounterForm,
    EncounterResult,
    FollowUpRequest,
    LinkedAppointmentEdit,
    MedicationLine,
    SagaState,
    SagaStep,
    SagaWarning,
    ServiceSelection,
)

__all__ = [
    # Request DTOs
    "AttachmentUpload",
    "BookableSlotsRequest",
    "CurrentActor",
    "EncounterForm",
    "FollowUpRequest",
    "LinkedAppointmentEdit",
    "MedicationLine",
    "ServiceSelection",
    # Workflow state
    "SagaState",
    "SagaStep",
    "SagaWarning",
    # Result DTOs
    "BookableSlotsResult",
    "EncounterResult",
]
