"""
Encounter saga bookkeeping.

Tracks the state transitions and warnings of one save of the treatment
screen. Every step after the treatment itself reports failures here
instead of raising.
"""

import logging

from app.domains.clinic.application.dto.encounter_dtos import (
    EncounterResult,
    SagaState,
    SagaStep,
    SagaWarning,
)

logger = logging.getLogger(__name__)

# Warning messages shown to the user
ATTACHMENT_FAILED = "Treatment saved, but attachment '{file_name}' could not be uploaded"
PRESCRIPTION_CREATE_FAILED = "Treatment saved, but the prescription could not be created"
PRESCRIPTION_UPDATE_FAILED = "Treatment saved, but the prescription could not be updated"
BILLING_CREATE_FAILED = "Treatment saved, but the billing could not be created"
BILLING_UPDATE_FAILED = "Treatment saved, but the billing could not be updated"
LINKED_APPOINTMENT_FAILED = "Treatment saved, but the linked appointment could not be updated"
FOLLOW_UP_NO_TIME = "No time selected for the follow-up appointment"
FOLLOW_UP_NO_PROVIDER = "No provider selected for the follow-up appointment"
FOLLOW_UP_SLOT_TAKEN = "The selected follow-up time is no longer available"
FOLLOW_UP_CREATE_FAILED = "Treatment saved, but the follow-up appointment could not be created"
FOLLOW_UP_LOOKUP_FAILED = "Treatment saved, but existing follow-up appointments could not be checked"
FOLLOW_UP_ALREADY_BOOKED = "A follow-up appointment already exists on this date, edit it from the appointments screen"
FOLLOW_UP_BILLING_FAILED = "Follow-up appointment created, but its billing could not be created"
CALENDAR_SYNC_FAILED = "Follow-up appointment created, but it could not be synced to the calendar"
MEETING_LINK_FAILED = "Follow-up appointment created, but the online meeting link could not be created"
NOTIFICATION_FAILED = "Follow-up appointment created, but the notification could not be sent"


class EncounterSaga:
    """
    Accumulates the outcome of an encounter save.

    ``states`` is the ordered history of transitions, starting at DRAFT.
    """

    def __init__(self) -> None:
        self.states: list[SagaState] = [SagaState.DRAFT]
        self.warnings: list[SagaWarning] = []

        self.treatment_id: str | None = None
        self.prescription_id: str | None = None
        self.billing_id: str | None = None
        self.follow_up_appointment_id: str | None = None
        self.follow_up_billing_id: str | None = None
        self.meeting_link: str | None = None
        self.follow_up_locked = False
        self.uploaded_files = 0

    @property
    def state(self) -> SagaState:
        return self.states[-1]

    def advance(self, state: SagaState) -> None:
        logger.info(f"Encounter {self.treatment_id}: {self.state.value} -> {state.value}")
        self.states.append(state)

    def treatment_saved(self, treatment_id: str) -> None:
        self.treatment_id = treatment_id
        self.advance(SagaState.TREATMENT_SAVED)

    def warn(self, step: SagaStep, message: str, error: Exception | None = None) -> None:
        if error is not None:
            logger.warning(f"Encounter {self.treatment_id} step '{step.value}' failed: {error}")
        else:
            logger.info(f"Encounter {self.treatment_id} step '{step.value}': {message}")
        self.warnings.append(SagaWarning(step=step, message=message))

    def complete(self) -> EncounterResult:
        self.advance(SagaState.COMPLETE)
        return EncounterResult(
            treatment_id=self.treatment_id or "",
            warnings=list(self.warnings),
            states=list(self.states),
            prescription_id=self.prescription_id,
            billing_id=self.billing_id,
            follow_up_appointment_id=self.follow_up_appointment_id,
            follow_up_billing_id=self.follow_up_billing_id,
            meeting_link=self.meeting_link,
            follow_up_locked=self.follow_up_locked,
            uploaded_files=self.uploaded_files,
        )
