"""
Domain Exceptions

These exceptions represent business rule violations and integration errors.
The API layer translates them into HTTP responses.
"""

from typing import Any


class DomainException(Exception):
    """
    Base exception for all domain-related errors.
    """

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "INVALID_OPERATION")
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DomainException):
    """Raised when input or entity validation fails."""

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class EntityNotFoundException(DomainException):
    """Raised when an entity is not found."""

    def __init__(
        self,
        entity_type: str,
        entity_id: Any,
        message: str | None = None,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        msg = message or f"{entity_type} with ID {entity_id} not found"
        super().__init__(
            msg,
            "ENTITY_NOT_FOUND",
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class InvalidOperationException(DomainException):
    """Raised when an operation is not valid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None):
        self.operation = operation
        self.current_state = current_state
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(
            msg,
            "INVALID_OPERATION",
            {"operation": operation, "current_state": current_state},
        )


class IntegrationException(DomainException):
    """Raised when an external integration fails."""

    def __init__(self, service: str, message: str, original_error: Exception | None = None):
        self.service = service
        self.original_error = original_error
        details: dict[str, Any] = {"service": service}
        if original_error:
            details["original_error"] = str(original_error)
        super().__init__(f"{service}: {message}", "INTEGRATION_ERROR", details)


class AppointmentConflictException(DomainException):
    """Raised when a requested appointment slot is already taken."""

    def __init__(self, provider_id: str, slot: str, message: str | None = None):
        self.provider_id = provider_id
        self.slot = slot
        msg = message or f"Provider {provider_id} is not available at {slot}"
        super().__init__(
            msg,
            "APPOINTMENT_CONFLICT",
            {"provider_id": provider_id, "slot": slot},
        )


class TreatmentPersistenceError(DomainException):
    """
    Raised when the treatment record itself cannot be written.

    This is the only blocking failure of the encounter workflow: nothing
    downstream of the treatment runs when it is raised.
    """

    def __init__(self, message: str, treatment_id: str | None = None, original_error: Exception | None = None):
        self.treatment_id = treatment_id
        self.original_error = original_error
        details: dict[str, Any] = {}
        if treatment_id:
            details["treatment_id"] = treatment_id
        if original_error:
            details["original_error"] = str(original_error)
        super().__init__(message, "TREATMENT_PERSISTENCE_ERROR", details)
