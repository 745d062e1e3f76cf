"""
Domain Layer - shared building blocks

Base entities, value objects and the exception hierarchy used by every
domain package under app/domains.
"""

from app.core.domain.entities import AggregateRoot, Entity, generate_uuid_str
from app.core.domain.exceptions import (
    AppointmentConflictException,
    DomainException,
    EntityNotFoundException,
    IntegrationException,
    InvalidOperationException,
    TreatmentPersistenceError,
    ValidationException,
)
from app.core.domain.value_objects import StatusEnum, ValueObject

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    "generate_uuid_str",
    # Value Objects
    "ValueObject",
    "StatusEnum",
    # Exceptions
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "InvalidOperationException",
    "IntegrationException",
    "AppointmentConflictException",
    "TreatmentPersistenceError",
]
