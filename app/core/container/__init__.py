# ============================================================================
# SCOPE: GLOBAL
# Description: Main dependency injection container (singleton).
#              Composes the domain sub-containers.
# ============================================================================
"""
Dependency Injection Container.

Wires concrete implementations to the ports the use cases depend on.
"""

from __future__ import annotations

import logging

from app.config.settings import Settings

from .base import BaseContainer
from .clinic import ClinicContainer

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency Injection Container (Facade).

    Single Responsibility: Compose and delegate to domain-specific containers.
    """

    def __init__(self, settings: Settings | None = None):
        self._base = BaseContainer(settings)
        self._clinic = ClinicContainer(self._base)
        logger.info("DependencyContainer initialized")

    @property
    def settings(self) -> Settings:
        return self._base.settings

    @property
    def base(self) -> BaseContainer:
        return self._base

    @property
    def clinic(self) -> ClinicContainer:
        return self._clinic

    # ==================== CLINIC ====================

    def create_encounter_orchestrator(self, db, actor):
        return self._clinic.create_encounter_orchestrator(db, actor)

    def create_get_bookable_slots_use_case(self, db):
        return self._clinic.create_get_bookable_slots_use_case(db)

    def create_dispense_prescription_use_case(self, db, actor):
        return self._clinic.create_dispense_prescription_use_case(db, actor)

    async def aclose(self) -> None:
        await self._base.aclose()


_container: DependencyContainer | None = None


def get_container() -> DependencyContainer:
    """Get the global container instance."""
    global _container
    if _container is None:
        _container = DependencyContainer()
    return _container


def reset_container() -> None:
    """Drop the global container (tests and shutdown)."""
    global _container
    _container = None


__all__ = [
    "DependencyContainer",
    "get_container",
    "reset_container",
    "BaseContainer",
    "ClinicContainer",
]
