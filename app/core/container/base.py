# ============================================================================
# SCOPE: GLOBAL
# Description: Base container with shared singletons (settings, HTTP clients).
# ============================================================================
"""
Base Container - Shared Singletons.

Single Responsibility: Manage shared resources that outlive a request.
HTTP clients keep their connection pools across requests and are closed on
application shutdown.
"""

import logging

from app.config.settings import Settings, get_settings
from app.domains.clinic.infrastructure.integrations import (
    FunctionsCalendarSyncClient,
    FunctionsNotificationClient,
    StorageFileClient,
)

logger = logging.getLogger(__name__)


class BaseContainer:
    """
    Base container for shared singletons.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize base container.

        Args:
            settings: Optional settings (defaults to environment settings)
        """
        self.settings = settings or get_settings()

        self._calendar_sync: FunctionsCalendarSyncClient | None = None
        self._notifier: FunctionsNotificationClient | None = None
        self._file_storage: StorageFileClient | None = None

        logger.info("BaseContainer initialized")

    def get_calendar_sync(self) -> FunctionsCalendarSyncClient:
        """Calendar sync client (singleton)."""
        if self._calendar_sync is None:
            self._calendar_sync = FunctionsCalendarSyncClient(
                base_url=self.settings.FUNCTIONS_BASE_URL,
                function_name=self.settings.CALENDAR_SYNC_FUNCTION,
                api_key=self.settings.FUNCTIONS_API_KEY,
                timeout=self.settings.INTEGRATION_TIMEOUT,
            )
        return self._calendar_sync

    def get_notifier(self) -> FunctionsNotificationClient:
        """Appointment email client (singleton)."""
        if self._notifier is None:
            self._notifier = FunctionsNotificationClient(
                base_url=self.settings.FUNCTIONS_BASE_URL,
                function_name=self.settings.NOTIFICATION_FUNCTION,
                api_key=self.settings.FUNCTIONS_API_KEY,
                timeout=self.settings.INTEGRATION_TIMEOUT,
            )
        return self._notifier

    def get_file_storage(self) -> StorageFileClient:
        """Attachment storage client (singleton)."""
        if self._file_storage is None:
            self._file_storage = StorageFileClient(
                base_url=self.settings.STORAGE_BASE_URL,
                bucket=self.settings.STORAGE_BUCKET,
                api_key=self.settings.STORAGE_API_KEY,
                timeout=self.settings.INTEGRATION_TIMEOUT,
            )
        return self._file_storage

    async def aclose(self) -> None:
        """Close every HTTP client that was created."""
        for client in (self._calendar_sync, self._notifier, self._file_storage):
            if client is not None:
                await client.close()
        logger.info("BaseContainer HTTP clients closed")
