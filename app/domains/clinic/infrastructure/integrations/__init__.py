"""
Clinic external integrations (HTTP).
"""

from app.domains.clinic.infrastructure.integrations.edge_functions import (
    EdgeFunctionClient,
    FunctionsCalendarSyncClient,
    FunctionsNotificationClient,
)
from app.domains.clinic.infrastructure.integrations.file_storage import StorageFileClient

__all__ = [
    "EdgeFunctionClient",
    "FunctionsCalendarSyncClient",
    "FunctionsNotificationClient",
    "StorageFileClient",
]
