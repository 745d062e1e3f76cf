# ============================================================================
# SCOPE: INFRASTRUCTURE LAYER (Clinic)
# Description: HTTP clients for the calendar sync and appointment email functions.
# ============================================================================
"""Edge function clients.

Calendar sync and appointment notifications are served by HTTP functions
that take a JSON body with an ``action``. Transport and HTTP errors are
raised as IntegrationException; the encounter workflow turns them into
warnings.
"""

import logging
from datetime import date, datetime
from typing import Any

import httpx

from app.core.domain import IntegrationException
from app.domains.clinic.application.ports.integrations import (
    CalendarEventDetails,
    ICalendarSync,
    INotificationDispatcher,
)
from app.domains.clinic.domain.value_objects.schedule import CalendarEvent, format_slot
from app.domains.clinic.domain.value_objects.statuses import NotificationTrigger

logger = logging.getLogger(__name__)

NOT_CONNECTED_CODES = {"NOT_CONNECTED", "CLINIC_NOT_CONNECTED"}


class EdgeFunctionClient:
    """Base async client for JSON edge functions."""

    service_name = "edge-function"

    def __init__(
        self,
        base_url: str,
        function_name: str,
        api_key: str | None = None,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize client.

        Args:
            base_url: Base URL of the functions gateway
            function_name: Function to invoke
            api_key: Bearer key sent with every call
            timeout: Request timeout in seconds
            transport: Optional transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self.function_name = function_name
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.function_name}"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Content-Type": "application/json"}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _invoke(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        POST ``payload`` to the function.

        Returns:
            Decoded JSON body

        Raises:
            IntegrationException: Transport error or non-2xx response
        """
        client = await self._get_client()
        try:
            response = await client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            raise IntegrationException(self.service_name, f"request to {self.function_name} failed", e) from e

        body = self._decode(response)
        if response.is_error:
            code = body.get("code")
            message = body.get("error") or response.reason_phrase
            raise IntegrationException(
                self.service_name,
                f"{self.function_name} returned {response.status_code}: {message}"
                + (f" ({code})" if code else ""),
            )
        return body

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}


class FunctionsCalendarSyncClient(EdgeFunctionClient, ICalendarSync):
    """
    Provider calendar integration through the calendar sync function.

    A provider without a connected calendar is not an error: sync and
    meeting creation return None.
    """

    service_name = "calendar-sync"

    async def sync_event(
        self,
        appointment_id: str,
        details: CalendarEventDetails,
        provider_id: str,
        existing_event_id: str | None = None,
    ) -> str | None:
        payload = {
            "action": "update" if existing_event_id else "create",
            "appointment_id": appointment_id,
            "appointment": self._appointment_payload(details),
            "provider_id": provider_id,
        }
        data = await self._invoke_unless_disconnected(payload)
        return data.get("event_id") if data else None

    async def create_meeting_link(
        self,
        appointment_id: str,
        details: CalendarEventDetails,
        provider_id: str,
    ) -> str | None:
        payload = {
            "action": "create_meet",
            "appointment_id": appointment_id,
            "appointment": self._appointment_payload(details),
            "provider_id": provider_id,
        }
        data = await self._invoke_unless_disconnected(payload)
        return data.get("meet_link") if data else None

    async def fetch_events(self, provider_id: str, day: date) -> list[CalendarEvent]:
        data = await self._invoke(
            {"action": "fetch_all_events", "start_date": day.isoformat(), "end_date": day.isoformat()}
        )
        provider_data = (data.get("events_by_provider") or {}).get(provider_id) or {}
        events = []
        for raw in provider_data.get("events") or []:
            event = self._parse_event(raw, provider_id)
            if event is not None:
                events.append(event)
        return events

    async def _invoke_unless_disconnected(self, payload: dict[str, Any]) -> dict[str, Any] | None:
        try:
            return await self._invoke(payload)
        except IntegrationException as e:
            if any(code in e.message for code in NOT_CONNECTED_CODES):
                logger.info(f"Calendar not connected for provider {payload.get('provider_id')}, skipping")
                return None
            raise

    @staticmethod
    def _appointment_payload(details: CalendarEventDetails) -> dict[str, Any]:
        return {
            "appointment_date": details.appointment_date.isoformat(),
            "start_time": format_slot(details.start_time),
            "end_time": format_slot(details.end_time) if details.end_time else None,
            "appointment_type": details.appointment_type,
            "chief_complaint": details.chief_complaint,
            "notes": details.notes,
            "patient_name": details.patient_name,
            "service_names": details.service_names,
        }

    @staticmethod
    def _parse_event(raw: dict[str, Any], provider_id: str) -> CalendarEvent | None:
        """Timed events carry ISO datetimes, all-day events bare dates."""
        start = raw.get("start")
        if not start or not raw.get("id"):
            return None
        end = raw.get("end")
        all_day = len(start) <= 10
        try:
            start_dt = datetime.fromisoformat(start).replace(tzinfo=None)
            end_dt = datetime.fromisoformat(end).replace(tzinfo=None) if end and not all_day else None
        except ValueError:
            logger.warning(f"Skipping calendar event {raw.get('id')} with unparseable times")
            return None
        return CalendarEvent(
            id=raw["id"],
            start=start_dt,
            end=end_dt,
            summary=raw.get("summary"),
            status=raw.get("status"),
            provider_id=provider_id,
            all_day=all_day,
        )


class FunctionsNotificationClient(EdgeFunctionClient, INotificationDispatcher):
    """Sends appointment emails through the email function."""

    service_name = "appointment-email"

    async def notify(self, appointment_id: str, trigger: NotificationTrigger) -> None:
        await self._invoke({"appointment_id": appointment_id, "trigger": trigger.value})
        logger.info(f"Appointment email '{trigger.value}' dispatched for {appointment_id}")
