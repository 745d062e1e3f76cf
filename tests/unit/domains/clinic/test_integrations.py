# ============================================================================
# Tests for Clinic HTTP Integrations
# ============================================================================
"""
Tests for the edge function and storage clients.

Verifies:
- Request payloads sent to the calendar sync and email functions
- "Not connected" calendars are skipped instead of failing
- Transport and HTTP errors surface as IntegrationException
- Calendar events are parsed into timed and all-day events
"""

import json
from datetime import date, datetime, time

import httpx
import pytest

from app.core.domain import IntegrationException
from app.domains.clinic.application.ports import CalendarEventDetails
from app.domains.clinic.domain.value_objects import NotificationTrigger
from app.domains.clinic.infrastructure.integrations import (
    FunctionsCalendarSyncClient,
    FunctionsNotificationClient,
    StorageFileClient,
)

BASE_URL = "https://functions.example.com/v1/"


class RecordingHandler:
    """MockTransport handler returning a canned response and keeping requests."""

    def __init__(self, status_code: int = 200, body: dict | None = None):
        self.status_code = status_code
        self.body = body if body is not None else {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def event_details():
    return CalendarEventDetails(
        appointment_date=date(2025, 1, 15),
        start_time=time(10, 0),
        end_time=time(10, 30),
        appointment_type="follow_up",
        patient_name="Somchai Jaidee",
        service_names=["Massage"],
    )


def calendar_client(handler) -> FunctionsCalendarSyncClient:
    return FunctionsCalendarSyncClient(
        base_url=BASE_URL,
        function_name="calendar-sync",
        api_key="secret",
        transport=httpx.MockTransport(handler),
    )


class TestCalendarSyncClient:
    """Test calendar sync payloads and responses."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sync_event_creates(self, event_details):
        """Should post a create action and return the event ID."""
        handler = RecordingHandler(body={"event_id": "gcal-9"})
        client = calendar_client(handler)

        event_id = await client.sync_event("appt-1", event_details, "dr-1")

        assert event_id == "gcal-9"
        request = handler.requests[0]
        assert str(request.url) == "https://functions.example.com/v1/calendar-sync"
        assert request.headers["Authorization"] == "Bearer secret"
        payload = handler.last_json
        assert payload["action"] == "create"
        assert payload["provider_id"] == "dr-1"
        assert payload["appointment"]["start_time"] == "10:00"
        assert payload["appointment"]["appointment_date"] == "2025-01-15"
        await client.close()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sync_event_updates_existing(self, event_details):
        """Should use the update action when an event already exists."""
        handler = RecordingHandler(body={"event_id": "gcal-1"})
        client = calendar_client(handler)

        await client.sync_event("appt-1", event_details, "dr-1", existing_event_id="gcal-1")

        assert handler.last_json["action"] == "update"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_not_connected_calendar_returns_none(self, event_details):
        """Should skip quietly when the provider has no connected calendar."""
        handler = RecordingHandler(status_code=400, body={"error": "Calendar not connected", "code": "NOT_CONNECTED"})
        client = calendar_client(handler)

        assert await client.sync_event("appt-1", event_details, "dr-1") is None
        assert await client.create_meeting_link("appt-1", event_details, "dr-1") is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_server_error_raises(self, event_details):
        """Should raise IntegrationException on other error responses."""
        handler = RecordingHandler(status_code=500, body={"error": "boom"})
        client = calendar_client(handler)

        with pytest.raises(IntegrationException) as exc_info:
            await client.sync_event("appt-1", event_details, "dr-1")

        assert exc_info.value.service == "calendar-sync"
        assert "500" in exc_info.value.message

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_transport_error_raises(self, event_details):
        """Should wrap connection errors."""

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = calendar_client(handler)

        with pytest.raises(IntegrationException) as exc_info:
            await client.create_meeting_link("appt-1", event_details, "dr-1")

        assert isinstance(exc_info.value.original_error, httpx.ConnectError)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_create_meeting_link(self, event_details):
        """Should request a meeting and return its link."""
        handler = RecordingHandler(body={"meet_link": "https://meet.example.com/xyz"})
        client = calendar_client(handler)

        link = await client.create_meeting_link("appt-1", event_details, "dr-1")

        assert link == "https://meet.example.com/xyz"
        assert handler.last_json["action"] == "create_meet"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fetch_events_parses_provider_events(self):
        """Should parse timed and all-day events and drop malformed ones."""
        handler = RecordingHandler(
            body={
                "events_by_provider": {
                    "dr-1": {
                        "events": [
                            {
                                "id": "ev-1",
                                "start": "2025-01-15T10:00:00+07:00",
                                "end": "2025-01-15T11:00:00+07:00",
                                "summary": "Meeting",
                            },
                            {"id": "ev-2", "start": "2025-01-15", "end": "2025-01-16"},
                            {"id": "ev-3"},
                            {"id": "ev-4", "start": "not-a-date"},
                        ]
                    },
                    "dr-2": {"events": [{"id": "other", "start": "2025-01-15T09:00:00"}]},
                }
            }
        )
        client = calendar_client(handler)

        events = await client.fetch_events("dr-1", date(2025, 1, 15))

        assert handler.last_json == {
            "action": "fetch_all_events",
            "start_date": "2025-01-15",
            "end_date": "2025-01-15",
        }
        assert [event.id for event in events] == ["ev-1", "ev-2"]
        assert events[0].start == datetime(2025, 1, 15, 10, 0)
        assert events[0].end == datetime(2025, 1, 15, 11, 0)
        assert events[0].all_day is False
        assert events[1].all_day is True
        assert events[1].end is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fetch_events_unknown_provider(self):
        """Should return no events for a provider absent from the response."""
        client = calendar_client(RecordingHandler(body={"events_by_provider": {}}))

        assert await client.fetch_events("dr-9", date(2025, 1, 15)) == []


class TestNotificationClient:
    """Test appointment email dispatch."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_notify_posts_trigger(self):
        """Should send the appointment ID and trigger."""
        handler = RecordingHandler(body={"success": True})
        client = FunctionsNotificationClient(
            base_url=BASE_URL,
            function_name="appointment-email",
            transport=httpx.MockTransport(handler),
        )

        await client.notify("appt-1", NotificationTrigger.CREATED)

        assert handler.last_json == {"appointment_id": "appt-1", "trigger": "created"}
        assert "Authorization" not in handler.requests[0].headers

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_notify_failure_raises(self):
        """Should raise when the email function fails."""
        client = FunctionsNotificationClient(
            base_url=BASE_URL,
            function_name="appointment-email",
            transport=httpx.MockTransport(RecordingHandler(status_code=502)),
        )

        with pytest.raises(IntegrationException):
            await client.notify("appt-1", NotificationTrigger.CREATED)


class TestStorageFileClient:
    """Test attachment uploads."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_upload_returns_public_url(self):
        """Should upload the raw bytes and return the public URL."""
        handler = RecordingHandler(body={"Key": "treatment-files/p-1/t-1/a.png"})
        client = StorageFileClient(
            base_url="https://storage.example.com/v1",
            bucket="treatment-files",
            api_key="secret",
            transport=httpx.MockTransport(handler),
        )

        url = await client.upload("p-1/t-1/a.png", b"\x89PNG", "image/png")

        assert url == "https://storage.example.com/v1/object/public/treatment-files/p-1/t-1/a.png"
        request = handler.requests[0]
        assert str(request.url) == "https://storage.example.com/v1/object/treatment-files/p-1/t-1/a.png"
        assert request.headers["Content-Type"] == "image/png"
        assert request.content == b"\x89PNG"
        await client.close()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_upload_failure_raises(self):
        """Should raise IntegrationException when storage rejects the upload."""
        client = StorageFileClient(
            base_url="https://storage.example.com/v1",
            bucket="treatment-files",
            transport=httpx.MockTransport(RecordingHandler(status_code=413)),
        )

        with pytest.raises(IntegrationException) as exc_info:
            await client.upload("p-1/t-1/big.pdf", b"x" * 10)

        assert exc_info.value.service == "file-storage"
