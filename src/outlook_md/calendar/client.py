"""Microsoft Graph calendarView client."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from outlook_md.calendar.events import normalize_events
from outlook_md.calendar.exceptions import (
    GraphAPIError,
    ParseError,
    RequestTimeoutError,
    TransportError,
)
from outlook_md.calendar.models import CalendarEvent
from outlook_md.config import GRAPH_BASE_URL

logger = logging.getLogger(__name__)

# Graph pages calendarView at 10 events by default
DEFAULT_PAGE_SIZE = 500


class GraphCalendarClient:
    """Reads the signed-in user's calendar from Microsoft Graph.

    Issues exactly one request per call and never retries.

    Example:
        >>> with GraphCalendarClient(access_token) as client:
        ...     events = client.get_calendar_view(start, end, "Europe/London")
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = GRAPH_BASE_URL,
        timeout: float = 30.0,
        page_size: int = DEFAULT_PAGE_SIZE,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            access_token: Bearer token with Calendars.Read.
            base_url: Graph API root (override for mock servers).
            timeout: Request timeout in seconds.
            page_size: Value sent as $top.
            transport: Custom httpx transport (mainly for tests).
        """
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def _get_headers(self, timezone: str) -> dict[str, str]:
        """Get headers for API requests."""
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Prefer": f'outlook.timezone="{timezone}"',
            "Accept": "application/json",
        }

    def get_calendar_view(
        self, start: datetime, end: datetime, timezone: str
    ) -> list[CalendarEvent]:
        """Fetch events intersecting [start, end).

        Args:
            start: Window start (timezone-aware).
            end: Window end (timezone-aware).
            timezone: IANA zone Graph should render wall-clock times in.

        Returns:
            Normalized events sorted by start.

        Raises:
            ValueError: If start or end is naive.
            RequestTimeoutError: If the request times out.
            TransportError: On other network failures.
            GraphAPIError: If Graph returns a non-2xx status.
            ParseError: If the body or an event cannot be parsed.
        """
        if start.tzinfo is None or end.tzinfo is None:
            raise ValueError("start and end must be timezone-aware")

        params = {
            "startDateTime": start.isoformat(),
            "endDateTime": end.isoformat(),
            "$top": self.page_size,
        }

        try:
            response = self._client.get(
                f"{self.base_url}/me/calendarView",
                params=params,
                headers=self._get_headers(timezone),
            )
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(f"Graph request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP request failed: {e}") from e

        if not response.is_success:
            raise GraphAPIError(response.status_code, response.text)

        data = self._decode(response)
        if data.get("@odata.nextLink"):
            logger.warning(
                f"Calendar view truncated at {len(data['value'])} events; "
                "narrow the window to see the rest"
            )

        return normalize_events(data["value"], timezone)

    def _decode(self, response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise ParseError(f"failed to decode response: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("value"), list):
            raise ParseError("failed to decode response: missing 'value' list")
        return data

    def close(self):
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
