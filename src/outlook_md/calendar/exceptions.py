"""Calendar retrieval exceptions."""

from __future__ import annotations

from outlook_md.exceptions import OutlookMDError


class CalendarError(OutlookMDError):
    """Base exception for calendar retrieval errors."""


class TransportError(CalendarError):
    """Raised when the Graph request fails at the network level."""


class RequestTimeoutError(TransportError):
    """Raised when the Graph request times out."""


class GraphAPIError(TransportError):
    """Raised when Graph answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Graph API returned status {status_code}: {body}")


class ParseError(CalendarError):
    """Raised when a response body or event field cannot be parsed."""

    def __init__(self, message: str, event_id: str | None = None):
        self.event_id = event_id
        if event_id is not None:
            message = f"event {event_id}: {message}"
        super().__init__(message)
