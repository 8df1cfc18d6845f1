"""
Analytics Errors

Exception types raised by the analytics core. Each carries the HTTP status
the routes layer answers with.
"""

from typing import List, Optional


class AnalyticsError(Exception):
    """Base class for all analytics failures."""

    status_code = 500
    default_message = "Analytics request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message}


class SessionNotFound(AnalyticsError):
    """A page-view or action referenced an unknown session id."""

    status_code = 404
    default_message = "Session not found"

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(self.default_message)


class StorageUnavailable(AnalyticsError):
    """The session store could not be read or written."""

    status_code = 500
    default_message = "Analytics storage unavailable"


class ValidationError(AnalyticsError):
    """Malformed input, rejected before it reaches storage."""

    status_code = 400
    default_message = "Invalid analytics payload"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or [self.message]

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["errors"] = self.errors
        return data
