"""Custom exception hierarchy for hubstate."""

from __future__ import annotations


class HubError(Exception):
    """Base exception for all hubstate errors."""


class HubConfigError(HubError):
    """Invalid or missing configuration."""


class HubValidationError(HubError):
    """Caller supplied a request the engine cannot accept.

    Raised for missing identifiers/names, malformed request bodies and
    partial documents whose merged result violates the hub state schema.
    Nothing is persisted when this is raised.
    """

    def __init__(self, message: str, *, field: str = "") -> None:
        self.field = field
        super().__init__(message)


class HubNotFoundError(HubError):
    """Referenced history entry or visitor data does not exist."""

    def __init__(self, message: str, *, visitor_id: str = "", entry_id: str = "") -> None:
        self.visitor_id = visitor_id
        self.entry_id = entry_id
        super().__init__(message)


class HubInternalError(HubError):
    """Unexpected failure inside the engine.

    The transport layer logs the cause and reports a generic message to the
    caller.
    """
