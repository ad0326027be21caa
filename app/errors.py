"""
Error types raised by the workflow cache and upstream client.

Every error carries an HTTP status, a short message and optional details,
so the HTTP layer can render it without knowing where it came from.
"""
from typing import Optional


class WorkflowAPIError(Exception):
    """Base error with status/message/details."""

    def __init__(self, status: int, message: str, details: Optional[str] = None):
        self.status = status
        self.message = message
        self.details = details
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, message={self.message!r})"


class ConfigurationError(WorkflowAPIError):
    """A required setting (e.g. the API key) is missing."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(500, message, details)


class InputError(WorkflowAPIError):
    """Caller supplied an invalid argument; never reaches upstream."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(400, message, details)


class UpstreamError(WorkflowAPIError):
    """Upstream responded with a non-2xx status, or could not be reached."""
    pass
