"""Error hierarchy for the outcome feed.

Every failure aborts the run. Nothing here is retried; the CLI is the only
place that catches these and turns them into an exit status.
"""

from typing import Optional


class OutcomeFeedError(Exception):
    """Base class for all outcome feed failures."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(OutcomeFeedError):
    """Invalid configuration or CLI input. Raised before any network activity."""


class TransportError(OutcomeFeedError):
    """HTTP request failed (network, timeout or non-2xx status)."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 details: Optional[dict] = None):
        super_details = details or {}
        if status_code is not None:
            super_details["status_code"] = status_code
        super().__init__(message, super_details)
        self.status_code = status_code


class DecodeError(OutcomeFeedError):
    """Response body is not JSON or does not have the expected quote shape."""


class FormatError(OutcomeFeedError):
    """Timestamp cannot be rendered in the canonical id pattern."""


class QueueError(OutcomeFeedError):
    """Queue connection or append failure."""
