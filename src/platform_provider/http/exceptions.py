"""
Internal exceptions for the HTTP layer.

These never escape ApiExecutor.request(): every one of them is classified
into an Outcome and a single diagnostic. They exist so the send path can
distinguish the failure modes it logs and counts.
"""


class PlatformRequestError(Exception):
    """Base exception for executor-internal failures."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class RequestCancelled(PlatformRequestError):
    """
    Raised when the operation context finishes while a request is pending
    or while waiting out a Retry-After delay.
    """
    pass


class BodyEncodingError(PlatformRequestError):
    """Raised when the request body cannot be serialized."""
    pass
