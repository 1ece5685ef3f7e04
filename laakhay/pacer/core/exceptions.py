"""Custom exception hierarchy."""

from __future__ import annotations

from typing import Any


class PacerError(Exception):
    """Base exception for all library errors."""

    pass


class TransportError(PacerError):
    """The HTTP call could not be completed (connection, DNS, timeout)."""

    pass


class DecodeError(PacerError):
    """Response body could not be parsed into the expected payload shape."""

    def __init__(self, message: str, body: Any = None) -> None:
        super().__init__(message)
        self.body = body


class ProviderError(PacerError):
    """Error returned by the remote API.

    Carries the HTTP status and, when the API sent one, the decoded error body.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class RateLimitError(ProviderError):
    """Provider rate limit exceeded."""

    def __init__(self, message: str, retry_after: int = 60, payload: Any = None) -> None:
        super().__init__(message, status_code=429, payload=payload)
        self.retry_after = retry_after


class APIError(ProviderError):
    """Well-formed error payload delivered alongside (possibly partial) data.

    The decoded page is kept in ``payload`` so callers still receive the data
    that came back with the error.
    """

    pass


class ChannelClosedError(PacerError):
    """Send on, receive from, or close of an already closed channel."""

    pass


class OperationCancelledError(PacerError):
    """Work aborted because its cancel token fired."""

    pass
