"""Errors surfaced to listeners through ``ErrorEvent``.

Each wraps the underlying httpx exception (when there is one) as ``__cause__``.
"""

from __future__ import annotations


class SSEClientError(Exception):
    """Base class for every connection failure reported by the client."""


class RequestFailure(SSEClientError):
    """The request could not be sent or the connection not established."""


class StatusError(SSEClientError):
    """The server answered with a status outside the 2xx range."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"Response status {status_code} was not in 200 range")


class ContentTypeError(SSEClientError):
    """The response content-type was missing or not ``text/event-stream``."""

    def __init__(self, content_type: str | None) -> None:
        self.content_type = content_type
        super().__init__(
            f'content-type in response was {content_type!r}, not "text/event-stream"'
        )


class ReadFailure(SSEClientError):
    """Reading the response body failed after the stream was open."""
