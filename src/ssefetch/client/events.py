"""Typed events published by the SSE client.

The variants form a closed set; listeners can match on the class to handle
each one exhaustively.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

import httpx

from ssefetch.errors import SSEClientError
from ssefetch.stream.record_assembler import SSERecord

MESSAGE = "message"
ERROR = "error"
EMPTY = "empty"


@dataclass(frozen=True)
class DataEvent:
    """A record that carried at least one field."""

    type: str
    record: SSERecord


@dataclass(frozen=True)
class ErrorEvent:
    """The connection failed; the client is closed right after this event."""

    error: SSEClientError
    response: httpx.Response | None = None
    type: Literal["error"] = field(default=ERROR, init=False)


@dataclass(frozen=True)
class EmptyEvent:
    """A record with only default fields, e.g. a comment used as heartbeat."""

    type: Literal["empty"] = field(default=EMPTY, init=False)


SSEvent = DataEvent | ErrorEvent | EmptyEvent


def classify(record: SSERecord) -> DataEvent | EmptyEvent:
    """Turn a completed record into the event that announces it."""
    if record.is_empty:
        return EmptyEvent()
    return DataEvent(type=record.event or MESSAGE, record=record)
