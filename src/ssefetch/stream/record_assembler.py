"""SSE field parsing: assemble decoded lines into records.

Field values are taken verbatim after the first colon, and consecutive
``data`` lines are concatenated without a separator.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class SSERecord:
    """A single completed Server-Sent Events message."""

    id: str = ""
    event: str = ""
    data: str = ""
    retry: int | None = None

    @property
    def is_empty(self) -> bool:
        """True when every field still holds its default (heartbeat/comment-only)."""
        return not self.id and not self.event and not self.data and self.retry is None


def _parse_retry(value: str) -> int | None:
    """Return the reconnection delay if ``value`` is made only of ASCII digits."""
    if value and value.isascii() and value.isdigit():
        return int(value)
    return None


class RecordAssembler:
    """Accumulates field lines until a blank line completes the record."""

    def __init__(self, on_record: Callable[[SSERecord], None]) -> None:
        self._on_record = on_record
        self._reset()

    def _reset(self) -> None:
        self._id = ""
        self._event = ""
        self._data: list[str] = []
        self._retry: int | None = None

    def snapshot(self) -> SSERecord:
        """Freeze the in-progress fields into an immutable record."""
        return SSERecord(
            id=self._id,
            event=self._event,
            data="".join(self._data),
            retry=self._retry,
        )

    def handle_line(self, line: str) -> None:
        if not line:
            record = self.snapshot()
            self._reset()
            self._on_record(record)
            return

        if line.startswith(":"):
            return

        name, _, value = line.partition(":")

        if name == "event":
            self._event = value
        elif name == "id":
            self._id = value
        elif name == "retry":
            retry = _parse_retry(value)
            if retry is not None:
                self._retry = retry
        elif name == "data":
            self._data.append(value)
