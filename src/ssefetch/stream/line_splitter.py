"""Byte-level line splitting for SSE streams.

Accepts arbitrary-sized chunks and emits complete lines without their
terminator. LF, CR and CRLF each end exactly one line, including a CRLF pair
that arrives split across two chunks.
"""

from __future__ import annotations

import re
from collections.abc import Callable

_TERMINATOR = re.compile(rb"[\r\n]")
_CR = 0x0D
_LF = 0x0A


class LineSplitter:
    """Incremental splitter that turns byte chunks into lines."""

    def __init__(self, on_line: Callable[[bytes], None]) -> None:
        self._on_line = on_line
        self._buffer = bytearray()
        # Offset where the unscanned tail of the buffer begins.
        self._scan_from = 0
        # Set after a line ended on CR; a leading LF in the next chunk belongs to it.
        self._after_cr = False

    @property
    def pending(self) -> bytes:
        """Bytes received after the last terminator, not yet emitted."""
        return bytes(self._buffer)

    def append(self, chunk: bytes) -> None:
        """Add a chunk and emit every line it completes."""
        if not chunk:
            return
        buf = self._buffer
        buf += chunk

        start = 0
        if self._after_cr:
            self._after_cr = False
            if buf[0] == _LF:
                start = 1

        pos = max(self._scan_from, start)
        while True:
            match = _TERMINATOR.search(buf, pos)
            if match is None:
                break
            end = match.start()
            self._on_line(bytes(buf[start:end]))
            if buf[end] == _CR:
                if end + 1 < len(buf):
                    next_start = end + 2 if buf[end + 1] == _LF else end + 1
                else:
                    next_start = end + 1
                    self._after_cr = True
            else:
                next_start = end + 1
            start = pos = next_start

        # Compact once per append rather than once per line.
        if start:
            del buf[:start]
        self._scan_from = len(buf)
