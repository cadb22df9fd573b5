"""Incremental SSE decoding: bytes to lines, lines to records."""

from .line_splitter import LineSplitter
from .record_assembler import RecordAssembler, SSERecord

__all__ = ["LineSplitter", "RecordAssembler", "SSERecord"]
