"""Server-Sent Events client with custom methods, headers and request bodies."""

from .client import (
    ConnectionState,
    DataEvent,
    EmptyEvent,
    ErrorEvent,
    InvalidTransition,
    SSEClient,
    SSEOptions,
    SSEvent,
)
from .config import ClientConfig
from .errors import (
    ContentTypeError,
    ReadFailure,
    RequestFailure,
    SSEClientError,
    StatusError,
)
from .stream import LineSplitter, RecordAssembler, SSERecord

__all__ = [
    "ClientConfig",
    "ConnectionState",
    "ContentTypeError",
    "DataEvent",
    "EmptyEvent",
    "ErrorEvent",
    "InvalidTransition",
    "LineSplitter",
    "ReadFailure",
    "RecordAssembler",
    "RequestFailure",
    "SSEClient",
    "SSEClientError",
    "SSEOptions",
    "SSERecord",
    "SSEvent",
    "StatusError",
]
