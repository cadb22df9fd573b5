"""SSE connection lifecycle and event publishing."""

from .dispatcher import EventDispatcher
from .events import DataEvent, EmptyEvent, ErrorEvent, SSEvent, classify
from .sse_client import SSEClient, SSEOptions
from .state_machine import ConnectionState, InvalidTransition

__all__ = [
    "ConnectionState",
    "DataEvent",
    "EmptyEvent",
    "ErrorEvent",
    "EventDispatcher",
    "InvalidTransition",
    "SSEClient",
    "SSEOptions",
    "SSEvent",
    "classify",
]
