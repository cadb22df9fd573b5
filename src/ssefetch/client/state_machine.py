"""Connection state machine.

CONNECTING ──[response validated]──→ OPEN ──[close / error / end of stream]──→ CLOSED
     │                                                                          ^
     └──────────────────[request failed / rejected / close]────────────────────┘

CLOSED is terminal: a client never reopens.
"""

from __future__ import annotations

import enum

import structlog

log = structlog.get_logger()


# IntEnum: the numeric values mirror EventSource.readyState (0, 1, 2) and
# the states compare in lifecycle order.
class ConnectionState(enum.IntEnum):
    CONNECTING = 0
    OPEN = 1
    CLOSED = 2


VALID_TRANSITIONS: set[tuple[ConnectionState, ConnectionState]] = {
    (ConnectionState.CONNECTING, ConnectionState.OPEN),
    (ConnectionState.CONNECTING, ConnectionState.CLOSED),
    (ConnectionState.OPEN, ConnectionState.CLOSED),
}


class InvalidTransition(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_state: ConnectionState, to_state: ConnectionState) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Invalid transition: {from_state.name} → {to_state.name}")


def validate_transition(from_state: ConnectionState, to_state: ConnectionState) -> None:
    """Validate a state transition, raising InvalidTransition if not allowed."""
    if (from_state, to_state) not in VALID_TRANSITIONS:
        raise InvalidTransition(from_state, to_state)


def transition(
    current: ConnectionState,
    target: ConnectionState,
    url: str,
    trigger: str = "",
) -> ConnectionState:
    """Execute a validated state transition, logging the change."""
    validate_transition(current, target)
    log.info(
        "state_transition",
        url=url,
        from_state=current.name,
        to_state=target.name,
        trigger=trigger,
    )
    return target
