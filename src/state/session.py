"""Per-session relay state (enums and dataclasses only)."""

from __future__ import annotations

import enum
from typing import Any, Union
from dataclasses import dataclass


class SessionState(enum.Enum):
    CONNECTING = "connecting"
    READY = "ready"
    STREAMING = "streaming"
    FAILED = "failed"
    CLOSING = "closing"
    CLOSED = "closed"


# States in which audio and transcripts flow.
LIVE_STATES = frozenset({SessionState.READY, SessionState.STREAMING})
# States in which teardown has started or finished.
TERMINAL_STATES = frozenset({SessionState.CLOSING, SessionState.CLOSED})


@dataclass(frozen=True, slots=True)
class AbsentUpstream:
    pass


@dataclass(frozen=True, slots=True)
class ConnectingUpstream:
    pass


@dataclass(frozen=True, slots=True)
class OpenUpstream:
    connection: Any


@dataclass(frozen=True, slots=True)
class ClosedUpstream:
    pass


Upstream = Union[AbsentUpstream, ConnectingUpstream, OpenUpstream, ClosedUpstream]


@dataclass(slots=True)
class SessionStats:
    frames_forwarded: int = 0
    frames_dropped: int = 0
    text_frames_ignored: int = 0
    transcripts_sent: int = 0
    decode_failures: int = 0


__all__ = [
    "LIVE_STATES",
    "TERMINAL_STATES",
    "AbsentUpstream",
    "ClosedUpstream",
    "ConnectingUpstream",
    "OpenUpstream",
    "SessionState",
    "SessionStats",
    "Upstream",
]
