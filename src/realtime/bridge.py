"""Factory pairing client sockets with speech provider connections."""

from __future__ import annotations

from typing import Any
from collections.abc import Callable

from .session import RelaySession
from .connector import UpstreamConnector


class RelayBridge:
    def __init__(self, *, connector: UpstreamConnector) -> None:
        self._connector = connector

    def new_session(self, ws: Any, *, on_activity: Callable[[], None] | None = None) -> RelaySession:
        return RelaySession(ws, self._connector, on_activity=on_activity)


__all__ = ["RelayBridge"]
