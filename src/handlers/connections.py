"""Admission control for client voice connections."""

from __future__ import annotations

import asyncio
from typing import Any


class ConnectionManager:
    """Bound the number of concurrently admitted client sockets.

    Holds socket identities only; sessions own their sockets and share
    nothing through this object.
    """

    def __init__(self, *, max_connections: int) -> None:
        self.max_connections = max(1, int(max_connections))
        self._lock = asyncio.Lock()
        self._active: set[int] = set()

    async def try_admit(self, ws: Any) -> bool:
        """Reserve a slot for *ws* (before it is accepted)."""
        key = id(ws)
        async with self._lock:
            if key in self._active:
                return True
            if len(self._active) >= self.max_connections:
                return False
            self._active.add(key)
            return True

    async def release(self, ws: Any) -> None:
        async with self._lock:
            self._active.discard(id(ws))

    @property
    def active_count(self) -> int:
        return len(self._active)


__all__ = ["ConnectionManager"]
