"""Idle and max-duration limits for client voice sockets."""

from __future__ import annotations

import time
import asyncio
import logging
import contextlib
from typing import Any

from src.state.settings import WebSocketSettings
from src.config.websocket import (
    WS_CLOSE_IDLE_CODE,
    WS_CLOSE_IDLE_REASON,
    WS_CLOSE_MAX_DURATION_CODE,
    WS_CLOSE_MAX_DURATION_REASON,
)

logger = logging.getLogger(__name__)


class WebSocketLifecycle:
    """Close a client socket that stops sending audio or outlives its maximum duration.

    A limit of 0 disables it. The close reaches the relay session as a client
    disconnect, and the session then releases its provider connection.
    """

    def __init__(self, websocket: Any, *, limits: WebSocketSettings) -> None:
        self._ws = websocket
        self._limits = limits
        self._opened_at = time.monotonic()
        self._last_frame_at = self._opened_at
        self._task: asyncio.Task | None = None

    @property
    def enabled(self) -> bool:
        return self._limits.idle_timeout_s > 0 or self._limits.max_connection_duration_s > 0

    def touch(self) -> None:
        """Record a client frame."""
        self._last_frame_at = time.monotonic()

    def expired(self, now: float | None = None) -> tuple[int, str] | None:
        """Close code and reason for the first limit exceeded at *now*, if any."""
        now = time.monotonic() if now is None else now
        max_duration = self._limits.max_connection_duration_s
        if max_duration > 0 and now - self._opened_at >= max_duration:
            return WS_CLOSE_MAX_DURATION_CODE, WS_CLOSE_MAX_DURATION_REASON
        idle_timeout = self._limits.idle_timeout_s
        if idle_timeout > 0 and now - self._last_frame_at >= idle_timeout:
            return WS_CLOSE_IDLE_CODE, WS_CLOSE_IDLE_REASON
        return None

    def start(self, session_id: str) -> asyncio.Task | None:
        if not self.enabled:
            return None
        if self._task is None:
            self._task = asyncio.create_task(self._watch(session_id), name=f"relay-lifecycle-{session_id}")
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _watch(self, session_id: str) -> None:
        while True:
            await asyncio.sleep(self._limits.watchdog_tick_s)
            now = time.monotonic()
            verdict = self.expired(now)
            if verdict is None:
                continue
            code, reason = verdict
            logger.info(
                "closing client session_id=%s code=%s reason=%s age_s=%.1f idle_s=%.1f",
                session_id,
                code,
                reason,
                now - self._opened_at,
                now - self._last_frame_at,
            )
            with contextlib.suppress(Exception):
                await self._ws.close(code=code, reason=reason)
            return


__all__ = ["WebSocketLifecycle"]
