"""Client WebSocket connection handling for the voice relay (/ws)."""

from __future__ import annotations

import logging
import contextlib

from fastapi import WebSocket

from src.state import RuntimeDeps
from src.config.websocket import WS_CLOSE_BUSY_CODE, WS_ERROR_SERVER_AT_CAPACITY

from .errors import reject_connection
from .lifecycle import WebSocketLifecycle

logger = logging.getLogger(__name__)


async def _admit_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> bool:
    if not await runtime_deps.connections.try_admit(ws):
        logger.warning(
            "rejecting WebSocket connection: at capacity (%s)",
            runtime_deps.connections.max_connections,
        )
        await reject_connection(
            ws,
            message=WS_ERROR_SERVER_AT_CAPACITY,
            close_code=WS_CLOSE_BUSY_CODE,
        )
        return False

    try:
        await ws.accept()
    except Exception:
        with contextlib.suppress(Exception):
            await runtime_deps.connections.release(ws)
        raise
    return True


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    lifecycle: WebSocketLifecycle | None = None
    admitted = False
    session_id: str | None = None
    try:
        if not await _admit_connection(ws, runtime_deps):
            return
        admitted = True

        lifecycle = WebSocketLifecycle(ws, limits=runtime_deps.settings.websocket)
        session = runtime_deps.relay_bridge.new_session(ws, on_activity=lifecycle.touch)
        session_id = session.session_id
        lifecycle.start(session_id)
        logger.info(
            "WebSocket connection accepted session_id=%s. Active: %s",
            session_id,
            runtime_deps.connections.active_count,
        )
        await session.run()
    finally:
        if lifecycle is not None:
            with contextlib.suppress(Exception):
                await lifecycle.stop()

        if admitted:
            with contextlib.suppress(Exception):
                await runtime_deps.connections.release(ws)
            logger.info(
                "WebSocket connection closed session_id=%s. Active: %s",
                session_id,
                runtime_deps.connections.active_count,
            )


__all__ = ["handle_websocket_connection"]
