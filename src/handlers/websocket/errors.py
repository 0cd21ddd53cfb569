"""Error helpers for the client-facing WebSocket."""

from __future__ import annotations

import logging

from fastapi import WebSocket

from src.realtime.messages import ErrorMessage
from src.realtime.downstream import send_message

logger = logging.getLogger(__name__)


async def send_error(ws: WebSocket, message: str) -> bool:
    return await send_message(ws, ErrorMessage(message=message))


async def reject_connection(
    ws: WebSocket,
    *,
    message: str,
    close_code: int,
) -> None:
    # Accept so we can send a structured error, then close.
    try:
        await ws.accept()
    except Exception:
        logger.debug("accept failed while rejecting connection", exc_info=True)
        return
    await send_error(ws, message)
    try:
        await ws.close(code=close_code, reason=message)
    except Exception:
        return


__all__ = ["send_error", "reject_connection"]
