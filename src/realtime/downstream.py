"""Send helpers for the client-facing socket."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocketDisconnect

from .messages import DownstreamMessage, encode_message

logger = logging.getLogger(__name__)


async def safe_send_text(ws: Any, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def send_message(ws: Any, message: DownstreamMessage) -> bool:
    return await safe_send_text(ws, encode_message(message))


__all__ = ["safe_send_text", "send_message"]
