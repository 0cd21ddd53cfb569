"""Speech provider socket wrapper used by relay sessions."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import AsyncIterator

from websockets.protocol import State
from websockets.exceptions import ConnectionClosed

logger = logging.getLogger(__name__)


class UpstreamConnection:
    """Thin view over a websockets client connection.

    Sends never raise on a closed socket and message iteration ends cleanly
    whether the provider closed normally or not.
    """

    def __init__(self, ws: Any) -> None:
        self._ws = ws

    @property
    def is_open(self) -> bool:
        return self._ws.state is State.OPEN

    async def send(self, frame: bytes) -> bool:
        try:
            await self._ws.send(frame)
        except ConnectionClosed:
            return False
        return True

    async def messages(self) -> AsyncIterator[bytes | str]:
        try:
            async for message in self._ws:
                yield message
        except ConnectionClosed as exc:
            logger.debug("upstream closed with error: %s", exc)

    async def close(self) -> None:
        await self._ws.close()


__all__ = ["UpstreamConnection"]
