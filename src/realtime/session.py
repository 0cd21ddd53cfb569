"""Audio relay session: one client socket bridged to one speech provider socket.

Audio frames flow client -> provider untouched. Provider transcript events are
decoded and re-emitted to the client as ``stt_partial`` / ``stt_final``. Either
side closing tears the whole session down; nothing is retried.
"""

from __future__ import annotations

import uuid
import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable, Awaitable

from fastapi import WebSocketDisconnect

from src.errors import UpstreamSetupError, TranscriptDecodeError
from src.state.session import (
    LIVE_STATES,
    TERMINAL_STATES,
    Upstream,
    OpenUpstream,
    SessionState,
    SessionStats,
    AbsentUpstream,
    ClosedUpstream,
    ConnectingUpstream,
)
from src.state.events import (
    SessionEvent,
    UpstreamFrame,
    UpstreamClosed,
    UpstreamFailed,
    UpstreamOpened,
    DownstreamFrame,
    DownstreamClosed,
    DownstreamOpened,
)
from src.config.websocket import (
    WS_CLOSE_STT_CLOSED_CODE,
    WS_CLOSE_STT_FAILED_CODE,
    WS_ERROR_STT_INIT_FAILED,
    WS_CLOSE_STT_CLOSED_REASON,
    WS_CLOSE_STT_FAILED_REASON,
)

from .connector import UpstreamConnector
from .downstream import send_message
from .transcript import decode_transcript_event
from .messages import ErrorMessage, ReadyMessage, TranscriptMessage

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], Awaitable[None]]


class RelaySession:
    def __init__(
        self,
        ws: Any,
        connector: UpstreamConnector,
        *,
        session_id: str | None = None,
        on_activity: Callable[[], None] | None = None,
    ) -> None:
        self.session_id = session_id or str(uuid.uuid4())
        self.state = SessionState.CONNECTING
        self.stats = SessionStats()
        self._ws = ws
        self._connector = connector
        self._on_activity = on_activity
        self._upstream: Upstream = AbsentUpstream()
        self._closed = asyncio.Event()
        self._handlers: dict[type, EventHandler] = {
            DownstreamOpened: self._on_downstream_opened,
            UpstreamOpened: self._on_upstream_opened,
            UpstreamFailed: self._on_upstream_failed,
            DownstreamFrame: self._on_downstream_frame,
            UpstreamFrame: self._on_upstream_frame,
            DownstreamClosed: self._on_downstream_closed,
            UpstreamClosed: self._on_upstream_closed,
        }

    @property
    def upstream(self) -> Upstream:
        return self._upstream

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    async def run(self) -> None:
        """Drive the session until either side closes."""
        await self.dispatch(DownstreamOpened())
        tasks = [
            asyncio.create_task(self._pump_downstream(), name=f"relay-downstream-{self.session_id}"),
            asyncio.create_task(self._pump_upstream(), name=f"relay-upstream-{self.session_id}"),
        ]
        try:
            await self._closed.wait()
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            # No-op unless run() itself was cancelled before teardown.
            await self._teardown(close_code=None)

    async def dispatch(self, event: SessionEvent) -> None:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"unsupported session event: {type(event).__name__}")
        await handler(event)

    # Pumps

    async def _pump_downstream(self) -> None:
        code: int | None = None
        try:
            while True:
                message = await self._ws.receive()
                if message.get("type") == "websocket.disconnect":
                    code = message.get("code")
                    break
                data = message.get("bytes")
                if data is None:
                    data = message.get("text") or ""
                await self.dispatch(DownstreamFrame(data))
        except WebSocketDisconnect as exc:
            code = exc.code
        except Exception:
            logger.debug("downstream receive failed session_id=%s", self.session_id, exc_info=True)
        await self.dispatch(DownstreamClosed(code=code))

    async def _pump_upstream(self) -> None:
        connect_task = asyncio.ensure_future(self._connector.connect())
        try:
            connection = await connect_task
        except UpstreamSetupError as exc:
            await self.dispatch(UpstreamFailed(reason=str(exc)))
            return
        except asyncio.CancelledError:
            # The handshake may have finished just before cancellation landed.
            if connect_task.done() and not connect_task.cancelled() and connect_task.exception() is None:
                with contextlib.suppress(Exception):
                    await connect_task.result().close()
            raise
        except Exception as exc:
            logger.exception("unexpected upstream connect error session_id=%s", self.session_id)
            await self.dispatch(UpstreamFailed(reason=f"{type(exc).__name__}: {exc}"))
            return

        await self.dispatch(UpstreamOpened(connection))
        upstream = self._upstream
        if not isinstance(upstream, OpenUpstream) or upstream.connection is not connection:
            return

        try:
            async for raw in connection.messages():
                await self.dispatch(UpstreamFrame(raw))
        except Exception:
            logger.exception("upstream receive failed session_id=%s", self.session_id)
        await self.dispatch(UpstreamClosed())

    # Event handlers

    async def _on_downstream_opened(self, _event: DownstreamOpened) -> None:
        if self.state is not SessionState.CONNECTING or not isinstance(self._upstream, AbsentUpstream):
            return
        self._upstream = ConnectingUpstream()
        logger.info("client connected session_id=%s", self.session_id)

    async def _on_upstream_opened(self, event: UpstreamOpened) -> None:
        if self.state is not SessionState.CONNECTING:
            with contextlib.suppress(Exception):
                await event.connection.close()
            return
        self._upstream = OpenUpstream(event.connection)
        self.state = SessionState.READY
        logger.info("upstream connected session_id=%s", self.session_id)
        await send_message(self._ws, ReadyMessage(session_id=self.session_id))

    async def _on_upstream_failed(self, event: UpstreamFailed) -> None:
        if self.state is not SessionState.CONNECTING:
            return
        self.state = SessionState.FAILED
        logger.warning("upstream setup failed session_id=%s reason=%s", self.session_id, event.reason)
        await send_message(self._ws, ErrorMessage(message=WS_ERROR_STT_INIT_FAILED))
        await self._teardown(close_code=WS_CLOSE_STT_FAILED_CODE, reason=WS_CLOSE_STT_FAILED_REASON)

    async def _on_downstream_frame(self, event: DownstreamFrame) -> None:
        if self._on_activity is not None:
            self._on_activity()

        data = event.data
        if not isinstance(data, (bytes, bytearray)):
            self.stats.text_frames_ignored += 1
            return

        upstream = self._upstream
        if self.state not in LIVE_STATES or not isinstance(upstream, OpenUpstream) or not upstream.connection.is_open:
            self.stats.frames_dropped += 1
            return

        self.state = SessionState.STREAMING
        if await upstream.connection.send(bytes(data)):
            self.stats.frames_forwarded += 1
        else:
            self.stats.frames_dropped += 1

    async def _on_upstream_frame(self, event: UpstreamFrame) -> None:
        if self.state not in LIVE_STATES:
            return
        try:
            transcript = decode_transcript_event(event.raw)
        except TranscriptDecodeError as exc:
            self.stats.decode_failures += 1
            logger.warning("dropping upstream message session_id=%s: %s", self.session_id, exc)
            return

        if not transcript.text:
            return

        self.state = SessionState.STREAMING
        logger.debug(
            "transcript session_id=%s final=%s: %s",
            self.session_id,
            transcript.is_final,
            transcript.text,
        )
        message = TranscriptMessage(text=transcript.text, is_final=transcript.is_final)
        if await send_message(self._ws, message):
            self.stats.transcripts_sent += 1

    async def _on_downstream_closed(self, event: DownstreamClosed) -> None:
        if self.state in TERMINAL_STATES:
            return
        logger.info("client disconnected session_id=%s code=%s", self.session_id, event.code)
        await self._teardown(close_code=None)

    async def _on_upstream_closed(self, _event: UpstreamClosed) -> None:
        if self.state in TERMINAL_STATES:
            return
        logger.info("upstream closed session_id=%s", self.session_id)
        await self._teardown(close_code=WS_CLOSE_STT_CLOSED_CODE, reason=WS_CLOSE_STT_CLOSED_REASON)

    async def _teardown(self, *, close_code: int | None, reason: str = "") -> None:
        if self.state in TERMINAL_STATES:
            return
        self.state = SessionState.CLOSING

        upstream, self._upstream = self._upstream, ClosedUpstream()
        if isinstance(upstream, OpenUpstream):
            with contextlib.suppress(Exception):
                await upstream.connection.close()

        if close_code is not None:
            with contextlib.suppress(Exception):
                await self._ws.close(code=close_code, reason=reason)

        self.state = SessionState.CLOSED
        self._closed.set()
        logger.info(
            "relay session closed session_id=%s forwarded=%d dropped=%d ignored=%d transcripts=%d decode_failures=%d",
            self.session_id,
            self.stats.frames_forwarded,
            self.stats.frames_dropped,
            self.stats.text_frames_ignored,
            self.stats.transcripts_sent,
            self.stats.decode_failures,
        )


__all__ = ["RelaySession"]
