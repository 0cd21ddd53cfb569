from __future__ import annotations

import asyncio

import pytest

from src.realtime.session import RelaySession
from src.state.settings import UpstreamSettings
from src.errors import UpstreamConnectError
from src.realtime.connector import UpstreamConnector
from src.state.session import SessionState, OpenUpstream, ClosedUpstream
from src.state.events import UpstreamOpened, DownstreamClosed, DownstreamOpened
from src.config.websocket import WS_CLOSE_STT_CLOSED_CODE, WS_CLOSE_STT_FAILED_CODE
from tests.fakes import (
    FakeConnector,
    FakeClientSocket,
    FakeUpstreamConnection,
    wait_until,
    transcript_json,
)


async def _start(ws: FakeClientSocket, connector) -> tuple[RelaySession, asyncio.Task]:
    session = RelaySession(ws, connector)
    task = asyncio.create_task(session.run())
    return session, task


async def _start_ready(ws: FakeClientSocket, connector: FakeConnector) -> tuple[RelaySession, asyncio.Task]:
    session, task = await _start(ws, connector)
    await wait_until(lambda: len(ws.sent) >= 1)
    return session, task


@pytest.mark.asyncio
async def test_ready_event_carries_session_id() -> None:
    ws = FakeClientSocket()
    connector = FakeConnector()
    session, task = await _start_ready(ws, connector)

    assert ws.sent == [{"type": "ready", "sessionId": session.session_id}]
    assert session.state is SessionState.READY
    assert isinstance(session.upstream, OpenUpstream)

    ws.disconnect()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_session_ids_are_unique() -> None:
    connector = FakeConnector()
    ids = {RelaySession(FakeClientSocket(), connector).session_id for _ in range(50)}
    assert len(ids) == 50


@pytest.mark.asyncio
async def test_frames_before_upstream_ready_are_dropped_not_queued() -> None:
    ws = FakeClientSocket()
    gate = asyncio.Event()
    connector = FakeConnector(gate=gate)
    session, task = await _start(ws, connector)

    for i in range(10):
        ws.push_bytes(bytes([i]) * 320)
    await wait_until(lambda: session.stats.frames_dropped == 10)
    assert ws.sent == []

    gate.set()
    await wait_until(lambda: len(ws.sent) == 1)
    upstream = connector.connections[0]
    assert upstream.sent == []

    ws.push_bytes(b"\x01\x02\x03\x04")
    await wait_until(lambda: session.stats.frames_forwarded == 1)
    assert upstream.sent == [b"\x01\x02\x03\x04"]
    assert session.stats.frames_dropped == 10
    assert session.state is SessionState.STREAMING

    ws.disconnect()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_frames_are_forwarded_verbatim_in_order() -> None:
    ws = FakeClientSocket()
    connector = FakeConnector()
    session, task = await _start_ready(ws, connector)

    frames = [bytes([n]) * (n + 1) for n in range(20)]
    for frame in frames:
        ws.push_bytes(frame)
    await wait_until(lambda: session.stats.frames_forwarded == len(frames))

    assert connector.connections[0].sent == frames

    ws.disconnect()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_text_frames_from_client_are_ignored() -> None:
    ws = FakeClientSocket()
    connector = FakeConnector()
    session, task = await _start_ready(ws, connector)

    ws.push_text('{"type": "stop"}')
    ws.push_bytes(b"pcm")
    await wait_until(lambda: session.stats.frames_forwarded == 1)

    assert session.stats.text_frames_ignored == 1
    assert connector.connections[0].sent == [b"pcm"]
    assert not session.closed

    ws.disconnect()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_partial_then_final_transcripts() -> None:
    ws = FakeClientSocket()
    connector = FakeConnector()
    _session, task = await _start_ready(ws, connector)
    upstream = connector.connections[0]

    upstream.push(transcript_json("hola", is_final=False))
    await wait_until(lambda: len(ws.sent) == 2)
    assert ws.sent[1] == {"type": "stt_partial", "text": "hola"}

    upstream.push(transcript_json("hola", is_final=True))
    await wait_until(lambda: len(ws.sent) == 3)
    assert ws.sent[2] == {"type": "stt_final", "text": "hola"}

    ws.disconnect()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_missing_finality_flag_is_partial() -> None:
    ws = FakeClientSocket()
    connector = FakeConnector()
    _session, task = await _start_ready(ws, connector)

    connector.connections[0].push(transcript_json("buenos"))
    await wait_until(lambda: len(ws.sent) == 2)
    assert ws.sent[1] == {"type": "stt_partial", "text": "buenos"}

    ws.disconnect()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_malformed_upstream_message_keeps_session_open() -> None:
    ws = FakeClientSocket()
    connector = FakeConnector()
    session, task = await _start_ready(ws, connector)
    upstream = connector.connections[0]

    upstream.push("not-json")
    upstream.push(transcript_json("hola", is_final=False))
    await wait_until(lambda: len(ws.sent) == 2)

    assert ws.sent[1] == {"type": "stt_partial", "text": "hola"}
    assert session.stats.decode_failures == 1
    assert not session.closed
    assert session.state is SessionState.STREAMING

    ws.disconnect()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_messages_without_transcript_are_suppressed() -> None:
    ws = FakeClientSocket()
    connector = FakeConnector()
    session, task = await _start_ready(ws, connector)
    upstream = connector.connections[0]

    upstream.push(transcript_json("", is_final=True))
    upstream.push('{"type": "Metadata", "request_id": "abc"}')
    upstream.push('{"type": "UtteranceEnd", "channel": [0, 1], "last_word_end": 2.1}')
    upstream.push('{"channel": {"alternatives": []}, "is_final": true}')
    upstream.push(transcript_json("listo", is_final=True))
    await wait_until(lambda: len(ws.sent) == 2)
    await asyncio.sleep(0.01)

    assert ws.sent[1] == {"type": "stt_final", "text": "listo"}
    assert len(ws.sent) == 2
    assert session.stats.transcripts_sent == 1

    ws.disconnect()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_missing_credential_sends_one_error_then_closes() -> None:
    ws = FakeClientSocket()
    connector = UpstreamConnector(UpstreamSettings(api_key="", url="wss://stt.invalid/v1/listen", connect_timeout_s=1.0))
    session, task = await _start(ws, connector)

    await asyncio.wait_for(task, timeout=1.0)

    assert ws.sent == [{"type": "error", "message": "STT init failed"}]
    assert ws.close_code == WS_CLOSE_STT_FAILED_CODE
    assert session.state is SessionState.CLOSED


@pytest.mark.asyncio
async def test_upstream_connect_failure_sends_error_then_closes() -> None:
    ws = FakeClientSocket()
    connector = FakeConnector(error=UpstreamConnectError("InvalidStatus: HTTP 401"))
    session, task = await _start(ws, connector)

    await asyncio.wait_for(task, timeout=1.0)

    assert [m["type"] for m in ws.sent] == ["error"]
    assert ws.close_code == WS_CLOSE_STT_FAILED_CODE
    assert session.state is SessionState.CLOSED


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        RuntimeError("dialer crashed"),
        ImportError("connecting through a SOCKS proxy requires python-socks"),
    ],
)
async def test_unexpected_connect_error_sends_error_then_closes(error: Exception) -> None:
    ws = FakeClientSocket()
    connector = FakeConnector(error=error)
    session, task = await _start(ws, connector)

    await asyncio.wait_for(task, timeout=1.0)

    assert ws.sent == [{"type": "error", "message": "STT init failed"}]
    assert ws.close_code == WS_CLOSE_STT_FAILED_CODE
    assert session.state is SessionState.CLOSED


@pytest.mark.asyncio
async def test_upstream_receive_error_closes_client_as_upstream_closed() -> None:
    ws = FakeClientSocket()
    connector = FakeConnector()
    session, task = await _start_ready(ws, connector)

    connector.connections[0].fail(RuntimeError("provider stream broke"))
    await asyncio.wait_for(task, timeout=1.0)

    assert ws.close_code == WS_CLOSE_STT_CLOSED_CODE
    assert [m["type"] for m in ws.sent] == ["ready"]
    assert session.state is SessionState.CLOSED
    assert connector.outstanding == 0


@pytest.mark.asyncio
async def test_client_disconnect_closes_upstream() -> None:
    ws = FakeClientSocket()
    connector = FakeConnector()
    session, task = await _start_ready(ws, connector)
    upstream = connector.connections[0]

    ws.disconnect(code=1001)
    await asyncio.wait_for(task, timeout=1.0)

    assert not upstream.is_open
    assert upstream.close_calls == 1
    assert isinstance(session.upstream, ClosedUpstream)
    assert session.state is SessionState.CLOSED
    # Client already left; nothing is closed back at it.
    assert ws.close_code is None


@pytest.mark.asyncio
async def test_upstream_close_closes_client_without_reconnect() -> None:
    ws = FakeClientSocket()
    connector = FakeConnector()
    session, task = await _start_ready(ws, connector)

    connector.connections[0].provider_close()
    await asyncio.wait_for(task, timeout=1.0)

    assert ws.close_code == WS_CLOSE_STT_CLOSED_CODE
    assert len(connector.connections) == 1
    assert session.state is SessionState.CLOSED
    assert [m["type"] for m in ws.sent] == ["ready"]


@pytest.mark.asyncio
async def test_frames_after_upstream_closed_are_dropped() -> None:
    ws = FakeClientSocket()
    connector = FakeConnector()
    session, task = await _start_ready(ws, connector)
    upstream = connector.connections[0]

    # Provider socket goes away before the close is observed by the session.
    upstream._open = False
    ws.push_bytes(b"late")
    await wait_until(lambda: session.stats.frames_dropped == 1)
    assert upstream.sent == []

    ws.disconnect()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_repeated_open_close_cycles_leak_no_upstream_connections() -> None:
    connector = FakeConnector()

    for _ in range(25):
        ws = FakeClientSocket()
        _session, task = await _start_ready(ws, connector)
        ws.push_bytes(b"\x00\x00")
        ws.disconnect()
        await asyncio.wait_for(task, timeout=1.0)
        assert connector.outstanding == 0

    assert len(connector.connections) == 25
    assert connector.outstanding == 0


@pytest.mark.asyncio
async def test_client_leaving_during_upstream_handshake_ends_session() -> None:
    ws = FakeClientSocket()
    gate = asyncio.Event()
    connector = FakeConnector(gate=gate)
    session, task = await _start(ws, connector)

    ws.disconnect()
    await asyncio.wait_for(task, timeout=1.0)

    assert session.state is SessionState.CLOSED
    assert connector.connections == []
    assert ws.sent == []


@pytest.mark.asyncio
async def test_late_upstream_open_is_closed_immediately() -> None:
    ws = FakeClientSocket()
    session = RelaySession(ws, FakeConnector())
    await session.dispatch(DownstreamOpened())
    await session.dispatch(DownstreamClosed(code=1000))

    late = FakeUpstreamConnection()
    await session.dispatch(UpstreamOpened(late))

    assert not late.is_open
    assert ws.sent == []
    assert isinstance(session.upstream, ClosedUpstream)


@pytest.mark.asyncio
async def test_run_cancellation_releases_upstream() -> None:
    ws = FakeClientSocket()
    connector = FakeConnector()
    _session, task = await _start_ready(ws, connector)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert connector.outstanding == 0


@pytest.mark.asyncio
async def test_activity_callback_fires_on_client_frames() -> None:
    ws = FakeClientSocket()
    touches: list[int] = []
    session = RelaySession(ws, FakeConnector(), on_activity=lambda: touches.append(1))
    task = asyncio.create_task(session.run())
    await wait_until(lambda: len(ws.sent) == 1)

    ws.push_bytes(b"a")
    ws.push_text("noop")
    await wait_until(lambda: len(touches) == 2)

    ws.disconnect()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_dispatch_rejects_unknown_events() -> None:
    session = RelaySession(FakeClientSocket(), FakeConnector())
    with pytest.raises(TypeError):
        await session.dispatch(object())  # type: ignore[arg-type]
