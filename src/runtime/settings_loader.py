"""Environment parsing for runtime settings."""

from __future__ import annotations

import os

from src.config.secrets import ENV_DEEPGRAM_API_KEY
from src.config.server import ENV_HOST, ENV_PORT, DEFAULT_HOST, DEFAULT_PORT
from src.config.limits import ENV_MAX_CONCURRENT_CONNECTIONS, DEFAULT_MAX_CONCURRENT_CONNECTIONS
from src.config.upstream import (
    ENV_STT_UPSTREAM_URL,
    DEFAULT_STT_UPSTREAM_URL,
    ENV_STT_CONNECT_TIMEOUT_S,
    DEFAULT_STT_CONNECT_TIMEOUT_S,
)
from src.state.settings import (
    AppSettings,
    LimitsSettings,
    ServerSettings,
    UpstreamSettings,
    WebSocketSettings,
)
from src.config.websocket import (
    ENV_WS_IDLE_TIMEOUT_S,
    ENV_WS_WATCHDOG_TICK_S,
    DEFAULT_WS_IDLE_TIMEOUT_S,
    DEFAULT_WS_WATCHDOG_TICK_S,
    ENV_WS_MAX_CONNECTION_DURATION_S,
    DEFAULT_WS_MAX_CONNECTION_DURATION_S,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _load_upstream_settings() -> UpstreamSettings:
    connect_timeout = _float_env(ENV_STT_CONNECT_TIMEOUT_S, DEFAULT_STT_CONNECT_TIMEOUT_S)
    if connect_timeout <= 0:
        connect_timeout = DEFAULT_STT_CONNECT_TIMEOUT_S
    return UpstreamSettings(
        api_key=(os.getenv(ENV_DEEPGRAM_API_KEY) or "").strip(),
        url=_str_env(ENV_STT_UPSTREAM_URL, DEFAULT_STT_UPSTREAM_URL),
        connect_timeout_s=connect_timeout,
    )


def _load_limits_settings() -> LimitsSettings:
    max_connections = _int_env(ENV_MAX_CONCURRENT_CONNECTIONS, DEFAULT_MAX_CONCURRENT_CONNECTIONS)
    return LimitsSettings(max_concurrent_connections=max(1, max_connections))


def _load_websocket_settings() -> WebSocketSettings:
    idle_timeout = _float_env(ENV_WS_IDLE_TIMEOUT_S, DEFAULT_WS_IDLE_TIMEOUT_S)
    watchdog_tick = _float_env(ENV_WS_WATCHDOG_TICK_S, DEFAULT_WS_WATCHDOG_TICK_S)
    max_duration = _float_env(ENV_WS_MAX_CONNECTION_DURATION_S, DEFAULT_WS_MAX_CONNECTION_DURATION_S)
    if watchdog_tick <= 0:
        watchdog_tick = DEFAULT_WS_WATCHDOG_TICK_S

    return WebSocketSettings(
        idle_timeout_s=max(0.0, idle_timeout),
        watchdog_tick_s=watchdog_tick,
        max_connection_duration_s=max(0.0, max_duration),
    )


def _load_server_settings() -> ServerSettings:
    return ServerSettings(
        host=_str_env(ENV_HOST, DEFAULT_HOST),
        port=_int_env(ENV_PORT, DEFAULT_PORT),
    )


def load_settings() -> AppSettings:
    return AppSettings(
        upstream=_load_upstream_settings(),
        limits=_load_limits_settings(),
        websocket=_load_websocket_settings(),
        server=_load_server_settings(),
    )


__all__ = ["load_settings"]
