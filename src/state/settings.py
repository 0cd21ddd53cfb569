"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UpstreamSettings:
    api_key: str
    url: str
    connect_timeout_s: float


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_connections: int


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    idle_timeout_s: float
    watchdog_tick_s: float
    max_connection_duration_s: float


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str
    port: int


@dataclass(frozen=True, slots=True)
class AppSettings:
    upstream: UpstreamSettings
    limits: LimitsSettings
    websocket: WebSocketSettings
    server: ServerSettings


__all__ = [
    "AppSettings",
    "LimitsSettings",
    "ServerSettings",
    "UpstreamSettings",
    "WebSocketSettings",
]
