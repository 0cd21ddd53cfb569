"""Typed events that drive a relay session (dataclasses only)."""

from __future__ import annotations

from typing import Any, Union
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DownstreamOpened:
    pass


@dataclass(frozen=True, slots=True)
class UpstreamOpened:
    connection: Any


@dataclass(frozen=True, slots=True)
class DownstreamFrame:
    data: bytes | str


@dataclass(frozen=True, slots=True)
class UpstreamFrame:
    raw: bytes | str


@dataclass(frozen=True, slots=True)
class DownstreamClosed:
    code: int | None = None


@dataclass(frozen=True, slots=True)
class UpstreamClosed:
    pass


@dataclass(frozen=True, slots=True)
class UpstreamFailed:
    reason: str


SessionEvent = Union[
    DownstreamOpened,
    UpstreamOpened,
    DownstreamFrame,
    UpstreamFrame,
    DownstreamClosed,
    UpstreamClosed,
    UpstreamFailed,
]


__all__ = [
    "DownstreamClosed",
    "DownstreamFrame",
    "DownstreamOpened",
    "SessionEvent",
    "UpstreamClosed",
    "UpstreamFailed",
    "UpstreamFrame",
    "UpstreamOpened",
]
