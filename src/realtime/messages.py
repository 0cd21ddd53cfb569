"""Downstream (relay -> client) message types and JSON encoding."""

from __future__ import annotations

from typing import Any, Union
from dataclasses import dataclass

import orjson

from src.config.websocket import (
    WS_KEY_TEXT,
    WS_KEY_TYPE,
    WS_MSG_ERROR,
    WS_MSG_READY,
    WS_KEY_MESSAGE,
    WS_KEY_SESSION_ID,
    WS_MSG_STT_FINAL,
    WS_MSG_STT_PARTIAL,
)


@dataclass(frozen=True, slots=True)
class ReadyMessage:
    session_id: str

    def to_payload(self) -> dict[str, Any]:
        return {WS_KEY_TYPE: WS_MSG_READY, WS_KEY_SESSION_ID: self.session_id}


@dataclass(frozen=True, slots=True)
class TranscriptMessage:
    text: str
    is_final: bool

    def to_payload(self) -> dict[str, Any]:
        msg_type = WS_MSG_STT_FINAL if self.is_final else WS_MSG_STT_PARTIAL
        return {WS_KEY_TYPE: msg_type, WS_KEY_TEXT: self.text}


@dataclass(frozen=True, slots=True)
class ErrorMessage:
    message: str

    def to_payload(self) -> dict[str, Any]:
        return {WS_KEY_TYPE: WS_MSG_ERROR, WS_KEY_MESSAGE: self.message}


DownstreamMessage = Union[ReadyMessage, TranscriptMessage, ErrorMessage]


def encode_message(message: DownstreamMessage) -> str:
    return orjson.dumps(message.to_payload()).decode("utf-8")


__all__ = [
    "DownstreamMessage",
    "ErrorMessage",
    "ReadyMessage",
    "TranscriptMessage",
    "encode_message",
]
