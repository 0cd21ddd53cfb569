"""Decoding of speech provider transcript messages.

The provider streams JSON objects shaped like::

    {"channel": {"alternatives": [{"transcript": "hola"}]}, "is_final": false}

Other provider message types (``Metadata``, ``SpeechStarted``,
``UtteranceEnd``) carry no transcript and decode to empty text, which the
session suppresses.
"""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass

import orjson

from src.errors import TranscriptDecodeError


@dataclass(frozen=True, slots=True)
class TranscriptEvent:
    text: str = ""
    is_final: bool = False


def _extract_transcript(msg: dict[str, Any]) -> str:
    channel = msg.get("channel")
    if not isinstance(channel, dict):
        return ""
    alternatives = channel.get("alternatives")
    if not isinstance(alternatives, list) or not alternatives:
        return ""
    first = alternatives[0]
    if not isinstance(first, dict):
        return ""
    transcript = first.get("transcript")
    return transcript if isinstance(transcript, str) else ""


def decode_transcript_event(raw: bytes | str) -> TranscriptEvent:
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise TranscriptDecodeError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise TranscriptDecodeError("message must be a JSON object")

    return TranscriptEvent(text=_extract_transcript(msg), is_final=bool(msg.get("is_final")))


__all__ = ["TranscriptEvent", "decode_transcript_event"]
