"""Speech provider (Deepgram live transcription) configuration."""

from __future__ import annotations

ENV_STT_UPSTREAM_URL = "STT_UPSTREAM_URL"
ENV_STT_CONNECT_TIMEOUT_S = "STT_CONNECT_TIMEOUT_S"

DEFAULT_STT_UPSTREAM_URL = "wss://api.deepgram.com/v1/listen"
DEFAULT_STT_CONNECT_TIMEOUT_S = 10.0

# Browser mic is captured as PCM16 mono at 16kHz.
STT_SAMPLE_RATE_HZ = 16000
STT_ENCODING = "linear16"

# Fixed streaming parameters. Endpointing ends an utterance after 300ms of
# trailing silence and a turn after 1000ms.
STT_MODEL = "nova-2"
STT_ENDPOINTING_MS = 300
STT_UTTERANCE_END_MS = 1000

STT_QUERY_PARAMS: dict[str, str] = {
    "model": STT_MODEL,
    "detect_language": "true",
    "punctuate": "true",
    "interim_results": "true",
    "encoding": STT_ENCODING,
    "sample_rate": str(STT_SAMPLE_RATE_HZ),
    "endpointing": str(STT_ENDPOINTING_MS),
    "utterance_end_ms": str(STT_UTTERANCE_END_MS),
}

STT_AUTH_HEADER = "Authorization"
STT_AUTH_SCHEME = "Token"

__all__ = [
    "ENV_STT_UPSTREAM_URL",
    "ENV_STT_CONNECT_TIMEOUT_S",
    "DEFAULT_STT_UPSTREAM_URL",
    "DEFAULT_STT_CONNECT_TIMEOUT_S",
    "STT_SAMPLE_RATE_HZ",
    "STT_ENCODING",
    "STT_MODEL",
    "STT_ENDPOINTING_MS",
    "STT_UTTERANCE_END_MS",
    "STT_QUERY_PARAMS",
    "STT_AUTH_HEADER",
    "STT_AUTH_SCHEME",
]
