"""Configuration module exports (constants only)."""

from .websocket import WS_ENDPOINT_PATH
from .upstream import STT_QUERY_PARAMS, STT_SAMPLE_RATE_HZ

__all__ = [
    "STT_QUERY_PARAMS",
    "STT_SAMPLE_RATE_HZ",
    "WS_ENDPOINT_PATH",
]
