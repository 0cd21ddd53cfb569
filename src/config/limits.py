"""Admission control configuration."""

from __future__ import annotations

ENV_MAX_CONCURRENT_CONNECTIONS = "MAX_CONCURRENT_CONNECTIONS"

DEFAULT_MAX_CONCURRENT_CONNECTIONS = 100

__all__ = [
    "ENV_MAX_CONCURRENT_CONNECTIONS",
    "DEFAULT_MAX_CONCURRENT_CONNECTIONS",
]
