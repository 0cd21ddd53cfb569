"""Secrets configuration."""

from __future__ import annotations

# Read once at startup; a missing key only fails individual voice sessions.
ENV_DEEPGRAM_API_KEY = "DEEPGRAM_API_KEY"

__all__ = ["ENV_DEEPGRAM_API_KEY"]
