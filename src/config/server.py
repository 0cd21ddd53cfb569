"""HTTP server bind configuration."""

from __future__ import annotations

ENV_HOST = "HOST"
ENV_PORT = "PORT"

DEFAULT_HOST = "0.0.0.0"  # noqa: S104
DEFAULT_PORT = 3001

__all__ = ["ENV_HOST", "ENV_PORT", "DEFAULT_HOST", "DEFAULT_PORT"]
