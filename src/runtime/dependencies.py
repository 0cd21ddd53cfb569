"""Runtime dependency construction (speech provider dialer + admission control)."""

from __future__ import annotations

import logging

from src.state import RuntimeDeps
from src.realtime.bridge import RelayBridge
from src.state.settings import AppSettings
from src.realtime.connector import UpstreamConnector
from src.config.secrets import ENV_DEEPGRAM_API_KEY
from src.handlers.connections import ConnectionManager

from .settings_loader import load_settings

logger = logging.getLogger(__name__)


def build_runtime_deps(
    settings: AppSettings | None = None,
    *,
    connector: UpstreamConnector | None = None,
) -> RuntimeDeps:
    settings = settings or load_settings()

    if not settings.upstream.api_key:
        # Not fatal: every voice session will report the failure to its client.
        logger.warning("%s is not set; voice sessions will fail to start", ENV_DEEPGRAM_API_KEY)

    relay_bridge = RelayBridge(connector=connector or UpstreamConnector(settings.upstream))
    connections = ConnectionManager(max_connections=settings.limits.max_concurrent_connections)

    return RuntimeDeps(
        connections=connections,
        relay_bridge=relay_bridge,
        settings=settings,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
