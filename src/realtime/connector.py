"""Dialer for the streaming speech-recognition provider."""

from __future__ import annotations

import logging
from urllib.parse import urlencode

import websockets
from websockets.exceptions import WebSocketException

from src.config.secrets import ENV_DEEPGRAM_API_KEY
from src.state.settings import UpstreamSettings
from src.errors import UpstreamConnectError, MissingCredentialError
from src.config.upstream import STT_AUTH_HEADER, STT_AUTH_SCHEME, STT_QUERY_PARAMS

from .upstream import UpstreamConnection

logger = logging.getLogger(__name__)


def build_upstream_url(base_url: str) -> str:
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{urlencode(STT_QUERY_PARAMS)}"


class UpstreamConnector:
    """Open one provider connection per call. No retries."""

    def __init__(self, settings: UpstreamSettings) -> None:
        self._settings = settings
        self.url = build_upstream_url(settings.url)

    async def connect(self) -> UpstreamConnection:
        api_key = self._settings.api_key
        if not api_key:
            raise MissingCredentialError(ENV_DEEPGRAM_API_KEY)

        try:
            ws = await websockets.connect(
                self.url,
                additional_headers={STT_AUTH_HEADER: f"{STT_AUTH_SCHEME} {api_key}"},
                open_timeout=self._settings.connect_timeout_s,
            )
        except (WebSocketException, OSError, TimeoutError, ImportError) as exc:
            raise UpstreamConnectError(f"{type(exc).__name__}: {exc}") from exc
        return UpstreamConnection(ws)


__all__ = ["UpstreamConnector", "build_upstream_url"]
