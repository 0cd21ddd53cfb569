"""Shared error types for the voice relay."""

from __future__ import annotations


class RelayError(Exception):
    """Base class for relay session failures."""


class UpstreamSetupError(RelayError):
    """The speech provider connection could not be established."""


class MissingCredentialError(UpstreamSetupError):
    def __init__(self, env_name: str) -> None:
        super().__init__(f"Missing {env_name}")
        self.env_name = env_name


class UpstreamConnectError(UpstreamSetupError):
    """Network failure, handshake rejection or open timeout."""


class TranscriptDecodeError(RelayError):
    """A provider message was not a JSON object."""


__all__ = [
    "RelayError",
    "UpstreamSetupError",
    "MissingCredentialError",
    "UpstreamConnectError",
    "TranscriptDecodeError",
]
