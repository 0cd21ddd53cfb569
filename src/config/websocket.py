"""WebSocket protocol configuration and constants."""

from __future__ import annotations

WS_ENDPOINT_PATH = "/ws"

# Downstream message keys
WS_KEY_TYPE = "type"
WS_KEY_TEXT = "text"
WS_KEY_MESSAGE = "message"
WS_KEY_SESSION_ID = "sessionId"

# Downstream message types
WS_MSG_READY = "ready"
WS_MSG_ERROR = "error"
WS_MSG_STT_FINAL = "stt_final"
WS_MSG_STT_PARTIAL = "stt_partial"

# Close codes
WS_CLOSE_IDLE_CODE = 4000
WS_CLOSE_BUSY_CODE = 4002
WS_CLOSE_STT_FAILED_CODE = 4003
WS_CLOSE_STT_CLOSED_CODE = 4004
WS_CLOSE_MAX_DURATION_CODE = 4005

WS_CLOSE_IDLE_REASON = "idle timeout"
WS_CLOSE_STT_FAILED_REASON = "stt init failed"
WS_CLOSE_STT_CLOSED_REASON = "stt closed"
WS_CLOSE_MAX_DURATION_REASON = "max connection duration reached"

# Client-visible error messages
WS_ERROR_STT_INIT_FAILED = "STT init failed"
WS_ERROR_SERVER_AT_CAPACITY = "Server cannot accept new connections. Please try again later."

# Lifecycle watchdog (0 disables the check)
ENV_WS_IDLE_TIMEOUT_S = "WS_IDLE_TIMEOUT_S"
ENV_WS_WATCHDOG_TICK_S = "WS_WATCHDOG_TICK_S"
ENV_WS_MAX_CONNECTION_DURATION_S = "WS_MAX_CONNECTION_DURATION_S"

DEFAULT_WS_IDLE_TIMEOUT_S = 0.0
DEFAULT_WS_WATCHDOG_TICK_S = 5.0
DEFAULT_WS_MAX_CONNECTION_DURATION_S = 0.0

__all__ = [
    "WS_ENDPOINT_PATH",
    "WS_KEY_TYPE",
    "WS_KEY_TEXT",
    "WS_KEY_MESSAGE",
    "WS_KEY_SESSION_ID",
    "WS_MSG_READY",
    "WS_MSG_ERROR",
    "WS_MSG_STT_FINAL",
    "WS_MSG_STT_PARTIAL",
    "WS_CLOSE_IDLE_CODE",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_STT_FAILED_CODE",
    "WS_CLOSE_STT_CLOSED_CODE",
    "WS_CLOSE_MAX_DURATION_CODE",
    "WS_CLOSE_IDLE_REASON",
    "WS_CLOSE_STT_FAILED_REASON",
    "WS_CLOSE_STT_CLOSED_REASON",
    "WS_CLOSE_MAX_DURATION_REASON",
    "WS_ERROR_STT_INIT_FAILED",
    "WS_ERROR_SERVER_AT_CAPACITY",
    "ENV_WS_IDLE_TIMEOUT_S",
    "ENV_WS_WATCHDOG_TICK_S",
    "ENV_WS_MAX_CONNECTION_DURATION_S",
    "DEFAULT_WS_IDLE_TIMEOUT_S",
    "DEFAULT_WS_WATCHDOG_TICK_S",
    "DEFAULT_WS_MAX_CONNECTION_DURATION_S",
]
