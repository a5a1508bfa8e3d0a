"""Shared error codes and user-facing messages."""

from __future__ import annotations

NOT_CONNECTED = "NOT_CONNECTED"
TRANSPORT_ERROR = "TRANSPORT_ERROR"
PROTOCOL_ERROR = "PROTOCOL_ERROR"
APPLICATION_ERROR = "APPLICATION_ERROR"
NO_AUDIO = "NO_AUDIO"
NO_AUDIO_DATA = "NO_AUDIO_DATA"
PROCESSING_FAILED = "PROCESSING_FAILED"
JOB_FAILED = "JOB_FAILED"
NO_UNDO_SESSION = "NO_UNDO_SESSION"

ERROR_MESSAGES = {
    NOT_CONNECTED: "Backend not connected - check connection first",
    TRANSPORT_ERROR: "{operation} request failed (HTTP {status})",
    PROTOCOL_ERROR: "Invalid response from {operation}",
    APPLICATION_ERROR: "{operation} error: {detail}",
    NO_AUDIO: "{operation} completed but no audio received",
    NO_AUDIO_DATA: "{operation} completed but no audio data received",
    PROCESSING_FAILED: "Processing failed",
    JOB_FAILED: "{operation} failed: {detail}",
    NO_UNDO_SESSION: "No transform session to undo",
}


def format_error(code: str, **fields: object) -> str:
    """Render the message for ``code`` with the given placeholders filled in."""
    return ERROR_MESSAGES[code].format(**fields)
