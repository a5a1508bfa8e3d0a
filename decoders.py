"""Interpretation of backend JSON envelopes.

Decoders never raise: every outcome, including malformed bodies, is returned
as a ``Decision`` for the caller to apply on the UI thread.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Union

from errors import (
    APPLICATION_ERROR,
    JOB_FAILED,
    NO_AUDIO,
    NO_AUDIO_DATA,
    PROCESSING_FAILED,
    PROTOCOL_ERROR,
    TRANSPORT_ERROR,
    format_error,
)
from models import Decision, Operation, ResponseKind, TransportResult

logger = logging.getLogger(__name__)

QUEUED_MESSAGES = {
    Operation.GENERATE: "Sent for generation! Processing...",
    Operation.TRANSFORM: "Sent for transform! Processing...",
    Operation.CONTINUE: "Continuation queued...",
    Operation.EXTEND: "Extend queued! Processing...",
    Operation.UNDO: "Undo queued...",
}

# Field carrying inline audio for operations that may answer synchronously.
DIRECT_AUDIO_FIELDS = {
    Operation.EXTEND: "audio_base64",
    Operation.UNDO: "audio_data",
}

# Continue and Undo report server-side errors as failures.
APPLICATION_ERROR_CODES = {
    Operation.CONTINUE: JOB_FAILED,
    Operation.UNDO: JOB_FAILED,
}

NO_AUDIO_CODES = {
    Operation.UNDO: NO_AUDIO_DATA,
}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_percent(value: Any) -> int:
    try:
        percent = int(float(value))
    except (TypeError, ValueError):
        percent = 0
    return max(0, min(100, percent))


def parse_envelope(text: str) -> Optional[dict]:
    """Return the JSON object in ``text`` or ``None`` if it is not one."""
    try:
        value = json.loads(text)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


def _error(message: str, notify_complete: bool = False) -> Decision:
    return Decision(kind=ResponseKind.ERROR.value, message=message, notify_complete=notify_complete)


def _read_envelope(operation: Operation, result: TransportResult) -> Union[dict, Decision]:
    if not result.ok or not result.text:
        return _error(format_error(TRANSPORT_ERROR, operation=operation.value, status=result.status_code))
    envelope = parse_envelope(result.text)
    if envelope is None:
        logger.warning(f"{operation.value} returned a non-object body")
        return _error(format_error(PROTOCOL_ERROR, operation=operation.value))
    return envelope


def decode_submission(operation: Operation, result: TransportResult) -> Decision:
    """Classify the response to a job submission.

    Operations listed in ``DIRECT_AUDIO_FIELDS`` may answer with audio inline;
    every operation may instead answer with a session id to poll.
    """
    envelope = _read_envelope(operation, result)
    if isinstance(envelope, Decision):
        return envelope

    if not _as_bool(envelope.get("success")):
        detail = _as_text(envelope.get("error"))
        logger.warning(f"{operation.value} server error: {detail}")
        code = APPLICATION_ERROR_CODES.get(operation, APPLICATION_ERROR)
        return _error(format_error(code, operation=operation.value, detail=detail))

    audio_field = DIRECT_AUDIO_FIELDS.get(operation)
    if audio_field is not None:
        audio = _as_text(envelope.get(audio_field))
        if audio:
            return Decision(
                kind=ResponseKind.AUDIO.value,
                message=_direct_completion_message(operation, envelope),
                audio_base64=audio,
                status_ms=3000,
            )

    session_id = _as_text(envelope.get("session_id"))
    if session_id:
        return Decision(
            kind=ResponseKind.SESSION.value,
            message=QUEUED_MESSAGES[operation],
            session_id=session_id,
        )

    if audio_field is not None:
        return _error(format_error(NO_AUDIO_CODES.get(operation, NO_AUDIO), operation=operation.value))
    return _error(format_error(PROTOCOL_ERROR, operation=operation.value))


def _direct_completion_message(operation: Operation, envelope: dict) -> str:
    if operation == Operation.UNDO:
        return "Transform undone - audio restored!"
    metadata = envelope.get("metadata")
    if isinstance(metadata, dict) and metadata.get("generation_time") is not None:
        return f"{operation.value} complete! {_as_text(metadata['generation_time'])}s"
    return f"{operation.value} complete!"


def decode_generate(result: TransportResult) -> Decision:
    return decode_submission(Operation.GENERATE, result)


def decode_extend(result: TransportResult) -> Decision:
    return decode_submission(Operation.EXTEND, result)


def decode_transform(result: TransportResult) -> Decision:
    return decode_submission(Operation.TRANSFORM, result)


def decode_continue(result: TransportResult) -> Decision:
    return decode_submission(Operation.CONTINUE, result)


def decode_undo(result: TransportResult) -> Decision:
    return decode_submission(Operation.UNDO, result)


def decode_poll(result: TransportResult, is_transform: bool) -> Decision:
    """Classify one poll response; wording follows ``is_transform``."""
    if not result.ok or not result.text:
        return Decision(kind=ResponseKind.IGNORE.value, message="poll transport failure")
    envelope = parse_envelope(result.text)
    if envelope is None:
        return Decision(kind=ResponseKind.IGNORE.value, message="unparseable poll response")

    if not _as_bool(envelope.get("success")):
        logger.warning(f"Polling error: {_as_text(envelope.get('error'))}")
        return _error(format_error(PROCESSING_FAILED))

    if _as_bool(envelope.get("generation_in_progress")) or _as_bool(envelope.get("transform_in_progress")):
        percent = _as_percent(envelope.get("progress"))
        verb = "Transforming" if is_transform else "Generating"
        return Decision(
            kind=ResponseKind.PROGRESS.value,
            message=f"{verb}: {percent}%",
            progress=percent,
            status_ms=1000,
        )

    label = "Transform" if is_transform else "Generation"
    audio = _as_text(envelope.get("audio_data"))
    if audio:
        return Decision(
            kind=ResponseKind.AUDIO.value,
            message="Transform complete!" if is_transform else "Audio generation complete!",
            audio_base64=audio,
            status_ms=3000,
            notify_complete=True,
        )

    status = _as_text(envelope.get("status"))
    if status == "failed":
        detail = _as_text(envelope.get("error"))
        return _error(format_error(JOB_FAILED, operation=label, detail=detail), notify_complete=True)
    if status == "completed":
        return _error(format_error(NO_AUDIO, operation=label), notify_complete=True)

    return Decision(kind=ResponseKind.PENDING.value)


def decode_health(result: TransportResult) -> bool:
    """A body means healthy unless it is a JSON object whose status is not "live"."""
    if not result.ok or not result.text:
        return False
    envelope = parse_envelope(result.text)
    if envelope is None:
        return True
    return _as_text(envelope.get("status")) == "live"
