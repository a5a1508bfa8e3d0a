"""Job submission client: public entry points for every backend operation."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from config import BackendConfig
from decoders import decode_submission
from encoders import (
    Encoded,
    encode_continue,
    encode_extend,
    encode_generate,
    encode_transform,
    encode_undo,
    poll_path,
)
from errors import NO_UNDO_SESSION, NOT_CONNECTED, format_error
from interfaces import Dispatcher, Transport
from models import (
    CallbackBundle,
    ContinueParams,
    ExtendParams,
    GenerateParams,
    Operation,
    PollState,
    ResponseKind,
    Session,
    TransformParams,
    TransportResult,
    UndoParams,
)
from poller import CANCELLED_MESSAGE, PollingStateMachine, StateCallback

logger = logging.getLogger(__name__)


class AudioJobClient:
    """Owns the connection flag, the active callback bundle and the poller.

    Every public method must be called from the dispatcher's thread; network
    I/O happens on transport worker threads and comes back through the
    dispatcher. A new operation supersedes the previous one: a submission
    response that arrives after it was superseded or cancelled is dropped.
    """

    def __init__(
        self,
        transport: Transport,
        dispatcher: Dispatcher,
        config: Optional[BackendConfig] = None,
        on_state_change: Optional[StateCallback] = None,
    ) -> None:
        self._transport = transport
        self._config = config or BackendConfig()
        self._connected = False
        self._callbacks = CallbackBundle()
        self._request_serial = 0
        self._pending_request: Optional[int] = None
        self._last_session_id = ""
        self._last_session_at = 0.0
        self._poller = PollingStateMachine(
            transport,
            dispatcher,
            poll_url_for=self._poll_url,
            interval_ms=self._config.poll_interval_ms,
            timeout_s=self._config.poll_timeout_s,
            on_state_change=on_state_change,
            on_finished=self._on_session_finished,
        )

    @property
    def config(self) -> BackendConfig:
        return self._config

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def poll_state(self) -> PollState:
        return self._poller.state

    @property
    def current_session_id(self) -> str:
        return self._poller.session_id

    @property
    def has_pending_request(self) -> bool:
        return self._pending_request is not None

    def set_connection_status(self, connected: bool) -> None:
        if self._connected != connected:
            logger.info(f"Connection status set to: {'Connected' if connected else 'Disconnected'}")
        self._connected = connected

    def last_session_id(self) -> str:
        """Session id of the last completed polled job, or "" once it is stale."""
        if not self._last_session_id:
            return ""
        age = time.monotonic() - self._last_session_at
        if age >= self._config.session_timeout_s:
            logger.debug(f"Session {self._last_session_id} is stale ({age:.0f}s)")
            return ""
        return self._last_session_id

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def generate(self, params: GenerateParams, callbacks: CallbackBundle) -> None:
        self._submit(
            Operation.GENERATE,
            callbacks,
            lambda: encode_generate(params),
            "Sending audio for generation...",
        )

    def extend(self, params: ExtendParams, callbacks: CallbackBundle) -> None:
        status = "Generating smart loop..." if params.generate_as_loop else "Generating..."
        self._submit(Operation.EXTEND, callbacks, lambda: encode_extend(params), status)

    def transform(self, params: TransformParams, callbacks: CallbackBundle) -> None:
        self._submit(
            Operation.TRANSFORM,
            callbacks,
            lambda: encode_transform(params),
            "Sending audio for transformation...",
        )

    def continue_music(self, params: ContinueParams, callbacks: CallbackBundle) -> None:
        self._submit(
            Operation.CONTINUE,
            callbacks,
            lambda: encode_continue(params),
            "Requesting continuation...",
            status_ms=3000,
        )

    def undo_transform(self, params: UndoParams, callbacks: CallbackBundle) -> None:
        if self._connected and not params.session_id:
            callbacks.error(format_error(NO_UNDO_SESSION))
            return
        self._submit(Operation.UNDO, callbacks, lambda: encode_undo(params), "Undoing transform...")

    def cancel_current_operation(self) -> None:
        had_pending = self._pending_request is not None
        self._pending_request = None
        # A pending submission is newer than any polling session.
        self._poller.cancel(notify=not had_pending)
        if had_pending:
            self._callbacks.status(CANCELLED_MESSAGE, 2000)
            logger.info("Pending request cancelled")

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _submit(
        self,
        operation: Operation,
        callbacks: CallbackBundle,
        encode: Callable[[], Encoded],
        status_message: str,
        status_ms: int = 2000,
    ) -> None:
        if not self._connected:
            callbacks.error(format_error(NOT_CONNECTED))
            return

        self._callbacks = callbacks
        self._request_serial += 1
        request_id = self._request_serial
        self._pending_request = request_id
        callbacks.status(status_message, status_ms)

        path, body = encode()
        url = self._config.service_url(path, operation)
        logger.info(f"Submitting {operation.value} request to {url}")
        self._transport.post_json(
            url,
            body,
            self._config.submit_timeout_s,
            lambda result: self._handle_submission(operation, request_id, callbacks, result),
        )

    def _handle_submission(
        self,
        operation: Operation,
        request_id: int,
        callbacks: CallbackBundle,
        result: TransportResult,
    ) -> None:
        if request_id != self._pending_request:
            logger.warning(f"Dropping {operation.value} response for a superseded request")
            return
        self._pending_request = None

        decision = decode_submission(operation, result)
        kind = decision.kind
        if kind == ResponseKind.SESSION.value:
            callbacks.status(decision.message, decision.status_ms)
            self._poller.start(decision.session_id, callbacks)
        elif kind == ResponseKind.AUDIO.value:
            callbacks.audio(decision.audio_base64, "")
            callbacks.status(decision.message, decision.status_ms)
        else:
            callbacks.error(decision.message)

    def _poll_url(self, session_id: str) -> str:
        return self._config.service_url(poll_path(session_id))

    def _on_session_finished(self, session: Session, outcome: PollState) -> None:
        if outcome == PollState.COMPLETED:
            self._last_session_id = session.session_id
            self._last_session_at = time.monotonic()
