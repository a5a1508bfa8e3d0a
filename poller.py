"""State-machine based polling of one remote job session."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from decoders import decode_poll
from interfaces import Dispatcher, Transport
from models import CallbackBundle, PollState, ResponseKind, Session, TransportResult

logger = logging.getLogger(__name__)

StateCallback = Callable[[PollState, PollState], None]
FinishedCallback = Callable[[Session, PollState], None]

CANCELLED_MESSAGE = "Operation cancelled"


class PollingStateMachine:
    """Tracks at most one session and polls it on a fixed interval.

    All methods run on the dispatcher's thread. Poll results are tagged with
    the session id the tick was issued for, so a result that arrives after
    its session was cancelled or superseded is dropped.
    """

    def __init__(
        self,
        transport: Transport,
        dispatcher: Dispatcher,
        poll_url_for: Callable[[str], str],
        interval_ms: int = 3000,
        timeout_s: float = 10.0,
        on_state_change: Optional[StateCallback] = None,
        on_finished: Optional[FinishedCallback] = None,
    ) -> None:
        self._transport = transport
        self._poll_url_for = poll_url_for
        self._timeout_s = timeout_s
        self._on_state_change = on_state_change
        self._on_finished = on_finished
        self._timer = dispatcher.create_timer(interval_ms, self.tick)
        self._state = PollState.IDLE
        self._session: Optional[Session] = None

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def session_id(self) -> str:
        return self._session.session_id if self._session else ""

    @property
    def is_polling(self) -> bool:
        return self._session is not None and self._session.is_polling

    def start(self, session_id: str, callbacks: CallbackBundle) -> None:
        previous = self._session
        if previous is not None:
            logger.info(f"Session {previous.session_id} superseded by {session_id}")
            previous.is_polling = False
        self._session = Session(
            session_id=session_id,
            callbacks=callbacks,
            is_polling=True,
            started_at=time.monotonic(),
        )
        self._transition(PollState.POLLING)
        self._timer.start()
        logger.info(f"Started polling for session: {session_id}")

    def tick(self) -> None:
        session = self._session
        if session is None or not session.is_polling or not session.session_id:
            return
        session_id = session.session_id
        self._transport.get(
            self._poll_url_for(session_id),
            self._timeout_s,
            lambda result: self.handle_poll_result(session_id, result),
        )

    def handle_poll_result(self, session_id: str, result: TransportResult) -> None:
        session = self._session
        if session is None or session.session_id != session_id or not session.is_polling:
            logger.warning(f"Dropping poll result for inactive session {session_id}")
            return

        callbacks = session.callbacks
        decision = decode_poll(result, callbacks.is_transform_operation)
        kind = decision.kind

        if kind == ResponseKind.IGNORE.value:
            logger.debug(f"Ignoring poll tick for {session_id}: {decision.message}")
            return
        if kind == ResponseKind.PENDING.value:
            return
        if kind == ResponseKind.PROGRESS.value:
            callbacks.progress(decision.progress)
            callbacks.status(decision.message, decision.status_ms)
            return

        if kind == ResponseKind.AUDIO.value:
            self._finish(session, PollState.COMPLETED)
            callbacks.audio(decision.audio_base64, session_id)
            callbacks.status(decision.message, decision.status_ms)
        else:
            self._finish(session, PollState.FAILED)
            callbacks.error(decision.message)
        if decision.notify_complete:
            callbacks.complete()

    def cancel(self, notify: bool = True) -> bool:
        """Stop polling without an error or completion; False when idle.

        With ``notify`` false the caller reports the cancellation itself.
        """
        session = self._session
        if session is None:
            return False
        self._finish(session, PollState.CANCELLED)
        if notify:
            session.callbacks.status(CANCELLED_MESSAGE, 2000)
        return True

    def _finish(self, session: Session, outcome: PollState) -> None:
        self._timer.stop()
        session.is_polling = False
        self._session = None
        elapsed = time.monotonic() - session.started_at
        logger.info(f"Stopped polling session {session.session_id}: {outcome.value} after {elapsed:.1f}s")
        self._transition(outcome)
        self._transition(PollState.IDLE)
        if self._on_finished:
            self._on_finished(session, outcome)

    def _transition(self, to_state: PollState) -> None:
        from_state = self._state
        if from_state == to_state:
            return
        self._state = to_state
        if self._on_state_change:
            self._on_state_change(from_state, to_state)
