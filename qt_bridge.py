"""Qt implementation of the UI-thread dispatcher.

Create ``QtDispatcher`` on the GUI thread. Worker threads call ``post``; the
queued signal runs the posted callable on the GUI thread.
"""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, Qt, QTimer, Signal, Slot


class _Invoker(QObject):
    invoke = Signal(object)

    def __init__(self) -> None:
        super().__init__()
        self.invoke.connect(self._run, Qt.ConnectionType.QueuedConnection)

    @Slot(object)
    def _run(self, fn: Callable[[], None]) -> None:
        fn()


class QtRepeatingTimer:
    def __init__(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self._timer = QTimer()
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(callback)

    def start(self) -> None:
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def is_active(self) -> bool:
        return self._timer.isActive()


class QtDispatcher:
    def __init__(self) -> None:
        self._invoker = _Invoker()

    def post(self, fn: Callable[[], None]) -> None:
        self._invoker.invoke.emit(fn)

    def create_timer(self, interval_ms: int, callback: Callable[[], None]) -> QtRepeatingTimer:
        return QtRepeatingTimer(interval_ms, callback)
