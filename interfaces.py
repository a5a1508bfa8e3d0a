"""Protocol interfaces used by the job client and poller."""

from __future__ import annotations

from typing import Any, Callable, Protocol

from models import TransportResult

ResultCallback = Callable[[TransportResult], None]


class RepeatingTimer(Protocol):
    def start(self) -> None: ...

    def stop(self) -> None: ...

    def is_active(self) -> bool: ...


class Dispatcher(Protocol):
    """Single-threaded UI context: posted callables and timers run there."""

    def post(self, fn: Callable[[], None]) -> None: ...

    def create_timer(self, interval_ms: int, callback: Callable[[], None]) -> RepeatingTimer: ...


class Transport(Protocol):
    def post_json(
        self,
        url: str,
        body: dict[str, Any],
        timeout_s: float,
        on_done: ResultCallback,
    ) -> None: ...

    def get(self, url: str, timeout_s: float, on_done: ResultCallback) -> None: ...


class ConfigStore(Protocol):
    def get_use_localhost(self) -> bool: ...

    def set_use_localhost(self, value: bool) -> None: ...

    def get_poll_interval_ms(self) -> int: ...

    def set_poll_interval_ms(self, value: int) -> None: ...
