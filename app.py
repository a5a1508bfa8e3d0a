"""Wiring for a Qt host: dispatcher, transport, client and health checker."""

from __future__ import annotations

from typing import Callable, Optional

from client import AudioJobClient
from config import BackendConfig, JsonConfigStore
from health import HealthChecker
from interfaces import ConfigStore
from poller import StateCallback
from qt_bridge import QtDispatcher
from transport import RequestsTransport


def create_job_client(
    store: Optional[ConfigStore] = None,
    on_connection_change: Optional[Callable[[bool], None]] = None,
    on_state_change: Optional[StateCallback] = None,
) -> tuple[AudioJobClient, HealthChecker]:
    """Build a client bound to the calling (GUI) thread and start a health check.

    Must be called after the QApplication exists.
    """
    store = store or JsonConfigStore()
    config = BackendConfig.from_store(store)
    dispatcher = QtDispatcher()
    transport = RequestsTransport(dispatcher)
    client = AudioJobClient(transport, dispatcher, config=config, on_state_change=on_state_change)
    health = HealthChecker(transport, client, on_change=on_connection_change, store=store)
    health.check()
    return client, health
