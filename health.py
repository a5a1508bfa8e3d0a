"""Backend health check that drives the client's connection flag."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from client import AudioJobClient
from decoders import decode_health
from encoders import HEALTH_PATH
from interfaces import ConfigStore, Transport
from models import TransportResult

logger = logging.getLogger(__name__)


class HealthChecker:
    def __init__(
        self,
        transport: Transport,
        client: AudioJobClient,
        on_change: Optional[Callable[[bool], None]] = None,
        store: Optional[ConfigStore] = None,
    ) -> None:
        self._transport = transport
        self._client = client
        self._on_change = on_change
        self._store = store
        self._stopped = False
        self._check_serial = 0

    def check(self) -> None:
        if self._stopped:
            logger.debug("Health check skipped: checker stopped")
            return
        self._check_serial += 1
        check_id = self._check_serial
        config = self._client.config
        url = config.service_url(HEALTH_PATH)
        logger.debug(f"Checking backend health at: {url}")
        self._transport.get(
            url,
            config.health_timeout_s,
            lambda result: self._handle_result(check_id, result),
        )

    def switch_backend(self, use_localhost: bool) -> None:
        """Point the client at the other backend, save the choice and re-check."""
        config = self._client.config
        if config.use_localhost == use_localhost:
            return
        config.use_localhost = use_localhost
        if self._store is not None:
            self._store.set_use_localhost(use_localhost)
        logger.info(f"Backend switched to: {config.base_url()}")
        self._apply(False)
        self.check()

    def stop(self) -> None:
        self._stopped = True

    def _handle_result(self, check_id: int, result: TransportResult) -> None:
        if self._stopped:
            return
        if check_id != self._check_serial:
            logger.debug(f"Dropping stale health result #{check_id}")
            return
        self._apply(decode_health(result))

    def _apply(self, healthy: bool) -> None:
        changed = self._client.is_connected != healthy
        self._client.set_connection_status(healthy)
        if changed and self._on_change:
            self._on_change(healthy)
