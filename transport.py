"""HTTP transport running each request on its own worker thread.

Results are handed back through the dispatcher so that ``on_done`` always
runs on the UI thread. A received body counts as success whatever the HTTP
status; the backend reports failures inside the JSON envelope.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, Callable

import requests

from interfaces import Dispatcher, ResultCallback
from models import TransportResult

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class RequestsTransport:
    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    def post_json(
        self,
        url: str,
        body: dict[str, Any],
        timeout_s: float,
        on_done: ResultCallback,
    ) -> threading.Thread:
        payload = json.dumps(body)
        return self._launch(lambda: self._post(url, payload, timeout_s), on_done)

    def get(self, url: str, timeout_s: float, on_done: ResultCallback) -> threading.Thread:
        return self._launch(lambda: self._get(url, timeout_s), on_done)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _launch(
        self,
        request: Callable[[], TransportResult],
        on_done: ResultCallback,
    ) -> threading.Thread:
        def _worker() -> None:
            result = request()
            self._dispatcher.post(lambda: on_done(result))

        thread = threading.Thread(target=_worker, daemon=True)
        thread.start()
        return thread

    def _post(self, url: str, payload: str, timeout_s: float) -> TransportResult:
        started = time.monotonic()
        try:
            response = requests.post(url, data=payload, headers=JSON_HEADERS, timeout=timeout_s)
        except requests.RequestException as exc:
            logger.warning(f"POST {url} failed: {exc}")
            return TransportResult(ok=False)
        logger.debug(f"POST {url} -> {response.status_code} in {(time.monotonic() - started) * 1000:.0f}ms")
        return TransportResult(ok=True, text=response.text, status_code=response.status_code)

    def _get(self, url: str, timeout_s: float) -> TransportResult:
        try:
            response = requests.get(url, headers=JSON_HEADERS, timeout=timeout_s)
        except requests.RequestException as exc:
            logger.warning(f"GET {url} failed: {exc}")
            return TransportResult(ok=False)
        logger.debug(f"GET {url} -> {response.status_code}")
        return TransportResult(ok=True, text=response.text, status_code=response.status_code)
