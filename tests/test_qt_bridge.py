"""Tests for the Qt dispatcher and the Qt wiring."""

from __future__ import annotations

import threading
import time
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

QtCore = pytest.importorskip("PySide6.QtCore")

from config import JsonConfigStore  # noqa: E402
from qt_bridge import QtDispatcher  # noqa: E402


@pytest.fixture(scope="module")
def qt_app():  # noqa: ANN201
    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])
    yield app


def _process_until(condition, timeout: float = 2.0) -> None:  # noqa: ANN001
    deadline = time.time() + timeout
    while time.time() < deadline:
        QtCore.QCoreApplication.processEvents()
        if condition():
            return
        time.sleep(0.01)


def test_post_from_worker_runs_on_gui_thread(qt_app) -> None:  # noqa: ANN001
    dispatcher = QtDispatcher()
    seen: list[threading.Thread] = []

    worker = threading.Thread(target=lambda: dispatcher.post(lambda: seen.append(threading.current_thread())))
    worker.start()
    worker.join(timeout=2.0)
    _process_until(lambda: bool(seen))

    assert seen == [threading.main_thread()]


def test_timer_repeats_until_stopped(qt_app) -> None:  # noqa: ANN001
    dispatcher = QtDispatcher()
    ticks: list[int] = []
    timer = dispatcher.create_timer(10, lambda: ticks.append(1))

    assert timer.is_active() is False
    timer.start()
    assert timer.is_active() is True
    _process_until(lambda: len(ticks) >= 2)
    timer.stop()

    assert len(ticks) >= 2
    assert timer.is_active() is False


@patch("transport.requests.get")
def test_create_job_client_runs_health_check(mock_get: MagicMock, qt_app, tmp_path: Path) -> None:  # noqa: ANN001
    from app import create_job_client

    response = MagicMock()
    response.text = '{"status": "live"}'
    response.status_code = 200
    mock_get.return_value = response
    changes: list[bool] = []

    client, health = create_job_client(
        store=JsonConfigStore(path=tmp_path / "config.json"),
        on_connection_change=changes.append,
    )
    _process_until(lambda: bool(changes))
    health.stop()

    assert changes == [True]
    assert client.is_connected is True
    assert mock_get.call_args.args[0] == "https://g4l.thecollabagepatch.com/health"
