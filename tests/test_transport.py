"""Tests for RequestsTransport."""

from __future__ import annotations

import json
import threading
from unittest.mock import MagicMock, patch

import requests

from fakes import ManualDispatcher
from models import TransportResult
from transport import RequestsTransport


def _response(text: str, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.text = text
    response.status_code = status_code
    return response


def _run(thread: threading.Thread, dispatcher: ManualDispatcher) -> None:
    thread.join(timeout=3.0)
    dispatcher.run_pending()


@patch("transport.requests.post")
def test_post_sends_json_and_delivers_on_dispatcher(mock_post: MagicMock) -> None:
    mock_post.return_value = _response('{"success": true}')
    dispatcher = ManualDispatcher()
    transport = RequestsTransport(dispatcher)
    results: list[TransportResult] = []

    thread = transport.post_json("http://backend/api", {"a": 1}, 30.0, results.append)
    thread.join(timeout=3.0)

    assert results == []  # nothing until the UI thread drains the queue
    dispatcher.run_pending()

    assert results == [TransportResult(ok=True, text='{"success": true}', status_code=200)]
    args, kwargs = mock_post.call_args
    assert args == ("http://backend/api",)
    assert json.loads(kwargs["data"]) == {"a": 1}
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert kwargs["timeout"] == 30.0


@patch("transport.requests.post")
def test_http_error_status_still_counts_as_response(mock_post: MagicMock) -> None:
    mock_post.return_value = _response('{"success": false, "error": "bad"}', status_code=500)
    dispatcher = ManualDispatcher()
    results: list[TransportResult] = []

    _run(RequestsTransport(dispatcher).post_json("http://backend/api", {}, 30.0, results.append), dispatcher)

    assert results[0].ok is True
    assert results[0].status_code == 500


@patch("transport.requests.post")
def test_connection_error_becomes_failed_result(mock_post: MagicMock) -> None:
    mock_post.side_effect = requests.ConnectionError("refused")
    dispatcher = ManualDispatcher()
    results: list[TransportResult] = []

    _run(RequestsTransport(dispatcher).post_json("http://backend/api", {}, 30.0, results.append), dispatcher)

    assert results == [TransportResult(ok=False, text="", status_code=0)]


@patch("transport.requests.get")
def test_get_timeout_becomes_failed_result(mock_get: MagicMock) -> None:
    mock_get.side_effect = requests.Timeout("slow")
    dispatcher = ManualDispatcher()
    results: list[TransportResult] = []

    _run(RequestsTransport(dispatcher).get("http://backend/poll/abc", 10.0, results.append), dispatcher)

    assert results == [TransportResult(ok=False)]
    assert mock_get.call_args.kwargs["timeout"] == 10.0


@patch("transport.requests.get")
def test_callback_runs_on_draining_thread(mock_get: MagicMock) -> None:
    mock_get.return_value = _response('{"status": "live"}')
    dispatcher = ManualDispatcher()
    seen: list[threading.Thread] = []

    thread = RequestsTransport(dispatcher).get("http://backend/health", 5.0, lambda r: seen.append(threading.current_thread()))
    _run(thread, dispatcher)

    assert seen == [threading.current_thread()]
