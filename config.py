"""Backend settings and a simple JSON-based config store."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from interfaces import ConfigStore
from models import Operation

REMOTE_BASE_URL = "https://g4l.thecollabagepatch.com"
LOCAL_BASE_URL = "http://localhost:8000"
LOCAL_EXTEND_URL = "http://localhost:8005"
DEFAULT_POLL_INTERVAL_MS = 3000


@dataclass
class BackendConfig:
    use_localhost: bool = False
    remote_url: str = REMOTE_BASE_URL
    local_url: str = LOCAL_BASE_URL
    local_extend_url: str = LOCAL_EXTEND_URL
    submit_timeout_s: float = 30.0
    poll_timeout_s: float = 10.0
    health_timeout_s: float = 5.0
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    session_timeout_s: float = 30 * 60.0

    @classmethod
    def from_store(cls, store: ConfigStore) -> BackendConfig:
        return cls(
            use_localhost=store.get_use_localhost(),
            poll_interval_ms=store.get_poll_interval_ms(),
        )

    def base_url(self, operation: Optional[Operation] = None) -> str:
        if not self.use_localhost:
            return self.remote_url
        # The text-to-audio service runs as its own process locally.
        if operation == Operation.EXTEND:
            return self.local_extend_url
        return self.local_url

    def service_url(self, path: str, operation: Optional[Operation] = None) -> str:
        return self.base_url(operation).rstrip("/") + path


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "g4l_client" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def get_use_localhost(self) -> bool:
        data = self._read_all()
        return bool(data.get("use_localhost", False))

    def set_use_localhost(self, value: bool) -> None:
        data = self._read_all()
        data["use_localhost"] = bool(value)
        self._write_all(data)

    def get_poll_interval_ms(self) -> int:
        data = self._read_all()
        try:
            value = int(data.get("poll_interval_ms", DEFAULT_POLL_INTERVAL_MS))
        except (TypeError, ValueError):
            return DEFAULT_POLL_INTERVAL_MS
        return value if value > 0 else DEFAULT_POLL_INTERVAL_MS

    def set_poll_interval_ms(self, value: int) -> None:
        data = self._read_all()
        data["poll_interval_ms"] = int(value)
        self._write_all(data)

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
