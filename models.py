"""Core data models for the job client."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

StatusCallback = Callable[[str, int], None]
ProgressCallback = Callable[[int], None]
AudioCallback = Callable[[str, str], None]
ErrorCallback = Callable[[str], None]
CompleteCallback = Callable[[], None]


class Operation(str, Enum):
    GENERATE = "Generate"
    EXTEND = "Extend"
    TRANSFORM = "Transform"
    CONTINUE = "Continue"
    UNDO = "Undo"


class PollState(str, Enum):
    IDLE = "IDLE"
    POLLING = "POLLING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class ResponseKind(str, Enum):
    SESSION = "session"
    AUDIO = "audio"
    PROGRESS = "progress"
    PENDING = "pending"
    ERROR = "error"
    IGNORE = "ignore"


@dataclass
class CallbackBundle:
    on_status_update: Optional[StatusCallback] = None
    on_progress: Optional[ProgressCallback] = None
    on_audio_received: Optional[AudioCallback] = None
    on_error: Optional[ErrorCallback] = None
    on_operation_complete: Optional[CompleteCallback] = None
    is_transform_operation: bool = False

    def status(self, message: str, duration_ms: int) -> None:
        if self.on_status_update:
            self.on_status_update(message, duration_ms)

    def progress(self, percent: int) -> None:
        if self.on_progress:
            self.on_progress(percent)

    def audio(self, audio_base64: str, session_id: str) -> None:
        if self.on_audio_received:
            self.on_audio_received(audio_base64, session_id)

    def error(self, message: str) -> None:
        if self.on_error:
            self.on_error(message)

    def complete(self) -> None:
        if self.on_operation_complete:
            self.on_operation_complete()


@dataclass
class GenerateParams:
    audio_base64: str
    prompt_duration: int
    model_index: int = 0
    description: str = ""


@dataclass
class ExtendParams:
    prompt_text: str
    steps: int = 8
    cfg_scale: float = 1.0
    generate_as_loop: bool = False
    loop_type: str = "auto"


@dataclass
class TransformParams:
    audio_base64: str
    flowstep: float = 0.13
    use_midpoint_solver: bool = False
    variation_index: int = -1
    custom_prompt: str = ""


@dataclass
class ContinueParams:
    audio_base64: str
    prompt_duration: int
    description: str = ""


@dataclass
class UndoParams:
    session_id: str


@dataclass
class Session:
    session_id: str
    callbacks: CallbackBundle
    is_polling: bool = True
    started_at: float = 0.0


@dataclass
class TransportResult:
    ok: bool
    text: str = ""
    status_code: int = 0


@dataclass
class Decision:
    """Classified backend envelope, applied to a CallbackBundle by the caller."""

    kind: str
    message: str = ""
    session_id: str = ""
    audio_base64: str = ""
    progress: int = 0
    status_ms: int = 2000
    notify_complete: bool = False
