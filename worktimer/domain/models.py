"""
Domain Models using Pydantic for validation.

Architecture Decision: Why Pydantic?
Snapshots are round-tripped through JSON. Pydantic validates every payload on
load, so a corrupt snapshot is detected instead of half-loaded, and the same
models serialize back without hand-written converters.
"""

import math
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


UNCATEGORIZED = "Uncategorized"


def _legacy_number(value: Any) -> Optional[float]:
    """Numeric value of a legacy field, or None if it is not a finite number"""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    return None


class TaskState(str, Enum):
    """Explicit timer state of a task."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class TaskAction(str, Enum):
    """Timer commands a task accepts."""
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    COMPLETE = "complete"


class FailureKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    INVALID_TRANSITION = "invalid_transition"
    IO = "io"
    PARSE = "parse"


class Task(BaseModel):
    """
    A trackable unit of work.

    The timer state is stored explicitly. `start_time` is present only while
    the task is running; accumulated time lives in `total_duration`.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    description: str = Field(..., min_length=1)
    folder: Optional[str] = None
    total_duration: int = Field(default=0, ge=0)
    start_time: Optional[datetime] = None
    state: TaskState = TaskState.IDLE

    # Last per-task CSV written for this task (file name only)
    export_file: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("description")
    @classmethod
    def _strip_description(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("description must not be blank")
        return value

    @field_validator("start_time")
    @classmethod
    def _to_local_naive(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Timestamps are compared with the naive local wall clock
        if value is not None and value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value

    @model_validator(mode="before")
    @classmethod
    def _derive_legacy_state(cls, data: Any) -> Any:
        """
        Accept snapshots written before the state tag existed.

        Those carry `start_time` and `is_paused` only; completion was implied
        by a positive duration with neither flag set. Negative durations
        (left behind by clock changes) are clamped to zero. A duration that is
        not a number is left for field validation to reject.
        """
        if not isinstance(data, dict) or "state" in data:
            return data
        data = dict(data)
        duration = _legacy_number(data.get("total_duration", 0))
        if duration is not None:
            duration = max(0, int(duration))
            data["total_duration"] = duration
        is_paused = bool(data.pop("is_paused", False))
        if data.get("start_time"):
            data["state"] = TaskState.RUNNING
        elif is_paused:
            data["state"] = TaskState.PAUSED
        elif duration:
            data["state"] = TaskState.COMPLETED
        else:
            data["state"] = TaskState.IDLE
        return data

    @model_validator(mode="after")
    def _check_running_has_start(self) -> "Task":
        if self.state == TaskState.RUNNING and self.start_time is None:
            raise ValueError("a running task needs a start_time")
        if self.state != TaskState.RUNNING and self.start_time is not None:
            raise ValueError("only a running task may carry a start_time")
        return self

    @property
    def is_running(self) -> bool:
        return self.state == TaskState.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.state == TaskState.PAUSED

    @property
    def is_completed(self) -> bool:
        return self.state == TaskState.COMPLETED


class FolderStyle(BaseModel):
    """Per-folder style record. Carries only the folder's name."""
    name: str = Field(..., min_length=1)


class CommandResult(BaseModel):
    """
    Outcome of a command issued by the UI.

    Expected failures are reported here instead of raised.
    """
    success: bool
    message: str = ""
    failure: Optional[FailureKind] = None
    value: Any = None

    @classmethod
    def ok(cls, message: str = "", value: Any = None) -> "CommandResult":
        return cls(success=True, message=message, value=value)

    @classmethod
    def fail(cls, failure: FailureKind, message: str, value: Any = None) -> "CommandResult":
        return cls(success=False, message=message, failure=failure, value=value)
