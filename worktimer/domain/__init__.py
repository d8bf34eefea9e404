"""Domain layer - Pure business entities and logic"""

from .models import Task, TaskState, TaskAction, FolderStyle, CommandResult, FailureKind, UNCATEGORIZED
from .timer import TimerEngine

__all__ = [
    "Task", "TaskState", "TaskAction", "FolderStyle", "CommandResult", "FailureKind",
    "UNCATEGORIZED", "TimerEngine",
]
