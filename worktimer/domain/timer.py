"""
Timer Engine - State transitions for a single task.

Architecture Decision: Pure logic with an injected clock
The engine never persists and never ticks. Running time is recomputed from the
stored start timestamp on every query, so the engine is drift-proof and can be
tested with a simulated clock.
"""

import datetime
from typing import Callable

from worktimer.domain.models import Task, TaskState
from worktimer.utils import format_duration as _format_duration


Clock = Callable[[], datetime.datetime]

STATUS_LABELS = {
    TaskState.RUNNING: "Running",
    TaskState.PAUSED: "Paused",
    TaskState.COMPLETED: "Completed",
    TaskState.IDLE: "Stopped",
}


class TimerEngine:
    """
    Applies start/pause/resume/complete transitions to tasks.

    Every transition returns True if it changed the task and False if the task
    was not in a state that accepts it (the task is left untouched).
    """

    def __init__(self, clock: Clock = datetime.datetime.now):
        self.clock = clock

    def _elapsed(self, task: Task) -> int:
        """Whole seconds since the task was started (never negative)"""
        if task.start_time is None:
            return 0
        elapsed = (self.clock() - task.start_time).total_seconds()
        return max(0, int(elapsed))

    def start(self, task: Task) -> bool:
        if task.state != TaskState.IDLE:
            return False
        task.start_time = self.clock()
        task.state = TaskState.RUNNING
        return True

    def pause(self, task: Task) -> bool:
        if task.state != TaskState.RUNNING:
            return False
        self._accrue(task)
        task.state = TaskState.PAUSED
        return True

    def resume(self, task: Task) -> bool:
        if task.state != TaskState.PAUSED:
            return False
        task.start_time = self.clock()
        task.state = TaskState.RUNNING
        return True

    def toggle_complete(self, task: Task) -> bool:
        """
        Flip a task between completed and not completed.

        A completed task goes back to Paused with its duration unchanged. A
        running task banks its elapsed time first. Anything with no tracked
        time cannot be completed and ends up Idle.
        """
        if task.state == TaskState.COMPLETED:
            task.state = TaskState.PAUSED
            return True

        before = (task.state, task.total_duration)
        if task.state == TaskState.RUNNING:
            self._accrue(task)
        task.state = TaskState.COMPLETED if task.total_duration > 0 else TaskState.IDLE
        return (task.state, task.total_duration) != before

    def _accrue(self, task: Task) -> None:
        task.total_duration += self._elapsed(task)
        task.start_time = None

    def current_duration(self, task: Task) -> int:
        """Accumulated seconds plus the live interval of a running task"""
        return task.total_duration + self._elapsed(task)

    def format_duration(self, task: Task) -> str:
        return _format_duration(self.current_duration(task))

    @staticmethod
    def status_label(task: Task) -> str:
        return STATUS_LABELS[task.state]
