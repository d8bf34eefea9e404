"""
Task Store - In-memory collection of tasks.

Architecture Decision: Insertion-ordered dict keyed by id
Python dicts keep insertion order, so grouping, exports and statistics are
deterministic without a separate ordering field.
"""

from typing import Dict, Iterator, List, Optional

from worktimer.domain.models import Task, TaskAction, UNCATEGORIZED
from worktimer.domain.timer import TimerEngine


class TaskStore:
    """
    Owns every task and applies timer transitions to them.

    Folder names are stored as given; they are not checked against the
    folder registry here.
    """

    def __init__(self, engine: Optional[TimerEngine] = None, uncategorized_label: str = UNCATEGORIZED):
        self.engine = engine or TimerEngine()
        self.uncategorized_label = uncategorized_label
        self._tasks: Dict[str, Task] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks.values()))

    def all(self) -> List[Task]:
        return list(self._tasks.values())

    def get(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    def add(self, description: str, folder: Optional[str] = None) -> str:
        """
        Create a task and return its id.

        Raises:
            ValueError: if the description is blank
        """
        if not description or not description.strip():
            raise ValueError("Task description must not be empty")
        task = Task(description=description, folder=folder)
        self._tasks[task.id] = task
        return task.id

    def delete(self, task_id: str) -> Optional[Task]:
        """Remove a task; returns it, or None if it did not exist"""
        return self._tasks.pop(task_id, None)

    def move_to_folder(self, task_id: str, folder: Optional[str]) -> bool:
        task = self._tasks.get(task_id)
        if task is None:
            return False
        task.folder = folder
        return True

    def apply_action(self, task_id: str, action: TaskAction) -> bool:
        """
        Dispatch a timer command to the engine.

        Returns:
            True if the task changed state

        Raises:
            KeyError: if no task has this id
        """
        task = self._tasks[task_id]
        if action == TaskAction.START:
            return self.engine.start(task)
        if action == TaskAction.PAUSE:
            return self.engine.pause(task)
        if action == TaskAction.RESUME:
            return self.engine.resume(task)
        if action == TaskAction.COMPLETE:
            return self.engine.toggle_complete(task)
        raise ValueError(f"Unknown task action: {action}")

    def current_duration(self, task_id: str) -> int:
        return self.engine.current_duration(self._tasks[task_id])

    def folder_label(self, task: Task) -> str:
        """Display name of the task's folder"""
        return task.folder if task.folder is not None else self.uncategorized_label

    def tasks_by_folder(self) -> Dict[str, List[str]]:
        """Group task ids by folder name, uncategorized tasks under the uncategorized label"""
        grouped: Dict[str, List[str]] = {}
        for task_id, task in self._tasks.items():
            grouped.setdefault(self.folder_label(task), []).append(task_id)
        return grouped

    def remove_folder_tasks(self, folder: str) -> List[Task]:
        """Remove and return every task that belongs to `folder`"""
        removed = [t for t in self._tasks.values() if t.folder == folder]
        for task in removed:
            del self._tasks[task.id]
        return removed

    def clear(self) -> List[Task]:
        removed = list(self._tasks.values())
        self._tasks.clear()
        return removed

    def snapshot(self) -> Dict[str, Task]:
        return dict(self._tasks)

    def load(self, tasks: Dict[str, Task]) -> None:
        """Replace the whole collection (keys are re-derived from task ids)"""
        self._tasks = {task.id: task for task in tasks.values()}
