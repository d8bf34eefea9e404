"""
Statistics Service - Read-only queries over tasks and folders.

"Current" tasks are uncategorized tasks plus tasks whose folder is still
registered. Tasks pointing at a folder that no longer exists are left out of
every figure.
"""

from datetime import datetime
from typing import Dict, List, Tuple

from pydantic import BaseModel, Field

from worktimer.domain.models import Task
from worktimer.services.folder_registry import FolderLookup, FolderRegistry
from worktimer.services.task_store import TaskStore


class TaskSummary(BaseModel):
    description: str
    folder: str
    duration: int


class StatisticsOverview(BaseModel):
    """Figures shown on the statistics overview and in the summary report"""
    generated_at: datetime = Field(default_factory=datetime.now)
    total_duration: int = 0
    active_count: int = 0
    average_duration: int = 0
    folder_count: int = 0
    task_count: int = 0
    completed_count: int = 0
    folder_durations: List[Tuple[str, int]] = Field(default_factory=list)
    top_tasks: List[TaskSummary] = Field(default_factory=list)


class StatisticsService:
    def __init__(self, store: TaskStore, registry: FolderRegistry):
        self.store = store
        self.registry = registry

    def _duration(self, task: Task) -> int:
        return self.store.engine.current_duration(task)

    def current_tasks(self) -> List[Task]:
        return [t for t in self.store if self.registry.lookup(t.folder) != FolderLookup.ORPHANED]

    def total_duration(self) -> int:
        return sum(self._duration(t) for t in self.current_tasks())

    def active_count(self) -> int:
        return sum(1 for t in self.current_tasks() if t.is_running)

    def completed_count(self) -> int:
        return sum(1 for t in self.current_tasks() if t.is_completed)

    def average_duration(self) -> int:
        tasks = self.current_tasks()
        if not tasks:
            return 0
        return sum(self._duration(t) for t in tasks) // len(tasks)

    def folder_durations(self) -> List[Tuple[str, int]]:
        """
        Total duration per folder, longest first.

        Ties keep the order in which each folder first appears among the
        tasks (the sort is stable over an insertion-ordered dict).
        """
        durations: Dict[str, int] = {}
        for task in self.current_tasks():
            key = self.store.folder_label(task)
            durations[key] = durations.get(key, 0) + self._duration(task)
        return sorted(durations.items(), key=lambda item: item[1], reverse=True)

    def top_tasks(self, limit: int = 5) -> List[TaskSummary]:
        ranked = sorted(self.current_tasks(), key=self._duration, reverse=True)
        return [
            TaskSummary(description=t.description, folder=self.store.folder_label(t), duration=self._duration(t))
            for t in ranked[:limit]
        ]

    def project_names(self) -> List[str]:
        """Sorted distinct folder names carried by tasks ('Default' when there are none)"""
        names = sorted({t.folder for t in self.store if t.folder is not None})
        return names or ["Default"]

    def overview(self) -> StatisticsOverview:
        tasks = self.current_tasks()
        total = sum(self._duration(t) for t in tasks)
        return StatisticsOverview(
            total_duration=total,
            active_count=sum(1 for t in tasks if t.is_running),
            average_duration=total // len(tasks) if tasks else 0,
            folder_count=len(self.registry),
            task_count=len(tasks),
            completed_count=sum(1 for t in tasks if t.is_completed),
            folder_durations=self.folder_durations(),
            top_tasks=self.top_tasks(),
        )
