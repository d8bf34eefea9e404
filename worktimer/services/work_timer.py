"""
Work Timer - Application state and command handlers.

Architecture Decision: Explicit state object
The UI owns one WorkTimer and calls its commands. Each command validates its
input, mutates the store/registry, and awaits the snapshot save before it
returns, so commands never interleave. Expected failures come back as a
CommandResult instead of an exception.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from worktimer.domain.models import CommandResult, FailureKind, Task, TaskAction
from worktimer.domain.timer import Clock, TimerEngine
from worktimer.infra.config import Settings
from worktimer.infra.db import DatabaseEngine, init_db
from worktimer.infra.repository import LoadedSnapshot, SnapshotRepository
from worktimer.services.backup_service import BackupService
from worktimer.services.export_service import ExportService
from worktimer.services.folder_registry import FolderRegistry
from worktimer.services.report_service import ReportService
from worktimer.services.statistics_service import StatisticsOverview, StatisticsService
from worktimer.services.task_store import TaskStore

logger = logging.getLogger(__name__)

# Marker for "use the currently selected folder"
SELECTED_FOLDER = object()

_ACTION_VERBS = {
    TaskAction.START: "start",
    TaskAction.PAUSE: "pause",
    TaskAction.RESUME: "resume",
    TaskAction.COMPLETE: "complete",
}


class WorkTimer:
    """
    The time tracking application core.

    Owns the task store and folder registry, and wires them to persistence,
    CSV export, statistics, reports and backups.
    """

    def __init__(self, settings: Settings, db: DatabaseEngine, clock: Optional[Clock] = None):
        self.settings = settings
        self.db = db
        prefs = settings.preferences

        self.engine = TimerEngine(clock) if clock else TimerEngine()
        self.store = TaskStore(self.engine, uncategorized_label=prefs.uncategorized_label)
        self.registry = FolderRegistry()

        self.repo = SnapshotRepository(db)
        self.exporter = ExportService(
            settings.get_export_dir(),
            engine=self.engine,
            include_project_column=prefs.include_project_column,
            uncategorized_label=prefs.uncategorized_label,
        )
        self.stats = StatisticsService(self.store, self.registry)
        self.reports = ReportService()
        self.backups = BackupService(settings.get_backup_dir())

        # Problems found while loading saved data; the UI should show these
        self.load_warnings: List[str] = []

    @classmethod
    async def open(cls, settings: Settings, clock: Optional[Clock] = None) -> "WorkTimer":
        """Connect to the configured database and load the saved workspace"""
        db = await init_db(settings.get_db_url())
        timer = cls(settings, db, clock)
        await timer.load()
        return timer

    async def load(self) -> List[str]:
        snapshot = await self.repo.load()
        self._apply_snapshot(snapshot)
        self.load_warnings = list(snapshot.warnings)
        logger.info(f"Loaded {len(self.store)} tasks and {len(self.registry)} folders")
        return self.load_warnings

    async def close(self):
        await self.db.dispose()

    def _apply_snapshot(self, snapshot: LoadedSnapshot) -> None:
        self.store.load(snapshot.tasks)
        self.registry.load(snapshot.folders, snapshot.styles)

    async def _save(self, result: CommandResult) -> CommandResult:
        """Persist the whole workspace; a failed write keeps the in-memory change"""
        try:
            await self.repo.save(self.store.snapshot(), self.registry.names(), self.registry.styles())
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to save workspace: {e}")
            return CommandResult.fail(
                FailureKind.IO,
                f"{result.message} (changes could not be saved: {e})".strip(),
                value=result.value,
            )
        return result

    def _missing_task(self, task_id: str) -> CommandResult:
        return CommandResult.fail(FailureKind.NOT_FOUND, f"Task {task_id} not found")

    def _missing_folder(self, name: str) -> CommandResult:
        return CommandResult.fail(FailureKind.NOT_FOUND, f"Folder '{name}' not found")

    # --- Task commands ---

    async def create_task(self, description: str, folder=SELECTED_FOLDER) -> CommandResult:
        """
        Create a task in `folder`, or in the selected folder if none is given.

        Returns:
            Result whose value is the new task id
        """
        if folder is SELECTED_FOLDER:
            folder = self.registry.selected
        if folder is not None and folder not in self.registry:
            return CommandResult.fail(FailureKind.VALIDATION, f"Folder '{folder}' does not exist")
        try:
            task_id = self.store.add(description, folder)
        except ValueError as e:
            return CommandResult.fail(FailureKind.VALIDATION, str(e))
        task = self.store.get(task_id)
        logger.info(f"Task created: {task.description!r} in {self.store.folder_label(task)}")
        return await self._save(CommandResult.ok(f"Task '{task.description}' created", value=task_id))

    async def _apply(self, task_id: str, action: TaskAction) -> CommandResult:
        task = self.store.get(task_id)
        if task is None:
            return self._missing_task(task_id)
        verb = _ACTION_VERBS[action]
        if not self.store.apply_action(task_id, action):
            return CommandResult.fail(
                FailureKind.INVALID_TRANSITION,
                f"Cannot {verb} task '{task.description}' while it is {task.state.value}",
            )
        logger.debug(f"Task {task_id} {verb} -> {task.state.value}")
        return await self._save(CommandResult.ok(f"Task '{task.description}' is {task.state.value}", value=task.state))

    async def start_task(self, task_id: str) -> CommandResult:
        return await self._apply(task_id, TaskAction.START)

    async def pause_task(self, task_id: str) -> CommandResult:
        return await self._apply(task_id, TaskAction.PAUSE)

    async def resume_task(self, task_id: str) -> CommandResult:
        return await self._apply(task_id, TaskAction.RESUME)

    async def toggle_task_complete(self, task_id: str) -> CommandResult:
        return await self._apply(task_id, TaskAction.COMPLETE)

    async def delete_task(self, task_id: str) -> CommandResult:
        task = self.store.delete(task_id)
        if task is None:
            return self._missing_task(task_id)
        self.exporter.discard_task_export(task)
        logger.info(f"Task deleted: {task.description!r}")
        return await self._save(CommandResult.ok(f"Task '{task.description}' deleted"))

    async def move_task_to_folder(self, task_id: str, folder: Optional[str]) -> CommandResult:
        """Move a task to a registered folder (None makes it uncategorized)"""
        if task_id not in self.store:
            return self._missing_task(task_id)
        if folder is not None and folder not in self.registry:
            return CommandResult.fail(FailureKind.VALIDATION, f"Folder '{folder}' does not exist")
        self.store.move_to_folder(task_id, folder)
        task = self.store.get(task_id)
        return await self._save(CommandResult.ok(f"Task '{task.description}' moved to {self.store.folder_label(task)}"))

    async def clear_all(self) -> CommandResult:
        """Delete every task and every CSV export"""
        removed = self.store.clear()
        files = self.exporter.discard_all_exports()
        logger.info(f"Cleared {len(removed)} tasks and {files} export files")
        return await self._save(CommandResult.ok(f"Removed {len(removed)} tasks", value=len(removed)))

    # --- Folder commands ---

    async def create_folder(self, name: str) -> CommandResult:
        name = (name or "").strip()
        if not name:
            return CommandResult.fail(FailureKind.VALIDATION, "Folder name must not be empty")
        if not self.registry.add(name):
            return CommandResult.fail(FailureKind.VALIDATION, f"Folder '{name}' already exists")
        logger.info(f"Folder created: {name!r}")
        return await self._save(CommandResult.ok(f"Folder '{name}' created", value=name))

    def select_folder(self, name: Optional[str]) -> CommandResult:
        if not self.registry.select(name):
            return self._missing_folder(name)
        return CommandResult.ok(value=name)

    def _drop_folder_tasks(self, name: str) -> List[Task]:
        removed = self.store.remove_folder_tasks(name)
        for task in removed:
            self.exporter.discard_task_export(task)
        self.exporter.discard_folder_export(name)
        return removed

    async def delete_folder(self, name: str) -> CommandResult:
        """Remove a folder together with its tasks and their exports"""
        if name not in self.registry:
            return self._missing_folder(name)
        removed = self._drop_folder_tasks(name)
        self.registry.remove(name)
        logger.info(f"Folder deleted: {name!r} ({len(removed)} tasks)")
        return await self._save(CommandResult.ok(f"Folder '{name}' deleted", value=len(removed)))

    async def clear_folder(self, name: str) -> CommandResult:
        """Remove a folder's tasks but keep the folder"""
        if name not in self.registry:
            return self._missing_folder(name)
        removed = self._drop_folder_tasks(name)
        logger.info(f"Folder cleared: {name!r} ({len(removed)} tasks)")
        return await self._save(CommandResult.ok(f"Folder '{name}' cleared", value=len(removed)))

    async def clear_all_folders(self) -> CommandResult:
        """Remove every folder; tasks are kept but become orphaned"""
        removed = self.registry.clear()
        return await self._save(CommandResult.ok(f"Removed {len(removed)} folders", value=len(removed)))

    async def reorder_folder(self, name: str, new_index: int) -> CommandResult:
        if not self.registry.reorder(name, new_index):
            return self._missing_folder(name)
        return await self._save(CommandResult.ok(value=self.registry.index_of(name)))

    # --- Exports ---

    def export_all(self) -> CommandResult:
        try:
            path = self.exporter.export_all(self.store.all())
        except OSError as e:
            logger.error(f"Export failed: {e}")
            return CommandResult.fail(FailureKind.IO, f"Export failed: {e}")
        return CommandResult.ok(f"Exported to {path.name}", value=path)

    def export_folder(self, name: str) -> CommandResult:
        if not name or not name.strip():
            return CommandResult.fail(FailureKind.VALIDATION, "Folder name must not be empty")
        try:
            path = self.exporter.export_folder(name, self.store.all())
        except OSError as e:
            logger.error(f"Export of folder {name!r} failed: {e}")
            return CommandResult.fail(FailureKind.IO, f"Export failed: {e}")
        return CommandResult.ok(f"Exported to {path.name}", value=path)

    async def export_task(self, task_id: str) -> CommandResult:
        task = self.store.get(task_id)
        if task is None:
            return self._missing_task(task_id)
        try:
            path = self.exporter.export_task(task)
        except OSError as e:
            logger.error(f"Export of task {task_id} failed: {e}")
            return CommandResult.fail(FailureKind.IO, f"Export failed: {e}")
        # The task now records its export file
        return await self._save(CommandResult.ok(f"Exported to {path.name}", value=path))

    # --- Backups ---

    def create_backup(self) -> CommandResult:
        try:
            path = self.backups.create_backup(
                self.store.snapshot(), self.registry.names(), self.registry.styles()
            )
            self.backups.cleanup_old_backups(self.settings.preferences.backup_retention_count)
        except OSError as e:
            logger.error(f"Backup failed: {e}")
            return CommandResult.fail(FailureKind.IO, f"Backup failed: {e}")
        return CommandResult.ok(f"Backup written to {path.name}", value=path)

    async def restore_backup(self, backup_file: Path) -> CommandResult:
        """Replace the whole workspace with the contents of a backup"""
        try:
            snapshot = self.backups.read_backup(Path(backup_file))
        except FileNotFoundError as e:
            return CommandResult.fail(FailureKind.NOT_FOUND, str(e))
        except ValueError as e:
            return CommandResult.fail(FailureKind.PARSE, str(e))
        except OSError as e:
            return CommandResult.fail(FailureKind.IO, f"Could not read backup: {e}")
        self._apply_snapshot(snapshot)
        return await self._save(CommandResult.ok(f"Restored {len(self.store)} tasks", value=len(self.store)))

    async def import_legacy(self, directory: Path) -> CommandResult:
        """Replace the workspace with data from the legacy JSON files"""
        snapshot = self.backups.import_legacy(Path(directory))
        self._apply_snapshot(snapshot)
        message = f"Imported {len(self.store)} tasks and {len(self.registry)} folders"
        if snapshot.warnings:
            message = f"{message}; {len(snapshot.warnings)} file(s) skipped"
        return await self._save(CommandResult.ok(message, value=snapshot.warnings))

    # --- Queries ---

    def get_task(self, task_id: str) -> Optional[Task]:
        return self.store.get(task_id)

    def list_folders(self) -> List[str]:
        return self.registry.names()

    def tasks_by_folder(self) -> Dict[str, List[str]]:
        return self.store.tasks_by_folder()

    def folder_durations(self) -> List[Tuple[str, int]]:
        return self.stats.folder_durations()

    def average_duration(self) -> int:
        return self.stats.average_duration()

    def project_names(self) -> List[str]:
        return self.stats.project_names()

    def overview(self) -> StatisticsOverview:
        return self.stats.overview()

    def summary_report(self, template_name: Optional[str] = None,
                       output_file: Optional[Path] = None) -> str:
        return self.reports.render_summary(self.overview(), template_name, output_file)
