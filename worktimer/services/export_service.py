"""
CSV Export Service.

Writes full, per-folder and per-task duration reports. All three share the
same header and row layout so a spreadsheet can concatenate them.
"""

import csv
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from worktimer.domain.models import Task, UNCATEGORIZED
from worktimer.domain.timer import TimerEngine
from worktimer.utils import sanitize_filename

logger = logging.getLogger(__name__)

EXPORT_ALL_FILENAME = "work_timer_export.csv"


class ExportService:
    """
    Renders tasks into CSV files inside `export_dir`.

    Filenames:
        work_timer_export.csv            all tasks
        folder_<sanitized name>.csv      one folder
        <sanitized description>[_n].csv  one task
    """

    def __init__(self, export_dir: Path, engine: Optional[TimerEngine] = None,
                 include_project_column: bool = True,
                 uncategorized_label: str = UNCATEGORIZED):
        self.export_dir = Path(export_dir)
        self.engine = engine or TimerEngine()
        self.include_project_column = include_project_column
        self.uncategorized_label = uncategorized_label

    @property
    def header(self) -> List[str]:
        if self.include_project_column:
            return ["Task", "Project", "Duration (HH:MM:SS)", "Status"]
        return ["Task", "Duration (HH:MM:SS)", "Status"]

    def _row(self, task: Task) -> List[str]:
        row = [task.description]
        if self.include_project_column:
            row.append(task.folder if task.folder is not None else self.uncategorized_label)
        row.append(self.engine.format_duration(task))
        row.append(self.engine.status_label(task))
        return row

    def _write(self, path: Path, tasks: Iterable[Task]) -> Path:
        """
        Write header plus one row per task.

        Raises:
            OSError: if the file cannot be written
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(self.header)
            count = 0
            for task in tasks:
                writer.writerow(self._row(task))
                count += 1
        logger.info(f"Exported {count} task(s) to {path}")
        return path

    def folder_filename(self, folder: str) -> str:
        return f"folder_{sanitize_filename(folder)}.csv"

    def export_all(self, tasks: Iterable[Task]) -> Path:
        return self._write(self.export_dir / EXPORT_ALL_FILENAME, tasks)

    def export_folder(self, folder: str, tasks: Iterable[Task]) -> Path:
        """Export the tasks whose folder is exactly `folder`"""
        selected = [t for t in tasks if t.folder == folder]
        return self._write(self.export_dir / self.folder_filename(folder), selected)

    def unique_task_path(self, task: Task) -> Path:
        """
        Pick the file for a single-task export.

        Starts at <sanitized>.csv and appends _1, _2, ... while the name is
        taken. A file this task already owns under the same stem is reused.
        Not safe against concurrent writers.
        """
        stem = sanitize_filename(task.description)
        if task.export_file and self._belongs_to_stem(task.export_file, stem):
            return self.export_dir / task.export_file

        candidate = self.export_dir / f"{stem}.csv"
        counter = 1
        while candidate.exists():
            candidate = self.export_dir / f"{stem}_{counter}.csv"
            counter += 1
        return candidate

    @staticmethod
    def _belongs_to_stem(filename: str, stem: str) -> bool:
        """True for '<stem>.csv' and '<stem>_<n>.csv'"""
        if filename == f"{stem}.csv":
            return True
        prefix, suffix = f"{stem}_", ".csv"
        if not (filename.startswith(prefix) and filename.endswith(suffix)):
            return False
        return filename[len(prefix):-len(suffix)].isdigit()

    def export_task(self, task: Task) -> Path:
        """Export one task and record the file on it"""
        path = self._write(self.unique_task_path(task), [task])
        task.export_file = path.name
        return path

    def _discard(self, path: Path) -> bool:
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Failed to remove export {path}: {e}")
            return False
        logger.info(f"Removed export {path}")
        return True

    def discard_task_export(self, task: Task) -> bool:
        """Best-effort removal of the task's own CSV file"""
        if not task.export_file:
            return False
        return self._discard(self.export_dir / task.export_file)

    def discard_folder_export(self, folder: str) -> bool:
        return self._discard(self.export_dir / self.folder_filename(folder))

    def discard_all_exports(self) -> int:
        """Remove every CSV in the export directory; returns how many were removed"""
        if not self.export_dir.exists():
            return 0
        return sum(1 for path in self.export_dir.glob("*.csv") if self._discard(path))
