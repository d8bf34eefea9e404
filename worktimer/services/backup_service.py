"""
Backup Service - Handles workspace export and import functionality.

Architecture Decision: Why JSON for backups?
- Human-readable format for easy inspection and manual edits
- Cross-platform compatible
- Same layout as the legacy tasks.json / folders.json / folder_styles.json
  files, which can be imported as well
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any, List
import logging

from pydantic import ValidationError

from worktimer.domain.models import Task, FolderStyle
from worktimer.infra.repository import (
    LoadedSnapshot, TASKS_ADAPTER, FOLDERS_ADAPTER, STYLES_ADAPTER,
)

logger = logging.getLogger(__name__)

LEGACY_TASKS_FILE = "tasks.json"
LEGACY_FOLDERS_FILE = "folders.json"
LEGACY_STYLES_FILE = "folder_styles.json"


class BackupService:
    """
    Handles workspace backup (export) and restore (import) operations.

    Backup naming convention: worktimer_backup_YYYY-MM-DD_HHMMSS.json
    """

    BACKUP_PREFIX = "worktimer_backup_"
    BACKUP_EXTENSION = ".json"
    FORMAT_VERSION = "1.0"

    def __init__(self, backup_dir: Path):
        self.backup_dir = Path(backup_dir)

    def _generate_backup_filename(self) -> str:
        """Generate a timestamped backup filename"""
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        return f"{self.BACKUP_PREFIX}{timestamp}{self.BACKUP_EXTENSION}"

    def _parse_backup_date(self, filename: str) -> Optional[datetime]:
        """Extract datetime from backup filename"""
        try:
            # Remove prefix and extension
            date_part = filename.replace(self.BACKUP_PREFIX, "").replace(self.BACKUP_EXTENSION, "")
            return datetime.strptime(date_part, "%Y-%m-%d_%H%M%S")
        except ValueError:
            return None

    def create_backup(self, tasks: Dict[str, Task], folders: List[str],
                      styles: Dict[str, FolderStyle]) -> Path:
        """
        Write a full backup of the workspace.

        Returns:
            Path to the created backup file
        """
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        backup_file = self.backup_dir / self._generate_backup_filename()

        backup_data = {
            "version": self.FORMAT_VERSION,
            "created_at": datetime.now().isoformat(),
            "app_name": "WorkTimer",
            "data": {
                "tasks": TASKS_ADAPTER.dump_python(tasks, mode="json"),
                "folders": FOLDERS_ADAPTER.dump_python(folders, mode="json"),
                "folder_styles": STYLES_ADAPTER.dump_python(styles, mode="json"),
            }
        }

        with open(backup_file, 'w', encoding='utf-8') as f:
            json.dump(backup_data, f, indent=2, ensure_ascii=False)

        logger.info(f"Backup created: {backup_file}")
        return backup_file

    def read_backup(self, backup_file: Path) -> LoadedSnapshot:
        """
        Read a backup file.

        Raises:
            FileNotFoundError: if the file does not exist
            ValueError: if the file is not a valid backup
        """
        if not backup_file.exists():
            raise FileNotFoundError(f"Backup file not found: {backup_file}")

        with open(backup_file, 'r', encoding='utf-8') as f:
            try:
                backup_data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Backup file is not valid JSON: {e}") from e

        # Validate backup format
        if not isinstance(backup_data, dict) or "version" not in backup_data or "data" not in backup_data:
            raise ValueError("Invalid backup file format")

        data = backup_data["data"]
        if not isinstance(data, dict):
            raise ValueError("Invalid backup file format")
        try:
            snapshot = LoadedSnapshot(
                tasks=TASKS_ADAPTER.validate_python(data.get("tasks", {})),
                folders=FOLDERS_ADAPTER.validate_python(data.get("folders", [])),
                styles=STYLES_ADAPTER.validate_python(data.get("folder_styles", {})),
            )
        except ValidationError as e:
            raise ValueError(f"Backup contents are invalid: {e}") from e

        logger.info(f"Backup read: {len(snapshot.tasks)} tasks, {len(snapshot.folders)} folders")
        return snapshot

    def import_legacy(self, directory: Path) -> LoadedSnapshot:
        """
        Read the three JSON files written by the legacy desktop app.

        Each file is read independently. A missing file gives an empty
        collection; an unreadable one gives an empty collection and a warning.
        """
        directory = Path(directory)
        snapshot = LoadedSnapshot()
        sources = (
            ("tasks", LEGACY_TASKS_FILE, TASKS_ADAPTER),
            ("folders", LEGACY_FOLDERS_FILE, FOLDERS_ADAPTER),
            ("styles", LEGACY_STYLES_FILE, STYLES_ADAPTER),
        )
        for attr, filename, adapter in sources:
            path = directory / filename
            if not path.exists():
                continue
            try:
                setattr(snapshot, attr, adapter.validate_json(path.read_bytes()))
            except (OSError, ValidationError) as e:
                message = f"Skipped legacy file {path}: {e}"
                logger.warning(message)
                snapshot.warnings.append(message)
        logger.info(f"Legacy import read {len(snapshot.tasks)} tasks from {directory}")
        return snapshot

    def list_backups(self) -> List[Dict[str, Any]]:
        """
        List all available backups in the backup directory.

        Returns:
            List of backup info dictionaries sorted by date (newest first)
        """
        backups = []
        if not self.backup_dir.exists():
            return backups

        for file in self.backup_dir.glob(f"{self.BACKUP_PREFIX}*{self.BACKUP_EXTENSION}"):
            backup_date = self._parse_backup_date(file.name)
            if backup_date:
                file_size = file.stat().st_size
                backups.append({
                    "filename": file.name,
                    "path": str(file),
                    "date": backup_date,
                    "size_bytes": file_size,
                    "size_human": self._format_size(file_size)
                })

        # Sort by date, newest first
        backups.sort(key=lambda x: (x["date"], x["filename"]), reverse=True)
        return backups

    def _format_size(self, size_bytes: float) -> str:
        """Format file size in human-readable format"""
        for unit in ['B', 'KB', 'MB', 'GB']:
            if size_bytes < 1024:
                return f"{size_bytes:.1f} {unit}"
            size_bytes /= 1024
        return f"{size_bytes:.1f} TB"

    def cleanup_old_backups(self, keep_count: int = 5) -> int:
        """
        Remove old backups, keeping only the most recent ones.

        Returns:
            Number of removed backups
        """
        backups = self.list_backups()

        if len(backups) <= keep_count:
            return 0

        removed = 0
        for backup in backups[keep_count:]:
            try:
                Path(backup["path"]).unlink()
                removed += 1
                logger.info(f"Removed old backup: {backup['filename']}")
            except OSError as e:
                logger.warning(f"Failed to remove backup {backup['filename']}: {e}")
        return removed
