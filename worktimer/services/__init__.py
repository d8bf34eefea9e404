"""Services layer - Business logic"""

from .task_store import TaskStore
from .folder_registry import FolderRegistry, FolderLookup
from .export_service import ExportService
from .statistics_service import StatisticsService, StatisticsOverview
from .report_service import ReportService
from .backup_service import BackupService
from .work_timer import WorkTimer

__all__ = [
    "TaskStore", "FolderRegistry", "FolderLookup", "ExportService", "StatisticsService",
    "StatisticsOverview", "ReportService", "BackupService", "WorkTimer",
]
