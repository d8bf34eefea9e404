"""Infrastructure layer - Database, persistence and configuration"""

from .db import DatabaseEngine, SnapshotModel, init_db
from .repository import SnapshotRepository, LoadedSnapshot

__all__ = ["DatabaseEngine", "SnapshotModel", "init_db", "SnapshotRepository", "LoadedSnapshot"]
