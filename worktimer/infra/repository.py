"""
Repository Pattern Implementation.

Architecture Decision: Why whole-value snapshots?
The workspace is small (a few thousand tasks at most), so every mutation
rewrites each collection as a single JSON payload. There is no diffing and no
batching. All three rows are written in one transaction, which replaces the
whole snapshot atomically.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from worktimer.domain.models import Task, FolderStyle
from worktimer.infra.db import DatabaseEngine, SnapshotModel

logger = logging.getLogger(__name__)

TASKS_SNAPSHOT = "tasks"
FOLDERS_SNAPSHOT = "folders"
STYLES_SNAPSHOT = "folder_styles"

QUARANTINE_MARKER = ".corrupt."

TASKS_ADAPTER = TypeAdapter(Dict[str, Task])
FOLDERS_ADAPTER = TypeAdapter(List[str])
STYLES_ADAPTER = TypeAdapter(Dict[str, FolderStyle])


class LoadedSnapshot(BaseModel):
    """The three collections read back from storage, plus any load warnings"""
    tasks: Dict[str, Task] = Field(default_factory=dict)
    folders: List[str] = Field(default_factory=list)
    styles: Dict[str, FolderStyle] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)


class SnapshotRepository:
    """
    Persists and restores the task collection, folder order and folder styles.

    Each collection is loaded independently: a corrupt tasks payload does not
    prevent the folders from loading.
    """

    def __init__(self, engine: DatabaseEngine):
        self.engine = engine

    async def save(self, tasks: Dict[str, Task], folders: List[str],
                   styles: Dict[str, FolderStyle]) -> None:
        """
        Rewrite all three snapshots in a single transaction.

        Raises:
            SQLAlchemyError: if the database cannot be written
        """
        payloads = {
            TASKS_SNAPSHOT: TASKS_ADAPTER.dump_json(tasks).decode("utf-8"),
            FOLDERS_SNAPSHOT: FOLDERS_ADAPTER.dump_json(folders).decode("utf-8"),
            STYLES_SNAPSHOT: STYLES_ADAPTER.dump_json(styles).decode("utf-8"),
        }
        now = datetime.now()
        async with self.engine.get_session() as session:
            async with session.begin():
                for name, payload in payloads.items():
                    await session.merge(SnapshotModel(name=name, payload=payload, saved_at=now))
        logger.debug(f"Snapshot saved: {len(tasks)} tasks, {len(folders)} folders")

    async def load(self) -> LoadedSnapshot:
        """
        Read every snapshot.

        A missing row yields an empty collection. A payload that fails
        validation also yields an empty collection, but is reported in
        `warnings` and kept aside in a quarantine row.
        """
        snapshot = LoadedSnapshot()
        try:
            async with self.engine.get_session() as session:
                rows = {
                    name: await session.get(SnapshotModel, name)
                    for name in (TASKS_SNAPSHOT, FOLDERS_SNAPSHOT, STYLES_SNAPSHOT)
                }
        except SQLAlchemyError as e:
            message = f"Could not read saved data, starting empty: {e}"
            logger.error(message)
            snapshot.warnings.append(message)
            return snapshot

        snapshot.tasks = await self._parse(rows[TASKS_SNAPSHOT], TASKS_ADAPTER, dict, snapshot.warnings)
        snapshot.folders = await self._parse(rows[FOLDERS_SNAPSHOT], FOLDERS_ADAPTER, list, snapshot.warnings)
        snapshot.styles = await self._parse(rows[STYLES_SNAPSHOT], STYLES_ADAPTER, dict, snapshot.warnings)
        return snapshot

    async def _parse(self, row: Optional[SnapshotModel], adapter: TypeAdapter, empty, warnings: List[str]):
        if row is None:
            return empty()
        try:
            return adapter.validate_json(row.payload)
        except ValidationError as e:
            quarantine = await self._quarantine(row)
            message = f"Saved '{row.name}' data is corrupt and was not loaded ({e.error_count()} errors); "
            if quarantine:
                message += f"raw payload kept as '{quarantine}'"
            else:
                message += "the raw payload could not be preserved and will be lost on the next save"
            logger.warning(message)
            warnings.append(message)
            return empty()

    async def _quarantine(self, row: SnapshotModel) -> Optional[str]:
        """
        Copy an unreadable payload to a side row so the next save cannot destroy it.

        Returns:
            The side row's name, or None if it could not be written
        """
        name = f"{row.name}{QUARANTINE_MARKER}{datetime.now().strftime('%Y%m%d%H%M%S%f')}"
        try:
            async with self.engine.get_session() as session:
                async with session.begin():
                    session.add(SnapshotModel(name=name, payload=row.payload, saved_at=datetime.now()))
        except SQLAlchemyError as e:
            logger.error(f"Failed to quarantine corrupt '{row.name}' snapshot: {e}")
            return None
        return name

    async def quarantined(self) -> List[str]:
        """Names of quarantined snapshot rows"""
        async with self.engine.get_session() as session:
            result = await session.execute(
                select(SnapshotModel.name).where(SnapshotModel.name.contains(QUARANTINE_MARKER))
            )
            return sorted(result.scalars().all())

    async def write_raw(self, name: str, payload: str) -> None:
        """Store a payload verbatim (used by maintenance scripts and tests)"""
        async with self.engine.get_session() as session:
            async with session.begin():
                await session.merge(SnapshotModel(name=name, payload=payload, saved_at=datetime.now()))
