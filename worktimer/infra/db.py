"""
SQLAlchemy database models and configuration.

Architecture Decision: Why SQLAlchemy?
- A transaction makes each snapshot save atomic: a crash mid-write leaves the
  previous snapshot intact and all collections in agreement
- Supports async operations for non-blocking database access
- SQLite keeps the whole workspace in a single local file
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, DateTime, Text


# Base class for all models
class Base(DeclarativeBase):
    pass


class SnapshotModel(Base):
    """
    One whole-value snapshot of a collection, stored as a JSON payload.

    Rows are keyed by collection name ("tasks", "folders", "folder_styles").
    """
    __tablename__ = "snapshots"

    name: Mapped[str] = mapped_column(String(100), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    saved_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, nullable=False)


class DatabaseEngine:
    """
    Manages database connection and session lifecycle.

    Owned by the composition root; tests create one per temporary database.
    """

    def __init__(self, db_url: str):
        self.db_url = db_url
        self.engine = create_async_engine(db_url, echo=False)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    async def create_tables(self):
        """Create all tables in the database"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    def get_session(self) -> AsyncSession:
        """Get a new database session"""
        return self.session_factory()

    async def dispose(self):
        await self.engine.dispose()


async def init_db(db_url: str) -> DatabaseEngine:
    """Create an engine for db_url and make sure its tables exist"""
    engine = DatabaseEngine(db_url)
    await engine.create_tables()
    return engine
