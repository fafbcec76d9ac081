"""SQLite store for the API layer."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from loguru import logger
from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from luxpulse.api.domain.models import Base

# Seconds a writer waits on SQLite's file lock before failing
SQLITE_LOCK_TIMEOUT = 15


class Database:
    """
    SQLite connection manager.

    Opened once at process start and closed at shutdown. Every store mutation
    runs inside one session transaction, which is the synchronisation boundary
    for handlers sharing the store.
    """

    def __init__(self, database_url: str, async_database_url: str):
        """
        Open the store.

        Args:
            database_url: ``sqlite:///`` URL, used to create the schema
            async_database_url: ``sqlite+aiosqlite:///`` URL for request handlers
        """
        self.path = make_url(database_url).database
        if self.path and self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        connect_args = {"timeout": SQLITE_LOCK_TIMEOUT}
        self.schema_engine = create_engine(database_url, connect_args=connect_args)
        self.async_engine = create_async_engine(async_database_url, connect_args=connect_args)
        event.listen(self.async_engine.sync_engine, "connect", _enable_wal)

        self.async_session_factory = async_sessionmaker(
            bind=self.async_engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

        logger.info(f"SQLite store at {self.path}")

    def create_all(self):
        """Create any missing tables."""
        Base.metadata.create_all(bind=self.schema_engine)
        logger.info(f"✓ {len(Base.metadata.tables)} tables ready")

    @asynccontextmanager
    async def get_async_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session whose transaction commits on success and rolls back on error."""
        async with self.async_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def close(self):
        await self.async_engine.dispose()
        self.schema_engine.dispose()
        logger.info("✓ SQLite store closed")


def _enable_wal(dbapi_connection, connection_record):
    # Readers keep going while a ledger append holds the write lock
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped session."""
    from luxpulse.api.infrastructure.container import get_container

    db = get_container().database()
    async with db.get_async_session() as session:
        yield session
