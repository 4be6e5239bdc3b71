"""
SQLite database adapter using aiosqlite.

All statements share one connection. Writes and transactions are serialized
with an asyncio lock; statements issued from inside a transaction by the
task that opened it skip the lock and are committed once at the end.
"""

import asyncio
import logging
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path
from typing import Any, AsyncIterator, List, Optional

import aiosqlite

from todor.db.interface import DatabaseAdapter
from todor.errors import StoreError

logger = logging.getLogger(__name__)

# Rows pulled per round trip while streaming
STREAM_CHUNK_SIZE = 64


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite adapter.

    Uses aiosqlite for async database operations.
    Automatically creates the database file and parent directories.
    """

    def __init__(self, db_path: str = "~/.todor/todor.db"):
        """
        Initialize SQLite adapter.

        Args:
            db_path: Path to SQLite database file.
                    Supports ~ expansion for home directory.
        """
        self.db_path = Path(db_path).expanduser()
        self._conn: Optional[aiosqlite.Connection] = None
        self._lock = asyncio.Lock()
        self._tx_owner: Optional[asyncio.Task] = None

    @contextmanager
    def _driver_errors(self):
        try:
            yield
        except (aiosqlite.Error, OSError) as e:
            raise StoreError(f"SQLite error: {e}") from e

    async def connect(self) -> None:
        """Initialize database connection and create file if needed."""
        if self._conn is not None:
            return

        with self._driver_errors():
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            # Connect (creates file if doesn't exist)
            self._conn = await aiosqlite.connect(str(self.db_path))
            await self._conn.execute("PRAGMA foreign_keys = ON")

            # Use WAL mode for better concurrent access
            await self._conn.execute("PRAGMA journal_mode = WAL")

        self._conn.row_factory = aiosqlite.Row
        logger.info(f"SQLite database connected: {self.db_path}")

    async def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite connection closed")

    async def _get_conn(self) -> aiosqlite.Connection:
        """Get or create connection."""
        if self._conn is None:
            await self.connect()
        return self._conn

    def _owns_transaction(self) -> bool:
        return self._tx_owner is not None and self._tx_owner is asyncio.current_task()

    @asynccontextmanager
    async def _exclusive(self):
        """Hold the connection lock unless this task already owns a transaction."""
        if self._owns_transaction():
            yield
        else:
            async with self._lock:
                yield

    async def execute(self, query: str, *args) -> str:
        """Execute query and return status."""
        conn = await self._get_conn()
        query = self.format_query(query)

        async with self._exclusive():
            in_transaction = self._owns_transaction()
            try:
                with self._driver_errors():
                    cursor = await conn.execute(query, args)
                    if not in_transaction:
                        await conn.commit()
            except StoreError:
                # Leave the enclosing transaction (if any) to decide
                if not in_transaction:
                    await conn.rollback()
                raise

        # Return a status string similar to PostgreSQL
        verb = query.strip().split(None, 1)[0].upper() if query.strip() else ""
        if verb == "INSERT":
            return f"INSERT 0 {cursor.rowcount}"
        elif verb in ("UPDATE", "DELETE"):
            return f"{verb} {cursor.rowcount}"
        return "OK"

    async def fetch(self, query: str, *args) -> List[dict]:
        """Fetch rows as list of dicts."""
        conn = await self._get_conn()
        query = self.format_query(query)

        async with self._exclusive():
            with self._driver_errors():
                cursor = await conn.execute(query, args)
                rows = await cursor.fetchall()

        return [dict(row) for row in rows]

    async def fetchrow(self, query: str, *args) -> Optional[dict]:
        """Fetch single row as dict."""
        conn = await self._get_conn()
        query = self.format_query(query)

        async with self._exclusive():
            with self._driver_errors():
                cursor = await conn.execute(query, args)
                row = await cursor.fetchone()

        return dict(row) if row else None

    async def fetchval(self, query: str, *args) -> Any:
        """Fetch single value."""
        conn = await self._get_conn()
        query = self.format_query(query)

        async with self._exclusive():
            with self._driver_errors():
                cursor = await conn.execute(query, args)
                row = await cursor.fetchone()

        if row:
            return row[0]
        return None

    async def stream(self, query: str, *args) -> AsyncIterator[dict]:
        """
        Yield rows one at a time.

        Rows are pulled in small chunks; the lock is only held while talking
        to the driver, never while the consumer has a row.
        """
        conn = await self._get_conn()
        query = self.format_query(query)

        async with self._exclusive():
            with self._driver_errors():
                cursor = await conn.execute(query, args)

        try:
            while True:
                async with self._exclusive():
                    with self._driver_errors():
                        rows = await cursor.fetchmany(STREAM_CHUNK_SIZE)
                if not rows:
                    break
                for row in rows:
                    yield dict(row)
        finally:
            await cursor.close()

    @asynccontextmanager
    async def transaction(self):
        """
        Run the block atomically on the shared connection.

        BEGIN IMMEDIATE takes the database write lock up front, so DDL is
        covered too and other connections to the same file wait instead of
        working from a stale snapshot.
        """
        if self._owns_transaction():
            yield
            return

        conn = await self._get_conn()
        async with self._lock:
            self._tx_owner = asyncio.current_task()
            try:
                with self._driver_errors():
                    await conn.execute("BEGIN IMMEDIATE")
                yield
                with self._driver_errors():
                    await conn.commit()
            except BaseException:
                logger.debug("Rolling back SQLite transaction")
                await conn.rollback()
                raise
            finally:
                self._tx_owner = None

    @property
    def dialect(self) -> str:
        return "sqlite"

    @property
    def placeholder_style(self) -> str:
        """SQLite uses ? style placeholders."""
        return "qmark"
