"""
Record store for todor.

Persistence primitives over the todos table. Works across PostgreSQL and
SQLite; sorting and filtering belong to the callers.
"""

import logging
from contextlib import aclosing
from datetime import datetime
from typing import AsyncIterator

from todor.db import get_adapter
from todor.db.interface import rows_affected
from todor.errors import InvalidTransition, NotFound, StoreError
from todor.models.archival import Archival
from todor.models.todo import TodoRecord

logger = logging.getLogger(__name__)

COLUMNS = "id, text, done, created_at, archival"


class TodoStore:
    """
    CRUD primitives for todo records.

    No record is ever deleted; text is written once on insert.
    """

    def __init__(self, adapter=None):
        """
        Initialize the store.

        Args:
            adapter: Optional DatabaseAdapter. If not provided, uses global adapter.
        """
        self._adapter = adapter

    @property
    def adapter(self):
        """Get the database adapter."""
        if self._adapter is None:
            self._adapter = get_adapter()
        return self._adapter

    def _table_name(self) -> str:
        """Get the full table name."""
        if self.adapter.dialect == "postgres":
            return "todor.todos"
        return "todos"

    def _timestamp(self, value: datetime):
        if self.adapter.placeholder_style == "qmark":
            return value.isoformat()
        return value

    def transaction(self):
        """Group store calls into one atomic unit."""
        return self.adapter.transaction()

    async def insert(self, record: TodoRecord) -> None:
        """
        Persist a new record.

        Raises:
            StoreError: On duplicate id or I/O failure
        """
        table = self._table_name()
        status = await self.adapter.execute(
            f"""
            INSERT INTO {table} ({COLUMNS})
            VALUES ($1, $2, $3, $4, $5)
            """,
            record.id, record.text, record.done,
            self._timestamp(record.created_at), record.archival.encode(),
        )
        if rows_affected(status) != 1:
            raise StoreError(f"Insert of {record.id} affected no rows")
        logger.debug(f"Inserted todo {record.id}")

    async def _update_one(self, todo_id: str, column: str, value) -> None:
        table = self._table_name()
        status = await self.adapter.execute(
            f"UPDATE {table} SET {column} = $1 WHERE id = $2",
            value, todo_id,
        )
        if rows_affected(status) == 0:
            raise NotFound(todo_id)

    async def update_done(self, todo_id: str, done: bool) -> None:
        """
        Set the completion flag of one record.

        Raises:
            NotFound: If no record has this id
        """
        await self._update_one(todo_id, "done", done)

    async def update_archival(
        self,
        todo_id: str,
        archival: Archival,
        expected: Archival | None = None,
    ) -> None:
        """
        Set the archival marker of one record.

        Args:
            todo_id: Record to update
            archival: New marker
            expected: If given, only update while the stored marker still
                equals this value (checked by the UPDATE itself)

        Raises:
            NotFound: If no record has this id
            InvalidTransition: If the stored marker no longer equals expected
        """
        if expected is None:
            await self._update_one(todo_id, "archival", archival.encode())
            return

        table = self._table_name()
        status = await self.adapter.execute(
            f"UPDATE {table} SET archival = $1 WHERE id = $2 AND archival = $3",
            archival.encode(), todo_id, expected.encode(),
        )
        if rows_affected(status) == 0:
            current = await self.get(todo_id)
            raise InvalidTransition(
                f"Todo {todo_id} is {current.archival!r}, expected {expected!r}"
            )

    async def get(self, todo_id: str) -> TodoRecord:
        """
        Fetch one record by id.

        Raises:
            NotFound: If no record has this id
        """
        table = self._table_name()
        row = await self.adapter.fetchrow(
            f"SELECT {COLUMNS} FROM {table} WHERE id = $1", todo_id
        )
        if row is None:
            raise NotFound(todo_id)
        return TodoRecord.from_dict(row)

    async def fetch_all(self) -> list[TodoRecord]:
        """Every record, in storage order."""
        table = self._table_name()
        rows = await self.adapter.fetch(f"SELECT {COLUMNS} FROM {table}")
        return [TodoRecord.from_dict(row) for row in rows]

    async def fetch_streaming(self) -> AsyncIterator[TodoRecord]:
        """Every record, one at a time, in storage order. Single pass."""
        table = self._table_name()
        async with aclosing(self.adapter.stream(f"SELECT {COLUMNS} FROM {table}")) as rows:
            async for row in rows:
                yield TodoRecord.from_dict(row)
