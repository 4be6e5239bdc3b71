"""
Abstract database adapter interface.

Supports both PostgreSQL and SQLite. Driver errors are translated to
StoreError at this boundary so services only deal with todor errors.
"""

import re
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Any, AsyncIterator


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    Implementations must support:
    - Basic CRUD operations (execute, fetch, fetchrow, fetchval)
    - Row-at-a-time streaming (stream)
    - Atomic multi-statement units (transaction)
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize connection/pool."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close connection/pool."""
        pass

    @abstractmethod
    async def execute(self, query: str, *args) -> str:
        """
        Execute a query and return status.

        Args:
            query: SQL query with $1, $2 placeholders
            *args: Query parameters

        Returns:
            Status string (e.g., "UPDATE 1")
        """
        pass

    @abstractmethod
    async def fetch(self, query: str, *args) -> list[dict]:
        """Fetch multiple rows as list of dicts."""
        pass

    @abstractmethod
    async def fetchrow(self, query: str, *args) -> dict | None:
        """Fetch single row as dict, or None if no results."""
        pass

    @abstractmethod
    async def fetchval(self, query: str, *args) -> Any:
        """Fetch single value."""
        pass

    @abstractmethod
    def stream(self, query: str, *args) -> AsyncIterator[dict]:
        """
        Yield rows one at a time as dicts.

        The iterator is single-pass. Consumers that stop early should close
        it (contextlib.aclosing) so the underlying cursor is released.
        """
        pass

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """
        Async context manager grouping statements into one atomic unit.

        Statements issued by the same task inside the block commit together
        on normal exit and roll back together if the block raises. Nested
        use joins the outer transaction.
        """
        pass

    @property
    @abstractmethod
    def dialect(self) -> str:
        """Either "sqlite" or "postgres"."""
        pass

    @property
    @abstractmethod
    def placeholder_style(self) -> str:
        """
        Return the placeholder style for this adapter.

        Returns:
            "dollar" for PostgreSQL ($1, $2, ...)
            "qmark" for SQLite (?, ?, ...)
        """
        pass

    def format_query(self, query: str) -> str:
        """
        Convert query placeholders to the adapter's style.

        Input uses $1, $2 style (PostgreSQL).
        For SQLite, converts to ? style.
        """
        if self.placeholder_style == "dollar":
            return query

        return re.sub(r'\$\d+', '?', query)

    async def ensure_schema(self) -> None:
        """
        Create schema if needed (PostgreSQL only).
        Default implementation does nothing.
        """
        pass


def rows_affected(status: str) -> int:
    """Parse the row count out of a status string like "UPDATE 1"."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (ValueError, IndexError):
        return 0
