"""
Database abstraction layer supporting PostgreSQL and SQLite.
"""

from todor.db.factory import close_adapter, create_adapter, get_adapter, init_adapter, reset_adapter
from todor.db.interface import DatabaseAdapter
from todor.db.migrations import initialize_schema

__all__ = [
    "DatabaseAdapter",
    "create_adapter",
    "get_adapter",
    "init_adapter",
    "close_adapter",
    "reset_adapter",
    "initialize_schema",
]
