"""
Todor Core Library

Versioned personal todo notes with support for PostgreSQL and SQLite.
"""

__version__ = "0.1.0"

from todor.config import TodorConfig, load_config
from todor.db import DatabaseAdapter, get_adapter, initialize_schema
from todor.display import render
from todor.errors import DeserializationError, InvalidTransition, NotFound, StoreError, TodoError
from todor.models import Archival, TodoRecord
from todor.services import SearchService, TodoService, TodoStore

__all__ = [
    "load_config",
    "TodorConfig",
    "get_adapter",
    "initialize_schema",
    "DatabaseAdapter",
    "TodoRecord",
    "Archival",
    "TodoStore",
    "TodoService",
    "SearchService",
    "render",
    "TodoError",
    "NotFound",
    "StoreError",
    "DeserializationError",
    "InvalidTransition",
]
