"""
Error taxonomy for todor.

Services never swallow these; they tag them with the operation that failed
and let them propagate to the caller.
"""

from contextlib import contextmanager
from typing import Iterator, Optional


class TodoError(Exception):
    """Base class for all todor errors."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.operation = operation

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation}: {self.message}"
        return self.message


class NotFound(TodoError):
    """No record matches the given id."""

    def __init__(self, todo_id: str, operation: Optional[str] = None):
        super().__init__(f"Todo not found: {todo_id}", operation)
        self.todo_id = todo_id


class StoreError(TodoError):
    """Connectivity, constraint, or I/O failure in the persistence layer."""


class DeserializationError(TodoError):
    """Stored data could not be decoded (corrupt archival marker or chain)."""


class InvalidTransition(TodoError):
    """An archival state change that the lineage state machine forbids."""


@contextmanager
def operation(name: str) -> Iterator[None]:
    """Tag any TodoError raised inside the block with the operation name."""
    try:
        yield
    except TodoError as e:
        if e.operation is None:
            e.operation = name
        raise
