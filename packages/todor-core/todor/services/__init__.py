"""
Business logic services for todor.
"""

from todor.services.search import SearchService
from todor.services.store import TodoStore
from todor.services.todos import TodoService

__all__ = [
    "TodoStore",
    "TodoService",
    "SearchService",
]
