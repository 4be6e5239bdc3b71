"""
Core data models for todor.
"""

from todor.models.archival import Archival, ArchivalState
from todor.models.todo import TodoRecord

__all__ = [
    "TodoRecord",
    "Archival",
    "ArchivalState",
]
