"""
Search Service for todor.

Substring search over the canonical text of every record (id, text, flag,
timestamp and archival marker), streamed so a small cap stops the scan early.
"""

import logging
from contextlib import aclosing

from todor.errors import operation
from todor.models.todo import TodoRecord
from todor.services.store import TodoStore

logger = logging.getLogger(__name__)


class SearchService:
    """Scan records and keep those whose canonical form contains a substring."""

    def __init__(self, adapter=None, store: TodoStore | None = None):
        self.store = store or TodoStore(adapter=adapter)

    async def search(self, predicate_text: str, max_results: int | None = None) -> list[TodoRecord]:
        """
        Find records containing predicate_text.

        Args:
            predicate_text: Substring to look for; empty matches everything
            max_results: Stop after this many matches (None for no cap)

        Returns:
            Matching records in fetch order. Nothing is returned if the scan
            fails part way.
        """
        if max_results is not None and max_results < 0:
            raise ValueError("max_results must be zero or positive")

        results: list[TodoRecord] = []
        if max_results == 0:
            return results

        with operation("search"):
            async with aclosing(self.store.fetch_streaming()) as records:
                async for record in records:
                    if predicate_text in record.canonical():
                        results.append(record)
                    if max_results is not None and len(results) >= max_results:
                        break

        logger.debug(f"Search for {predicate_text!r} matched {len(results)} todo(s)")
        return results
