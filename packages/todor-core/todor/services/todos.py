"""
Todo Service for todor.

Owns the archival state machine: edits never rewrite text in place, they add
a successor record and link the old record to it inside one transaction.
"""

import builtins
import logging

from todor.errors import DeserializationError, InvalidTransition, NotFound, operation
from todor.models.archival import Archival
from todor.models.todo import TodoRecord
from todor.services.store import TodoStore

logger = logging.getLogger(__name__)


class TodoService:
    """
    Service for creating, completing, editing and archiving todos.

    All errors from the store propagate unchanged, tagged with the
    operation name.
    """

    def __init__(self, adapter=None, store: TodoStore | None = None):
        """
        Initialize todo service.

        Args:
            adapter: Optional DatabaseAdapter. If not provided, uses global adapter.
            store: Optional TodoStore to use instead of building one
        """
        self.store = store or TodoStore(adapter=adapter)

    async def create(self, text: str) -> TodoRecord:
        """
        Create a new active todo.

        Args:
            text: Note content

        Returns:
            The stored TodoRecord
        """
        record = TodoRecord(text=text)
        with operation("create"):
            await self.store.insert(record)

        logger.info(f"Created todo: {record.id}")
        return record

    async def get(self, todo_id: str) -> TodoRecord:
        with operation("get"):
            return await self.store.get(todo_id)

    async def list(self) -> builtins.list[TodoRecord]:
        """All records, including archived and replaced ones."""
        with operation("list"):
            return await self.store.fetch_all()

    async def complete(self, todo_id: str, completed: bool = True) -> TodoRecord:
        """
        Set the completion flag.

        Allowed on any record, whatever its archival state.
        """
        with operation("complete"):
            await self.store.update_done(todo_id, completed)
            record = await self.store.get(todo_id)

        logger.info(f"Marked todo {todo_id} done={completed}")
        return record

    async def edit(self, todo_id: str, new_text: str) -> TodoRecord:
        """
        Replace a todo's text by creating a successor record.

        The new record is inserted and the old one marked
        ReplacedBy(new id) in a single transaction; on any failure
        neither change is kept.

        Returns:
            The new, active TodoRecord

        Raises:
            NotFound: If todo_id does not exist
            InvalidTransition: If the record is already archived or replaced
        """
        with operation("edit"):
            async with self.store.transaction():
                old = await self.store.get(todo_id)
                if not old.is_active:
                    raise InvalidTransition(
                        f"Todo {todo_id} is {old.archival!r} and cannot be edited"
                    )

                record = TodoRecord(text=new_text)
                await self.store.insert(record)
                await self.store.update_archival(
                    todo_id, Archival.replaced(record.id), expected=Archival.active()
                )

        logger.info(f"Edited todo {todo_id} -> {record.id}")
        return record

    async def archive(self, todo_id: str) -> TodoRecord:
        """
        Retire an active todo without a successor.

        Raises:
            NotFound: If todo_id does not exist
            InvalidTransition: If the record is not active
        """
        with operation("archive"):
            async with self.store.transaction():
                record = await self.store.get(todo_id)
                if not record.is_active:
                    raise InvalidTransition(
                        f"Todo {todo_id} is {record.archival!r} and cannot be archived"
                    )
                await self.store.update_archival(
                    todo_id, Archival.archived(), expected=Archival.active()
                )

        record.archival = Archival.archived()
        logger.info(f"Archived todo {todo_id}")
        return record

    async def lineage(self, todo_id: str) -> builtins.list[TodoRecord]:
        """
        Follow ReplacedBy links from todo_id to the head of its chain.

        Returns:
            Records from todo_id (first) to the current version (last)

        Raises:
            NotFound: If todo_id does not exist
            DeserializationError: If the chain loops or points at a missing record
        """
        with operation("lineage"):
            chain = [await self.store.get(todo_id)]
            seen = {todo_id}

            while chain[-1].archival.is_replaced:
                successor_id = chain[-1].replaced_by
                if successor_id in seen:
                    raise DeserializationError(f"Lineage cycle at {successor_id}")
                seen.add(successor_id)

                try:
                    successor = await self.store.get(successor_id)
                except NotFound as e:
                    raise DeserializationError(
                        f"Todo {chain[-1].id} is replaced by missing record {successor_id}"
                    ) from e
                chain.append(successor)

        return chain
