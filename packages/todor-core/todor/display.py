"""
Table rendering for todo records.

render() is pure: it sorts a copy of its input and draws a fixed-width,
colourless rich table into a string.
"""

import io
from typing import Iterable

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from todor.models.archival import ArchivalState
from todor.models.todo import TodoRecord

# Characters of todo text shown per row
DEFAULT_TEXT_WIDTH = 32

ID_WIDTH = 36
DONE_WIDTH = 4
DATE_WIDTH = 10

# Active records first, then archived, then replaced
GROUP_ORDER = {
    ArchivalState.ACTIVE: 0,
    ArchivalState.ARCHIVED: 1,
    ArchivalState.REPLACED: 2,
}


def sort_key(record: TodoRecord):
    return (GROUP_ORDER[record.archival.state], record.created_at, record.id)


def done_marker(record: TodoRecord) -> str:
    return "[X]" if record.done else "[ ]"


def archival_label(record: TodoRecord) -> str:
    """"No" for active, "Yes" for archived, else the successor id."""
    if record.archival.is_replaced:
        return record.archival.replaced_by
    return "Yes" if record.archival.is_archived else "No"


def build_table(records: Iterable[TodoRecord], text_width: int = DEFAULT_TEXT_WIDTH) -> Table:
    """Build the rich Table for records (sorted, whitespace collapsed, text truncated)."""
    table = Table(box=box.SIMPLE_HEAD, show_edge=False, pad_edge=False)
    table.add_column("id", width=ID_WIDTH, no_wrap=True, overflow="crop")
    table.add_column("done", width=DONE_WIDTH, no_wrap=True, overflow="crop")
    table.add_column("text", width=text_width, no_wrap=True, overflow="crop")
    table.add_column("date", width=DATE_WIDTH, no_wrap=True, overflow="crop")
    table.add_column("archived", width=ID_WIDTH, no_wrap=True, overflow="crop")

    for record in sorted(records, key=sort_key):
        table.add_row(
            Text(record.id),
            Text(done_marker(record)),
            Text(" ".join(record.text.split())[:text_width]),
            Text(record.created_at.date().isoformat()),
            Text(archival_label(record)),
        )
    return table


def render(records: Iterable[TodoRecord], text_width: int = DEFAULT_TEXT_WIDTH) -> str:
    """
    Render records as a plain-text table.

    Same input always gives the same output; the input is not modified.
    """
    table = build_table(records, text_width)

    # Wide enough that rich never shrinks the fixed columns
    width = ID_WIDTH * 2 + DONE_WIDTH + DATE_WIDTH + text_width + 20
    console = Console(
        file=io.StringIO(),
        width=width,
        color_system=None,
        force_terminal=False,
        highlight=False,
        emoji=False,
        markup=False,
        legacy_windows=False,
    )
    console.print(table)
    return console.file.getvalue()
