"""
Tests for the table formatter.
"""

import copy
import pytest
from datetime import datetime, timedelta, timezone


def _record(text, minutes=0, **kwargs):
    from todor.models.todo import TodoRecord

    created_at = datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc) + timedelta(minutes=minutes)
    return TodoRecord(text=text, created_at=created_at, **kwargs)


def _row_for(output, record_id):
    lines = [line for line in output.splitlines() if line.lstrip().startswith(record_id)]
    assert len(lines) == 1
    return lines[0]


class TestRender:
    """Tests for render()."""

    def test_headers(self):
        from todor.display import render

        output = render([])

        for title in ("id", "done", "text", "date", "archived"):
            assert title in output

    def test_row_contents(self):
        from todor.display import render

        record = _record("buy milk")

        row = _row_for(render([record]), record.id)

        assert "[ ]" in row
        assert "buy milk" in row
        assert "2024-03-05" in row
        assert row.rstrip().endswith("No")

    def test_done_marker(self):
        from todor.display import render

        record = _record("x", done=True)

        assert "[X]" in _row_for(render([record]), record.id)

    def test_archival_labels(self):
        from todor.display import render
        from todor.models.archival import Archival

        archived = _record("old", archival=Archival.archived())
        replaced = _record("older", archival=Archival.replaced("successor-id"))

        output = render([archived, replaced])

        assert _row_for(output, archived.id).rstrip().endswith("Yes")
        assert _row_for(output, replaced.id).rstrip().endswith("successor-id")

    def test_date_is_utc_calendar_date(self):
        from todor.display import render
        from todor.models.todo import TodoRecord

        plus_two = timezone(timedelta(hours=2))
        record = TodoRecord(text="x", created_at=datetime(2024, 3, 6, 1, 0, tzinfo=plus_two))

        row = _row_for(render([record]), record.id)

        assert "2024-03-05" in row
        assert "01:00" not in row

    def test_text_truncated(self):
        from todor.display import render

        record = _record("x" * 40)

        row = _row_for(render([record]), record.id)

        assert "x" * 32 in row
        assert "x" * 33 not in row
        assert "..." not in row

    def test_custom_text_width(self):
        from todor.display import render

        record = _record("klmnopqrst")

        row = _row_for(render([record], text_width=4), record.id)

        assert "klmn" in row
        assert "klmno" not in row

    def test_markup_is_not_interpreted(self):
        from todor.display import render

        record = _record("[bold]loud[/bold]")

        assert "[bold]loud[/bold]" in render([record])

    def test_multiline_text_stays_on_one_row(self):
        from todor.display import render

        record = _record("line1\nline2\tend")
        output = render([record])

        row = _row_for(output, record.id)
        assert "line1 line2 end" in row
        assert not any(line.strip().startswith("line2") for line in output.splitlines())
        assert len(output.splitlines()) == len(render([_record("single")]).splitlines())

    def test_width_independent_of_content(self):
        from todor.display import render

        short = _record("a")
        long = _record("b" * 200)

        assert len(_row_for(render([short]), short.id)) == len(_row_for(render([long]), long.id))

    def test_sort_active_first_then_archived_then_replaced(self):
        from todor.display import render
        from todor.models.archival import Archival

        replaced = _record("r", minutes=0, archival=Archival.replaced("x"))
        archived = _record("a", minutes=1, archival=Archival.archived())
        active_late = _record("l", minutes=3)
        active_early = _record("e", minutes=2)

        output = render([replaced, archived, active_late, active_early])
        positions = [output.index(r.id) for r in (active_early, active_late, archived, replaced)]

        assert positions == sorted(positions)

    def test_deterministic_and_pure(self):
        from todor.display import render
        from todor.models.archival import Archival

        records = [
            _record("one", minutes=5, done=True),
            _record("two", minutes=1, archival=Archival.replaced("abc")),
            _record("three", minutes=1),
        ]
        before = copy.deepcopy(records)

        first = render(records)
        second = render(records)

        assert first == second
        assert records == before

    def test_scenario_edit_shows_both_versions(self):
        from todor.display import render
        from todor.models.archival import Archival
        from todor.models.todo import TodoRecord

        original = _record("buy milk", done=True)
        new = TodoRecord(text="buy oat milk", created_at=original.created_at + timedelta(minutes=1))
        original.archival = Archival.replaced(new.id)

        output = render([original, new])

        new_row = _row_for(output, new.id)
        assert "[ ]" in new_row
        assert "buy oat milk" in new_row
        assert new_row.rstrip().endswith("No")

        old_row = _row_for(output, original.id)
        assert "[X]" in old_row
        assert old_row.rstrip().endswith(new.id)
        assert output.index(new.id) < output.index(original.id)
