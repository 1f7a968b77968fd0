"""Tests for checklist selection state and the interactive loop."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from ollama_refresh.checklist import Checklist
from ollama_refresh.interactive import build_checklist_table, run_interactive


def _checked(checklist: Checklist) -> list[bool]:
    return [item.checked for item in checklist.items]


class TestAllToggle:
    """The "All" row and its derived state."""

    def test_starts_unchecked(self):
        checklist = Checklist(["a:1", "b:1", "c:1"])
        assert checklist.all_checked is False
        assert checklist.locked is False
        assert _checked(checklist) == [False, False, False]

    def test_checking_all_checks_and_locks_every_item(self):
        checklist = Checklist(["a:1", "b:1", "c:1"])
        checklist.toggle_all()
        assert checklist.all_checked is True
        assert checklist.locked is True
        assert _checked(checklist) == [True, True, True]

    def test_unchecking_all_clears_items(self):
        checklist = Checklist(["a:1", "b:1"])
        checklist.toggle_all()
        checklist.toggle_all()
        assert _checked(checklist) == [False, False]
        assert checklist.locked is False

    def test_unchecking_one_item_clears_all(self):
        checklist = Checklist(["a:1", "b:1", "c:1"])
        checklist.toggle_all()
        checklist.toggle(1)
        assert checklist.all_checked is False
        assert checklist.locked is False
        assert _checked(checklist) == [True, False, True]

    def test_checking_every_item_rechecks_all(self):
        checklist = Checklist(["a:1", "b:1", "c:1"])
        checklist.toggle_all()
        checklist.toggle(0)
        checklist.toggle(2)
        assert checklist.all_checked is False
        checklist.toggle(0)
        assert checklist.all_checked is False
        checklist.toggle(2)
        assert checklist.all_checked is True
        assert checklist.locked is True

    def test_checking_items_one_by_one_from_empty(self):
        checklist = Checklist(["a:1", "b:1"])
        checklist.toggle(0)
        assert checklist.all_checked is False
        checklist.toggle(1)
        assert checklist.all_checked is True


class TestRowsAndCursor:
    def test_row_zero_is_all(self):
        checklist = Checklist(["a:1", "b:1"])
        checklist.toggle_row(0)
        assert checklist.selected() == ["a:1", "b:1"]
        assert checklist.cursor == 0

    def test_row_maps_to_item(self):
        checklist = Checklist(["a:1", "b:1"])
        checklist.toggle_row(2)
        assert checklist.selected() == ["b:1"]
        assert checklist.cursor == 2

    def test_row_out_of_range(self):
        with pytest.raises(IndexError):
            Checklist(["a:1"]).toggle_row(2)

    def test_move_wraps(self):
        checklist = Checklist(["a:1", "b:1"])
        checklist.move(-1)
        assert checklist.cursor == 2
        checklist.move(1)
        assert checklist.cursor == 0

    def test_independent_instances(self):
        first = Checklist(["a:1"])
        second = Checklist(["a:1"])
        first.toggle_all()
        first.move(1)
        assert second.all_checked is False
        assert second.cursor == 0


def _console() -> Console:
    return Console(file=io.StringIO(), width=80, color_system=None)


def _script(*answers: str):
    it = iter(answers)
    return lambda: next(it)


class TestRunInteractive:
    def test_nothing_stale(self):
        console = _console()
        assert run_interactive([], console=console, ask=_script()) == []
        assert "All models are up to date" in console.file.getvalue()

    def test_select_and_update(self):
        picked = run_interactive(
            ["a:1", "b:1", "c:1"], console=_console(), ask=_script("1", "3", "u")
        )
        assert picked == ["a:1", "c:1"]

    def test_all_then_untoggle_one(self):
        picked = run_interactive(
            ["a:1", "b:1"], console=_console(), ask=_script("0", "2", "u")
        )
        assert picked == ["a:1"]

    def test_cursor_commands(self):
        picked = run_interactive(
            ["a:1", "b:1"], console=_console(), ask=_script("j", "j", "t", "u")
        )
        assert picked == ["b:1"]

    def test_quit_returns_nothing(self):
        assert run_interactive(["a:1"], console=_console(), ask=_script("0", "q")) == []

    def test_update_with_empty_selection_keeps_asking(self):
        console = _console()
        picked = run_interactive(["a:1"], console=console, ask=_script("u", "1", "u"))
        assert picked == ["a:1"]
        assert "Nothing selected" in console.file.getvalue()

    def test_non_ascii_digit_is_unknown(self):
        console = _console()
        picked = run_interactive(["a:1"], console=console, ask=_script("\u00b2", "q"))
        assert picked == []
        assert "Unknown choice" in console.file.getvalue()

    @pytest.mark.parametrize("error", [EOFError, KeyboardInterrupt])
    def test_end_of_input_quits(self, error):
        def ask() -> str:
            raise error

        assert run_interactive(["a:1"], console=_console(), ask=ask) == []

    def test_unknown_input(self):
        console = _console()
        run_interactive(["a:1"], console=console, ask=_script("zz", "q"))
        assert "Unknown choice" in console.file.getvalue()

    def test_table_shows_boxes(self):
        checklist = Checklist(["a:1", "b:1"])
        checklist.toggle_row(1)
        console = _console()
        console.print(build_checklist_table(checklist))
        output = console.file.getvalue()
        assert "[x]" in output
        assert "[ ]" in output
        assert "b:1" in output
