"""Prompt-toolkit dialog wiring, rendered headlessly."""

from __future__ import annotations

from typing import List

import pytest
from prompt_toolkit.data_structures import Point
from prompt_toolkit.input import DummyInput, create_pipe_input
from prompt_toolkit.mouse_events import MouseButton, MouseEvent, MouseEventType
from prompt_toolkit.output import DummyOutput

from histsearch.history.entries import HistoryEntry
from histsearch.shell.dialog import HistorySearchDialog
from histsearch.shell.preferences import DialogConfig


def _entries(*texts: str) -> List[HistoryEntry]:
    return [HistoryEntry(input=text) for text in texts]


def _row_text(fragments) -> List[str]:
    joined = "".join(fragment[1] for fragment in fragments)
    return joined.split("\n")


def _mouse(event_type: MouseEventType) -> MouseEvent:
    return MouseEvent(
        position=Point(x=0, y=0),
        event_type=event_type,
        button=MouseButton.LEFT,
        modifiers=frozenset(),
    )


@pytest.fixture
def build_dialog():
    def _factory(entries, **kwargs) -> HistorySearchDialog:
        kwargs.setdefault("size_provider", lambda: 40)
        return HistorySearchDialog(
            entries,
            input=DummyInput(),
            output=DummyOutput(),
            **kwargs,
        )

    return _factory


def test_header_shows_placeholder_until_typing(build_dialog) -> None:
    dialog = build_dialog(_entries("foo bar", "hello"))
    header = "".join(text for _, text in dialog._render_header())
    assert header.startswith("Search History")
    assert "Type to search..." in header

    dialog.set_query("bar")
    header = "".join(text for _, text in dialog._render_header())
    assert "Type to search..." not in header


def test_rows_render_most_recent_first(build_dialog) -> None:
    dialog = build_dialog(_entries("foo bar", "foo bar", "hello"))
    height = dialog._list_height()
    assert height.preferred == 2
    assert _row_text(dialog._render_rows()) == [" hello", " foo bar"]


def test_typing_filters_and_highlights(build_dialog) -> None:
    dialog = build_dialog(_entries("foo bar", "hello"))
    dialog.set_query("bar")
    dialog._list_height()

    fragments = dialog._render_rows()
    assert _row_text(fragments) == [" foo bar"]
    matched = "".join(text for style, text, *_ in fragments if style.endswith(".match"))
    assert matched == "bar"
    assert dialog._render_excerpt() == [("class:excerpt", "foo bar")]


def test_no_results_placeholder(build_dialog) -> None:
    dialog = build_dialog(_entries("alpha"))
    dialog.set_query("zzz")
    assert dialog._list_height().preferred == 1
    assert dialog.viewport.height == 0
    assert dialog._render_rows() == [("class:empty", "No results found")]
    assert dialog._render_excerpt() == []


def test_clear_filter_empties_search_field(build_dialog) -> None:
    dialog = build_dialog(_entries("alpha", "beta"))
    dialog.set_query("alp")
    dialog.dispatcher.clear_filter()
    assert dialog.search.text == ""
    assert dialog.navigation.result_count == 2


def test_multiline_entries_show_first_line(build_dialog) -> None:
    dialog = build_dialog(_entries("first line\nsecond line"))
    dialog._list_height()
    assert _row_text(dialog._render_rows()) == [" first line …"]


def test_mouse_click_commits_row(build_dialog) -> None:
    chosen = []
    dialog = build_dialog(_entries("one", "two", "three"), on_select=chosen.append)
    dialog._list_height()
    fragments = dialog._render_rows()
    handler = next(
        fragment[2]
        for fragment in fragments
        if len(fragment) == 3 and fragment[1] == "two"
    )

    assert handler(_mouse(MouseEventType.MOUSE_MOVE)) is None
    assert dialog.navigation.selected_index == 1
    assert chosen == []

    assert handler(_mouse(MouseEventType.MOUSE_UP)) is None
    assert dialog.selection.input == "two"
    assert [candidate.input for candidate in chosen] == ["two"]
    assert handler(_mouse(MouseEventType.SCROLL_UP)) is NotImplemented


def test_update_entries_reranks_with_current_query(build_dialog) -> None:
    dialog = build_dialog(_entries("git status"))
    dialog.set_query("log")
    assert dialog.navigation.result_count == 0

    dialog.update_entries(_entries("git status", "git log"))
    assert [result.item.input for result in dialog.navigation.results] == ["git log"]
    assert dialog.navigation.query == "log"


def test_config_controls_title_and_limit(build_dialog) -> None:
    config = DialogConfig(title="Prompts", result_limit=1)
    dialog = build_dialog(_entries("abc", "abd", "abe"), config=config)
    dialog.set_query("ab")
    assert dialog.navigation.result_count == 1
    assert dialog._render_header()[0] == ("class:title", "Prompts")


def test_run_returns_committed_entry(monkeypatch: pytest.MonkeyPatch) -> None:
    patched = []

    class _RecordingPatch:
        def __enter__(self):
            patched.append("enter")
            return self

        def __exit__(self, *exc_info):
            patched.append("exit")
            return False

    monkeypatch.setattr("histsearch.shell.dialog.patch_stdout", _RecordingPatch)
    with create_pipe_input() as pipe:
        pipe.send_text("bar\r")
        dialog = HistorySearchDialog(
            _entries("foo bar", "hello"),
            size_provider=lambda: 40,
            input=pipe,
            output=DummyOutput(),
        )
        selected = dialog.run()
    assert selected is not None
    assert selected.input == "foo bar"
    assert patched == ["enter", "exit"]
