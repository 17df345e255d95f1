"""Prompt-toolkit dialog hosting the history search list."""

from __future__ import annotations

from functools import partial
from typing import Callable, List, Optional, Sequence

from prompt_toolkit.application import Application, get_app
from prompt_toolkit.filters import Condition
from prompt_toolkit.input import Input
from prompt_toolkit.key_binding import KeyBindings, merge_key_bindings
from prompt_toolkit.layout import (
    ConditionalContainer,
    HSplit,
    Layout,
    Window,
)
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.mouse_events import MouseEvent, MouseEventType
from prompt_toolkit.output import Output
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import TextArea

from ..history.entries import Candidate, CandidatePool, HistoryEntry
from ..search.highlight import highlight_segments
from ..search.ranker import FuzzyRanker, Matcher
from ..utils.logging import get_logger
from ..utils.rich_render import ColorPalette, build_palette
from .dispatcher import InputDispatcher
from .navigation import NavigationState
from .preferences import DialogConfig
from .viewport import ViewportScroller

LOGGER = get_logger("histsearch.shell.dialog")

Fragment = tuple
SizeProvider = Callable[[], int]


def build_style(palette: ColorPalette) -> Style:
    return Style.from_dict(
        {
            "title": f"bold {palette.accent}",
            "placeholder": f"italic {palette.muted}",
            "search": palette.foreground,
            "row": palette.foreground,
            "row.match": f"bold {palette.accent}",
            "row.selected": f"bg:{palette.selection_background} {palette.selection_foreground}",
            "row.selected.match": f"bold underline bg:{palette.selection_background} {palette.selection_foreground}",
            "excerpt": palette.muted,
            "empty": f"italic {palette.muted}",
        }
    )


class HistorySearchDialog:
    """Full pipeline from a history snapshot to a committed selection."""

    def __init__(
        self,
        entries: Sequence[HistoryEntry],
        *,
        config: Optional[DialogConfig] = None,
        on_select: Optional[Callable[[Candidate], None]] = None,
        matcher: Optional[Matcher] = None,
        size_provider: Optional[SizeProvider] = None,
        input: Optional[Input] = None,
        output: Optional[Output] = None,
    ) -> None:
        self.config = config or DialogConfig()
        self.palette = build_palette(self.config.color_blind_mode)
        self._on_select = on_select
        self._size_provider = size_provider or _terminal_rows
        self._selection: Optional[Candidate] = None

        self.pool = CandidatePool(entries)
        self.navigation = NavigationState(
            self.pool.candidates,
            ranker=FuzzyRanker(matcher, limit=self.config.result_limit),
        )
        self.viewport = ViewportScroller(chrome_rows=self.config.chrome_rows)
        self.dispatcher = InputDispatcher(
            self.navigation,
            self.viewport,
            on_select=self._handle_select,
            on_close=self._handle_close,
            on_filter_cleared=self._clear_input,
            page_size=self.config.page_size,
            context_radius=self.config.context_radius,
        )

        self.search = TextArea(
            height=1,
            prompt="> ",
            multiline=False,
            wrap_lines=False,
            style="class:search",
        )
        self.search.buffer.on_text_changed += self._on_text_changed
        self.header_control = FormattedTextControl(self._render_header)
        self.list_control = FormattedTextControl(self._render_rows)
        self.excerpt_control = FormattedTextControl(self._render_excerpt)
        self.application = self._build_application(input, output)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def selection(self) -> Optional[Candidate]:
        return self._selection

    def set_query(self, text: str) -> None:
        """Prefill the search field, routing through the dispatcher."""

        self.search.text = text
        self.search.buffer.cursor_position = len(text)

    def update_entries(self, entries: Sequence[HistoryEntry]) -> None:
        """Accept a new history snapshot while the dialog is open."""

        if self.pool.update(entries):
            self.navigation.refresh(self.pool.candidates)
            self.dispatcher.resize(self._size_provider())

    def run(self) -> Optional[Candidate]:
        LOGGER.debug("Opening dialog with %d candidates", len(self.pool.candidates))
        with patch_stdout():
            return self.application.run()

    # ------------------------------------------------------------------
    # Setup helpers
    # ------------------------------------------------------------------
    def _build_application(
        self,
        input: Optional[Input],
        output: Optional[Output],
    ) -> Application:
        container = HSplit(
            [
                Window(self.header_control, height=1),
                self.search,
                Window(height=1, char=" "),
                Window(self.list_control, height=self._list_height),
                ConditionalContainer(
                    Window(self.excerpt_control, height=Dimension(min=1, max=3), wrap_lines=True),
                    filter=Condition(lambda: bool(self.dispatcher.excerpt)),
                ),
            ]
        )
        return Application(
            layout=Layout(container, focused_element=self.search),
            key_bindings=merge_key_bindings(
                [self.dispatcher.build_key_bindings(), self._build_host_bindings()]
            ),
            style=build_style(self.palette),
            mouse_support=self.config.mouse_support,
            full_screen=False,
            erase_when_done=True,
            input=input,
            output=output,
        )

    def _build_host_bindings(self) -> KeyBindings:
        bindings = KeyBindings()

        @bindings.add("escape", eager=True)
        @bindings.add("c-c")
        def _(event) -> None:  # type: ignore[override]
            self.dispatcher.cancel()

        return bindings

    # ------------------------------------------------------------------
    # Event plumbing
    # ------------------------------------------------------------------
    def _on_text_changed(self, buffer) -> None:
        self.dispatcher.set_query(buffer.text)

    def _clear_input(self) -> None:
        self.search.text = ""

    def _handle_select(self, candidate: Candidate) -> None:
        self._selection = candidate
        if self._on_select is not None:
            self._on_select(candidate)

    def _handle_close(self) -> None:
        app = self.application
        if app.is_running and not app.future.done():
            app.exit(result=self._selection)

    def _on_row_mouse(self, index: int, mouse_event: MouseEvent):
        if mouse_event.event_type == MouseEventType.MOUSE_UP:
            self.dispatcher.click(index)
            return None
        if mouse_event.event_type == MouseEventType.MOUSE_MOVE:
            self.dispatcher.hover(index)
            return None
        return NotImplemented

    # ------------------------------------------------------------------
    # Rendering helpers
    # ------------------------------------------------------------------
    def _list_height(self) -> Dimension:
        self.dispatcher.resize(self._size_provider())
        if not self.navigation.results:
            # One row for the "No results found" notice.
            return Dimension.exact(1)
        return Dimension.exact(self.viewport.height)

    def _render_header(self) -> List[Fragment]:
        fragments: List[Fragment] = [("class:title", self.config.title)]
        if not self.navigation.query:
            fragments.append(("class:placeholder", f"  {self.config.placeholder}"))
        return fragments

    def _render_rows(self) -> List[Fragment]:
        results = self.navigation.results
        if not results:
            return [("class:empty", "No results found")]
        start, stop = self.viewport.visible_range()
        fragments: List[Fragment] = []
        for index in range(start, stop):
            result = results[index]
            selected = index == self.navigation.selected_index
            base = "class:row.selected" if selected else "class:row"
            handler = partial(self._on_row_mouse, index)
            title, _, rest = result.item.input.partition("\n")
            indices = result.match.indices if result.match else None
            clipped = [position for position in indices or () if position < len(title)]
            fragments.append((base, " ", handler))
            for chunk, matched in highlight_segments(title, clipped):
                fragments.append((f"{base}.match" if matched else base, chunk, handler))
            if rest:
                fragments.append((base, " …", handler))
            if index < stop - 1:
                fragments.append(("", "\n"))
        return fragments

    def _render_excerpt(self) -> List[Fragment]:
        text = self.dispatcher.excerpt
        if not text:
            return []
        return [("class:excerpt", text.replace("\n", " "))]


def _terminal_rows() -> int:
    return get_app().output.get_size().rows


__all__ = ["HistorySearchDialog", "build_style"]
