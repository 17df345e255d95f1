"""Maps keyboard and pointer input onto navigation and scrolling."""

from __future__ import annotations

from typing import Callable, Optional

from prompt_toolkit.key_binding import KeyBindings

from ..history.entries import Candidate
from ..search.highlight import DEFAULT_CONTEXT_RADIUS, excerpt
from ..utils.logging import get_logger
from .navigation import NavigationState
from .viewport import ViewportScroller

LOGGER = get_logger("histsearch.shell.dispatcher")

SelectCallback = Callable[[Candidate], None]
CloseCallback = Callable[[], None]


class InputDispatcher:
    """The single writer of navigation state.

    Each operation that can change the selection or the result count is
    followed by a viewport pass, in the order re-rank, re-clamp, scroll.
    """

    def __init__(
        self,
        navigation: NavigationState,
        viewport: ViewportScroller,
        *,
        on_select: Optional[SelectCallback] = None,
        on_close: Optional[CloseCallback] = None,
        on_filter_cleared: Optional[CloseCallback] = None,
        page_size: int = 10,
        context_radius: int = DEFAULT_CONTEXT_RADIUS,
    ) -> None:
        self.navigation = navigation
        self.viewport = viewport
        self._on_select = on_select
        self._on_close = on_close
        self._on_filter_cleared = on_filter_cleared
        self.page_size = max(1, page_size)
        self.context_radius = context_radius
        self._available_height = 0
        self._committed = False

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def excerpt(self) -> str:
        selected = self.navigation.selected
        if selected is None:
            return ""
        return excerpt(selected.item, selected.match, self.context_radius)

    # ------------------------------------------------------------------
    # Text input
    # ------------------------------------------------------------------
    def set_query(self, text: str) -> None:
        if not self.navigation.set_query(text):
            return
        self.viewport.reset()
        self._sync()

    def insert_text(self, text: str) -> None:
        """Append typed characters to the current query."""

        printable = "".join(char for char in text if char.isprintable())
        if printable:
            self.set_query(self.navigation.query + printable)

    def clear_filter(self) -> None:
        self.navigation.clear_filter()
        self.viewport.reset()
        self._sync()
        if self._on_filter_cleared is not None:
            self._on_filter_cleared()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def move_by(self, delta: int) -> None:
        self.navigation.move_by(delta)
        self._sync()

    def page_up(self) -> None:
        self.move_by(-self.page_size)

    def page_down(self) -> None:
        self.move_by(self.page_size)

    def hover(self, index: int) -> None:
        if self.navigation.move_to(index):
            self._sync()

    def click(self, index: int) -> Optional[Candidate]:
        if not self.navigation.move_to(index):
            return None
        self._sync()
        return self.commit()

    # ------------------------------------------------------------------
    # Terminal actions
    # ------------------------------------------------------------------
    def commit(self) -> Optional[Candidate]:
        if self._committed:
            return None
        candidate = self.navigation.commit()
        if candidate is None:
            return None
        self._committed = True
        LOGGER.debug("Committed history entry %r", candidate.input)
        if self._on_select is not None:
            self._on_select(candidate)
        if self._on_close is not None:
            self._on_close()
        return candidate

    def cancel(self) -> None:
        if self._on_close is not None:
            self._on_close()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def resize(self, available_height: int) -> None:
        self._available_height = max(0, available_height)
        self._sync()

    def _sync(self) -> None:
        self.viewport.resize(self._available_height, self.navigation.result_count)
        self.viewport.follow(self.navigation.selected_index)

    # ------------------------------------------------------------------
    # Key bindings
    # ------------------------------------------------------------------
    def build_key_bindings(self) -> KeyBindings:
        bindings = KeyBindings()

        @bindings.add("up")
        @bindings.add("c-p")
        def _(event) -> None:  # type: ignore[override]
            self.move_by(-1)

        @bindings.add("down")
        @bindings.add("c-n")
        def _(event) -> None:  # type: ignore[override]
            self.move_by(1)

        @bindings.add("pageup")
        def _(event) -> None:  # type: ignore[override]
            self.page_up()

        @bindings.add("pagedown")
        def _(event) -> None:  # type: ignore[override]
            self.page_down()

        @bindings.add("c-u")
        def _(event) -> None:  # type: ignore[override]
            self.clear_filter()

        @bindings.add("enter")
        def _(event) -> None:  # type: ignore[override]
            self.commit()

        return bindings


__all__ = ["InputDispatcher"]
