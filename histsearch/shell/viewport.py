"""Scroll arithmetic for the fixed-height result window."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_CHROME_ROWS = 6


@dataclass(slots=True)
class ViewportState:
    """Top offset and height of the visible slice of results."""

    top_offset: int = 0
    height: int = 0


class ViewportScroller:
    """Keeps the selected row inside the visible window.

    Rows are rendered in result order with a uniform height, so a row's
    position is ``index * row_height`` and never needs a lookup.
    """

    def __init__(
        self,
        *,
        chrome_rows: int = DEFAULT_CHROME_ROWS,
        row_height: int = 1,
    ) -> None:
        self.chrome_rows = max(0, chrome_rows)
        self.row_height = max(1, row_height)
        self.state = ViewportState()
        self._result_count = 0

    @property
    def top_offset(self) -> int:
        return self.state.top_offset

    @property
    def height(self) -> int:
        return self.state.height

    def window_height(self, available_height: int, result_count: int) -> int:
        rows = available_height // 2 - self.chrome_rows
        return max(0, min(result_count * self.row_height, rows))

    def resize(self, available_height: int, result_count: int) -> ViewportState:
        """Recompute the window height for the terminal and result count."""

        self._result_count = max(0, result_count)
        self.state.height = self.window_height(available_height, self._result_count)
        self.state.top_offset = self._clamp(self.state.top_offset)
        return self.state

    def reset(self) -> None:
        self.state.top_offset = 0

    def follow(self, selected_index: int) -> ViewportState:
        """Scroll just enough to bring ``selected_index`` fully into view."""

        height = self.state.height
        if height <= 0:
            return self.state
        relative = selected_index * self.row_height - self.state.top_offset
        if relative >= height:
            self.state.top_offset += relative - height + 1
        elif relative < 0:
            self.state.top_offset += relative
            if selected_index == 0:
                self.state.top_offset = 0
        return self.state

    def relative_position(self, selected_index: int) -> int:
        return selected_index * self.row_height - self.state.top_offset

    def visible_range(self) -> tuple[int, int]:
        """Return the ``(start, stop)`` result indices currently on screen."""

        if self.state.height <= 0:
            return (0, 0)
        start = self.state.top_offset // self.row_height
        stop = -(-(self.state.top_offset + self.state.height) // self.row_height)
        return (start, min(stop, self._result_count))

    def _clamp(self, offset: int) -> int:
        total = self._result_count * self.row_height
        ceiling = max(0, total - self.state.height)
        return max(0, min(offset, ceiling))


__all__ = ["DEFAULT_CHROME_ROWS", "ViewportScroller", "ViewportState"]
