"""Helpers for rendering rich output within the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..search.highlight import excerpt, highlight_segments
from ..search.ranker import RankedResult

_CONSOLE: Console | None = None


@dataclass(slots=True)
class ColorPalette:
    """Color tokens shared by the dialog and headless output."""

    foreground: str = "#d0d0d0"
    background: str = "#1c1c1c"
    accent: str = "#fab283"
    selection_foreground: str = "#1c1c1c"
    selection_background: str = "#fab283"
    muted: str = "#808080"
    border: str = "cyan"


def build_palette(color_blind_mode: bool = False) -> ColorPalette:
    if not color_blind_mode:
        return ColorPalette()
    return ColorPalette(
        foreground="#ffffff",
        background="#000000",
        accent="#00d7ff",
        selection_foreground="#000000",
        selection_background="#ffffff",
        muted="#bcbcbc",
        border="bright_white",
    )


def get_console(color_system: str | None = "auto") -> Console:
    """Return a shared Rich console instance configured for plain output."""

    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(
            soft_wrap=True,
            color_system=color_system,
            markup=False,
            highlight=False,
        )
    return _CONSOLE


def highlighted_text(
    text: str,
    indices: Optional[Sequence[int]],
    *,
    palette: ColorPalette | None = None,
) -> Text:
    """Build a Rich ``Text`` with matched characters emphasised."""

    colors = palette or ColorPalette()
    rendered = Text()
    for chunk, matched in highlight_segments(text, indices):
        rendered.append(chunk, style=f"bold {colors.accent}" if matched else "")
    return rendered


def build_results_table(
    results: Sequence[RankedResult],
    *,
    title: str = "Search History",
    context_radius: int = 50,
    palette: ColorPalette | None = None,
) -> Table:
    colors = palette or ColorPalette()
    table = Table(title=title, border_style=colors.border, header_style=f"bold {colors.border}")
    table.add_column("#", justify="right", width=4)
    table.add_column("Entry", overflow="fold")
    table.add_column("Score", justify="right")
    table.add_column("Excerpt", style=colors.muted, overflow="fold")
    for position, result in enumerate(results, start=1):
        indices = result.match.indices if result.match else None
        score = f"{result.match.score:.1f}" if result.match else "-"
        head, _, rest = result.item.input.partition("\n")
        label = highlighted_text(
            head,
            [index for index in indices or () if index < len(head)],
            palette=colors,
        )
        if rest:
            label.append("…", style=colors.muted)
        table.add_row(
            str(position),
            label,
            score,
            excerpt(result.item, result.match, context_radius),
        )
    return table


__all__ = [
    "ColorPalette",
    "build_palette",
    "build_results_table",
    "get_console",
    "highlighted_text",
]
