"""Match highlighting and excerpt helpers."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..history.entries import Candidate
from .ranker import MatchInfo, normalize_indices

ELLIPSIS = "…"
DEFAULT_CONTEXT_RADIUS = 50


def excerpt(
    item: Optional[Candidate],
    match: Optional[MatchInfo],
    context_radius: int = DEFAULT_CONTEXT_RADIUS,
) -> str:
    """Return the slice of ``item`` around its matched characters.

    An empty string means there is nothing to show, either because nothing is
    selected or the selection carries no usable match positions.
    """

    if item is None or match is None:
        return ""
    text = item.input
    indices = normalize_indices(text, match.indices)
    if indices is None:
        return ""
    radius = max(0, context_radius)
    start = max(0, indices[0] - radius)
    end = min(len(text), indices[-1] + radius)
    # The span must always cover the last matched character.
    end = max(end, indices[-1] + 1)
    snippet = text[start:end]
    if start > 0:
        snippet = ELLIPSIS + snippet
    if end < len(text):
        snippet = snippet + ELLIPSIS
    return snippet


def highlight_segments(
    text: str,
    indices: Optional[Sequence[int]],
) -> List[tuple[str, bool]]:
    """Split ``text`` into ``(chunk, matched)`` runs for renderers."""

    positions = normalize_indices(text, indices)
    if not text:
        return []
    if positions is None:
        return [(text, False)]
    matched = set(positions)
    segments: List[tuple[str, bool]] = []
    buffer = [text[0]]
    state = 0 in matched
    for offset in range(1, len(text)):
        flag = offset in matched
        if flag == state:
            buffer.append(text[offset])
            continue
        segments.append(("".join(buffer), state))
        buffer = [text[offset]]
        state = flag
    segments.append(("".join(buffer), state))
    return segments


__all__ = ["DEFAULT_CONTEXT_RADIUS", "ELLIPSIS", "excerpt", "highlight_segments"]
