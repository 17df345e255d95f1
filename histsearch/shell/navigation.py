"""Query and selection state machine for the history dialog."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..history.entries import Candidate
from ..search.ranker import FuzzyRanker, RankedResult


class NavigationState:
    """Owns the filter text and the selected index into ranked results.

    Every mutation keeps ``0 <= selected_index < len(results)`` whenever there
    are results, and ``selected_index == 0`` otherwise.
    """

    def __init__(
        self,
        candidates: Sequence[Candidate] = (),
        *,
        ranker: Optional[FuzzyRanker] = None,
    ) -> None:
        self._ranker = ranker or FuzzyRanker()
        self._candidates: Sequence[Candidate] = candidates
        self._query = ""
        self._selected_index = 0
        self._results: List[RankedResult] = self._ranker.rank(candidates, "")

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def query(self) -> str:
        return self._query

    @property
    def selected_index(self) -> int:
        return self._selected_index

    @property
    def results(self) -> List[RankedResult]:
        return self._results

    @property
    def result_count(self) -> int:
        return len(self._results)

    @property
    def selected(self) -> Optional[RankedResult]:
        if not self._results:
            return None
        return self._results[self._selected_index]

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def set_query(self, text: str) -> bool:
        """Replace the filter text; return whether it actually changed."""

        if text == self._query:
            return False
        self._query = text
        self._selected_index = 0
        self._results = self._ranker.rank(self._candidates, text)
        return True

    def move_by(self, delta: int) -> None:
        count = len(self._results)
        if count == 0:
            return
        target = self._selected_index + delta
        if target < 0:
            target = count - 1
        elif target >= count:
            target = 0
        self._selected_index = target

    def move_to(self, index: int) -> bool:
        """Select ``index`` if it is in range; return whether it was applied."""

        if not 0 <= index < len(self._results):
            return False
        self._selected_index = index
        return True

    def clear_filter(self) -> None:
        self._query = ""
        self._selected_index = 0
        self._results = self._ranker.rank(self._candidates, "")

    def commit(self) -> Optional[Candidate]:
        selected = self.selected
        if selected is None:
            return None
        return selected.item

    def refresh(self, candidates: Sequence[Candidate]) -> None:
        """Re-rank against a new candidate snapshot, keeping the query."""

        self._candidates = candidates
        self._results = self._ranker.rank(candidates, self._query)
        if self._selected_index >= len(self._results):
            self._selected_index = 0


__all__ = ["NavigationState"]
