"""Fuzzy ranking of history candidates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Sequence

from rapidfuzz import fuzz, process
from rapidfuzz.distance import Indel

from ..history.entries import Candidate
from ..utils.logging import get_logger

LOGGER = get_logger("histsearch.search.ranker")

RESULT_LIMIT = 200


@dataclass(frozen=True, slots=True)
class FuzzyMatch:
    """Raw record returned by a matcher for one matching choice."""

    index: int
    indices: tuple[int, ...]
    score: float


class Matcher(Protocol):
    """Black-box fuzzy scorer over a list of searchable strings.

    Implementations return matches best-first and omit non-matching choices.
    """

    def __call__(
        self,
        query: str,
        choices: Sequence[str],
        *,
        limit: int,
    ) -> Sequence[FuzzyMatch]:
        ...  # pragma: no cover - structural type


@dataclass(frozen=True, slots=True)
class MatchInfo:
    """Matched character positions plus an opaque relevance score."""

    indices: tuple[int, ...]
    score: float

    @property
    def first(self) -> int:
        return self.indices[0]

    @property
    def last(self) -> int:
        return self.indices[-1]


@dataclass(frozen=True, slots=True)
class RankedResult:
    """A candidate in display order with optional match metadata."""

    item: Candidate
    match: Optional[MatchInfo] = None


def normalize_indices(text: str, indices: Any) -> Optional[tuple[int, ...]]:
    """Return ``indices`` as a validated tuple, or ``None`` if malformed.

    Valid positions are non-empty, strictly ascending integers that fall
    inside ``text``.
    """

    if not indices:
        return None
    try:
        positions = tuple(indices)
    except TypeError:
        return None
    previous = -1
    for position in positions:
        if isinstance(position, bool) or not isinstance(position, int):
            return None
        if position <= previous or position >= len(text):
            return None
        previous = position
    return positions


class RapidFuzzMatcher:
    """Case-insensitive subsequence matcher scored with rapidfuzz.

    A choice matches when every query character appears in it in order. Scores
    come from ``fuzz.WRatio`` and matched positions from the Indel alignment
    between the query and the choice.
    """

    def __init__(self, *, scorer=fuzz.WRatio) -> None:
        self._scorer = scorer

    def __call__(
        self,
        query: str,
        choices: Sequence[str],
        *,
        limit: int = RESULT_LIMIT,
    ) -> List[FuzzyMatch]:
        needle = _fold(query)
        lowered = [_fold(choice) for choice in choices]
        eligible = [
            index
            for index, haystack in enumerate(lowered)
            if _is_subsequence(needle, haystack)
        ]
        if not eligible:
            return []
        extracted = process.extract(
            needle,
            [lowered[index] for index in eligible],
            scorer=self._scorer,
            limit=limit,
        )
        matches: List[FuzzyMatch] = []
        for haystack, score, position in extracted:
            index = eligible[position]
            matches.append(
                FuzzyMatch(
                    index=index,
                    indices=_aligned_positions(needle, haystack),
                    score=float(score),
                )
            )
        return matches


class FuzzyRanker:
    """Turns a query and the candidate set into ranked results."""

    def __init__(
        self,
        matcher: Optional[Matcher] = None,
        *,
        limit: int = RESULT_LIMIT,
    ) -> None:
        self._matcher: Matcher = matcher or RapidFuzzMatcher()
        self._limit = max(1, limit)

    @property
    def limit(self) -> int:
        return self._limit

    def rank(self, candidates: Sequence[Candidate], query: str) -> List[RankedResult]:
        if not query:
            return [RankedResult(item=candidate) for candidate in candidates]

        matches = self._matcher(
            query,
            [candidate.input for candidate in candidates],
            limit=self._limit,
        )
        results: List[RankedResult] = []
        for match in matches:
            if len(results) >= self._limit:
                break
            if not 0 <= match.index < len(candidates):
                LOGGER.debug("Ignoring match for unknown choice %s", match.index)
                continue
            candidate = candidates[match.index]
            indices = normalize_indices(candidate.input, match.indices)
            if indices is None:
                LOGGER.debug("Malformed match positions for %r", candidate.input)
                results.append(RankedResult(item=candidate))
                continue
            results.append(
                RankedResult(
                    item=candidate,
                    match=MatchInfo(indices=indices, score=match.score),
                )
            )
        LOGGER.debug("Ranked %d of %d candidates for %r", len(results), len(candidates), query)
        return results


def rank(
    candidates: Sequence[Candidate],
    query: str,
    *,
    matcher: Optional[Matcher] = None,
    limit: int = RESULT_LIMIT,
) -> List[RankedResult]:
    """Rank ``candidates`` against ``query`` with a one-off ranker."""

    return FuzzyRanker(matcher, limit=limit).rank(candidates, query)


def _is_subsequence(needle: str, haystack: str) -> bool:
    remaining = iter(haystack)
    return all(char in remaining for char in needle)


def _fold(text: str) -> str:
    # Lowercase one character at a time so positions line up with the input.
    folded: List[str] = []
    for char in text:
        lowered = char.lower()
        folded.append(lowered if len(lowered) == 1 else char)
    return "".join(folded)


def _aligned_positions(needle: str, haystack: str) -> tuple[int, ...]:
    positions: List[int] = []
    for opcode in Indel.opcodes(needle, haystack):
        if opcode.tag != "equal":
            continue
        positions.extend(range(opcode.dest_start, opcode.dest_end))
    return tuple(positions)


__all__ = [
    "RESULT_LIMIT",
    "FuzzyMatch",
    "FuzzyRanker",
    "Matcher",
    "MatchInfo",
    "RankedResult",
    "RapidFuzzMatcher",
    "normalize_indices",
    "rank",
]
