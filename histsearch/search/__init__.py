"""Fuzzy ranking and match highlighting."""

from .highlight import excerpt, highlight_segments
from .ranker import (
    RESULT_LIMIT,
    FuzzyMatch,
    FuzzyRanker,
    Matcher,
    MatchInfo,
    RankedResult,
    RapidFuzzMatcher,
    rank,
)

__all__ = [
    "RESULT_LIMIT",
    "FuzzyMatch",
    "FuzzyRanker",
    "Matcher",
    "MatchInfo",
    "RankedResult",
    "RapidFuzzMatcher",
    "excerpt",
    "highlight_segments",
    "rank",
]
