"""Fuzzy ranking over deduplicated candidates."""

from __future__ import annotations

from typing import Sequence

import pytest

from histsearch.search.highlight import excerpt
from histsearch.search.ranker import (
    RESULT_LIMIT,
    FuzzyMatch,
    FuzzyRanker,
    RapidFuzzMatcher,
    normalize_indices,
    rank,
)


class _ScriptedMatcher:
    def __init__(self, matches: list[FuzzyMatch]) -> None:
        self.matches = matches
        self.calls: list[tuple[str, tuple[str, ...], int]] = []

    def __call__(self, query: str, choices: Sequence[str], *, limit: int) -> list[FuzzyMatch]:
        self.calls.append((query, tuple(choices), limit))
        return self.matches


def test_empty_query_is_identity(make_candidates) -> None:
    candidates = make_candidates(["one", "two", "three"])
    results = rank(candidates, "")
    assert [result.item for result in results] == candidates
    assert all(result.match is None for result in results)


def test_query_keeps_only_matching_candidates(make_candidates) -> None:
    candidates = make_candidates(["foo bar", "foo bar", "hello"])
    results = rank(candidates, "bar")
    assert [result.item.input for result in results] == ["foo bar"]
    assert results[0].match is not None
    assert results[0].match.indices == (4, 5, 6)


def test_matching_is_case_insensitive_subsequence(make_candidates) -> None:
    candidates = make_candidates(["Git Status", "grep -r", "npm test"])
    results = rank(candidates, "gst")
    assert [result.item.input for result in results] == ["Git Status"]
    indices = results[0].match.indices
    assert len(indices) == 3
    assert [results[0].item.input[index].lower() for index in indices] == ["g", "s", "t"]


@pytest.mark.parametrize(
    ("text", "query", "expected"),
    [("İab", "a", (1,)), ("İstanbul x", "x", (9,)), ("ÀB İc", "bc", (1, 4))],
)
def test_positions_survive_characters_that_lowercase_to_two(
    make_candidates,
    text: str,
    query: str,
    expected: tuple,
) -> None:
    results = rank(make_candidates([text]), query)
    assert len(results) == 1
    assert results[0].match is not None
    assert results[0].match.indices == expected
    assert excerpt(results[0].item, results[0].match, 50) == text


def test_zero_matches_yields_empty_results(make_candidates) -> None:
    assert rank(make_candidates(["alpha", "beta"]), "zzz") == []


def test_exact_match_ranks_first(make_candidates) -> None:
    candidates = make_candidates(["git status --short", "gs", "git status"])
    results = rank(candidates, "git status")
    assert results[0].item.input == "git status"
    scores = [result.match.score for result in results]
    assert scores == sorted(scores, reverse=True)


def test_results_are_capped(make_candidates) -> None:
    candidates = make_candidates([f"item {index}" for index in range(RESULT_LIMIT + 50)])
    assert len(rank(candidates, "item")) == RESULT_LIMIT
    assert len(rank(candidates, "")) == RESULT_LIMIT + 50


def test_ranker_keeps_matcher_order(make_candidates) -> None:
    candidates = make_candidates(["c", "b", "a"])
    matcher = _ScriptedMatcher(
        [
            FuzzyMatch(index=2, indices=(0,), score=10.0),
            FuzzyMatch(index=0, indices=(0,), score=10.0),
        ]
    )
    results = FuzzyRanker(matcher, limit=7).rank(candidates, "x")
    assert [result.item.input for result in results] == ["c", "a"]
    assert matcher.calls == [("x", ("a", "b", "c"), 7)]


def test_malformed_positions_are_treated_as_no_match(make_candidates) -> None:
    candidates = make_candidates(["abc", "def"])
    matcher = _ScriptedMatcher(
        [
            FuzzyMatch(index=0, indices=(5,), score=1.0),
            FuzzyMatch(index=9, indices=(0,), score=1.0),
            FuzzyMatch(index=1, indices=(2, 1), score=1.0),
        ]
    )
    results = FuzzyRanker(matcher).rank(candidates, "q")
    assert [result.item.input for result in results] == ["def", "abc"]
    assert all(result.match is None for result in results)


def test_rapidfuzz_matcher_reports_choice_indices() -> None:
    matcher = RapidFuzzMatcher()
    matches = matcher("log", ["ls", "git log", "blog post"], limit=10)
    assert {match.index for match in matches} == {1, 2}
    for match in matches:
        assert len(match.indices) == 3


def test_normalize_indices() -> None:
    assert normalize_indices("abc", [0, 2]) == (0, 2)
    assert normalize_indices("abc", []) is None
    assert normalize_indices("abc", None) is None
    assert normalize_indices("abc", [0, 3]) is None
    assert normalize_indices("abc", [1, 1]) is None
    assert normalize_indices("abc", ["0"]) is None
    assert normalize_indices("abc", 5) is None
