"""Shared fixtures for history search tests."""

from __future__ import annotations

from typing import Callable, List, Sequence

import pytest

from histsearch.history.entries import Candidate, HistoryEntry, dedupe


@pytest.fixture
def make_entries() -> Callable[[Sequence[str]], List[HistoryEntry]]:
    def _factory(inputs: Sequence[str]) -> List[HistoryEntry]:
        return [HistoryEntry(input=text) for text in inputs]

    return _factory


@pytest.fixture
def make_candidates(make_entries) -> Callable[[Sequence[str]], List[Candidate]]:
    def _factory(inputs: Sequence[str]) -> List[Candidate]:
        return dedupe(make_entries(inputs))

    return _factory


@pytest.fixture
def numbered_candidates(make_candidates) -> List[Candidate]:
    # dedupe reverses order, so feed the texts oldest-last.
    return make_candidates([f"entry {index:02d}" for index in reversed(range(50))])
