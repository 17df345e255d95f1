"""History snapshot model, loaders and the candidate deduplicator."""

from .entries import Candidate, CandidatePool, HistoryEntry, dedupe
from .loaders import HistoryLoadError, load_history, load_stream

__all__ = [
    "Candidate",
    "CandidatePool",
    "HistoryEntry",
    "HistoryLoadError",
    "dedupe",
    "load_history",
    "load_stream",
]
