"""History entry model and the candidate deduplicator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """One historical submission, ordered implicitly by position."""

    input: str
    mode: Optional[str] = None
    parts: tuple[Any, ...] = field(default=(), hash=False)
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "HistoryEntry":
        text = payload.get("input")
        if not isinstance(text, str):
            raise ValueError("History record is missing a string 'input' field")
        mode = payload.get("mode")
        parts = payload.get("parts") or ()
        extra = {
            key: value
            for key, value in payload.items()
            if key not in {"input", "mode", "parts"}
        }
        return cls(
            input=text,
            mode=mode if isinstance(mode, str) else None,
            parts=tuple(parts) if isinstance(parts, (list, tuple)) else (),
            extra=extra,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"input": self.input}
        if self.mode is not None:
            payload["mode"] = self.mode
        if self.parts:
            payload["parts"] = list(self.parts)
        payload.update(self.extra)
        return payload


@dataclass(frozen=True, slots=True)
class Candidate:
    """A history entry admitted into the searchable working set."""

    entry: HistoryEntry

    @property
    def input(self) -> str:
        return self.entry.input


def dedupe(entries: Iterable[HistoryEntry]) -> List[Candidate]:
    """Reduce chronological entries to unique candidates, most recent first.

    Blank inputs are dropped. When the same text occurs several times, only
    the most recent occurrence survives.
    """

    seen: set[str] = set()
    candidates: List[Candidate] = []
    for entry in reversed(list(entries)):
        if not entry.input.strip():
            continue
        if entry.input in seen:
            continue
        seen.add(entry.input)
        candidates.append(Candidate(entry))
    return candidates


class CandidatePool:
    """Caches the deduplicated view of a history snapshot.

    The snapshot is trusted to change identity when its contents change, so
    the candidates are recomputed once per snapshot object.
    """

    def __init__(self, snapshot: Sequence[HistoryEntry] = ()) -> None:
        self._snapshot: Sequence[HistoryEntry] = snapshot
        self._candidates: List[Candidate] = dedupe(snapshot)

    @property
    def snapshot(self) -> Sequence[HistoryEntry]:
        return self._snapshot

    @property
    def candidates(self) -> List[Candidate]:
        return self._candidates

    def update(self, snapshot: Sequence[HistoryEntry]) -> bool:
        """Swap in a new snapshot; return whether candidates were rebuilt."""

        if snapshot is self._snapshot:
            return False
        self._snapshot = snapshot
        self._candidates = dedupe(snapshot)
        return True


__all__ = ["HistoryEntry", "Candidate", "CandidatePool", "dedupe"]
