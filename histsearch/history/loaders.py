"""Read-only loaders turning history snapshots into entries."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, TextIO

import yaml

from ..utils.logging import get_logger
from .entries import HistoryEntry

LOGGER = get_logger("histsearch.history.loaders")


class HistoryLoadError(RuntimeError):
    """Raised when a history snapshot cannot be read at all."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Unable to load history from {source}: {reason}")
        self.source = source
        self.reason = reason


def load_history(path: Path) -> List[HistoryEntry]:
    """Load a history snapshot, picking the format from the file suffix."""

    path = path.expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise HistoryLoadError(str(path), "file not found") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise HistoryLoadError(str(path), str(exc)) from exc

    suffix = path.suffix.lower()
    if suffix == ".jsonl":
        entries = parse_jsonl(text.splitlines(), source=str(path))
    elif suffix == ".json":
        entries = _parse_document(_decode_json(text, str(path)), str(path))
    elif suffix in {".yaml", ".yml"}:
        entries = _parse_document(_decode_yaml(text, str(path)), str(path))
    else:
        entries = parse_lines(text.splitlines())
    LOGGER.debug("Loaded %d history entries from %s", len(entries), path)
    return entries


def load_stream(stream: TextIO) -> List[HistoryEntry]:
    """Load plain-text history, one entry per line, from an open stream."""

    return parse_lines(line.rstrip("\r\n") for line in stream)


def parse_lines(lines: Iterable[str]) -> List[HistoryEntry]:
    return [HistoryEntry(input=line) for line in lines]


def parse_jsonl(lines: Iterable[str], *, source: str = "<jsonl>") -> List[HistoryEntry]:
    """Parse JSON lines; malformed lines are skipped with a warning."""

    entries: List[HistoryEntry] = []
    for number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            LOGGER.warning("Skipping %s line %d: %s", source, number, exc)
            continue
        entry = _coerce_record(payload, source=source, position=number)
        if entry is not None:
            entries.append(entry)
    return entries


def _parse_document(payload: Any, source: str) -> List[HistoryEntry]:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise HistoryLoadError(source, "expected a list of history records")
    entries: List[HistoryEntry] = []
    for position, record in enumerate(payload, start=1):
        entry = _coerce_record(record, source=source, position=position)
        if entry is not None:
            entries.append(entry)
    return entries


def _coerce_record(record: Any, *, source: str, position: int) -> HistoryEntry | None:
    if isinstance(record, str):
        return HistoryEntry(input=record)
    if isinstance(record, dict):
        try:
            return HistoryEntry.from_dict(record)
        except ValueError as exc:
            LOGGER.warning("Skipping %s record %d: %s", source, position, exc)
            return None
    LOGGER.warning(
        "Skipping %s record %d: unsupported type %s",
        source,
        position,
        type(record).__name__,
    )
    return None


def _decode_json(text: str, source: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise HistoryLoadError(source, str(exc)) from exc


def _decode_yaml(text: str, source: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise HistoryLoadError(source, str(exc)) from exc


__all__ = [
    "HistoryLoadError",
    "load_history",
    "load_stream",
    "parse_jsonl",
    "parse_lines",
]
