"""Shared fixtures for CLI interaction tests."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from typer.testing import CliRunner


class _StubDialog:
    """Records how the CLI drives the dialog and returns a canned result."""

    instances: List["_StubDialog"] = []
    result: Optional[Any] = None

    def __init__(self, entries, *, config) -> None:
        self.entries = list(entries)
        self.config = config
        self.queries: List[str] = []
        _StubDialog.instances.append(self)

    def set_query(self, text: str) -> None:
        self.queries.append(text)

    def run(self):
        return _StubDialog.result


@pytest.fixture(scope="session")
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def stub_dialog(monkeypatch: pytest.MonkeyPatch) -> type[_StubDialog]:
    _StubDialog.instances = []
    _StubDialog.result = None
    monkeypatch.setattr("histsearch.__main__.HistorySearchDialog", _StubDialog)
    return _StubDialog


@pytest.fixture
def history_file(tmp_path: Path) -> Path:
    records: List[Dict[str, Any]] = [
        {"input": "foo bar"},
        {"input": "foo bar", "mode": "shell"},
        {"input": "hello"},
        {"input": "   "},
    ]
    target = tmp_path / "history.jsonl"
    target.write_text(
        "\n".join(json.dumps(record) for record in records) + "\n",
        encoding="utf-8",
    )
    return target


@pytest.fixture
def missing_config(tmp_path: Path) -> Path:
    return tmp_path / "no-config.yaml"
