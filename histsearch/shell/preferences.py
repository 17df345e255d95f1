"""Dialog configuration and YAML-backed preference loading."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..search.highlight import DEFAULT_CONTEXT_RADIUS
from ..search.ranker import RESULT_LIMIT
from ..utils.logging import get_logger
from .viewport import DEFAULT_CHROME_ROWS

LOGGER = get_logger("histsearch.shell.preferences")

DEFAULT_CONFIG_PATH = Path("~/.histsearch/config.yaml")
DEFAULT_HISTORY_PATH = Path("~/.histsearch/history.jsonl")


class PreferencesError(ValueError):
    """Raised when a preference file holds an invalid value."""


@dataclass(slots=True)
class DialogConfig:
    """Configuration for the history search dialog."""

    title: str = "Search History"
    placeholder: str = "Type to search..."
    result_limit: int = RESULT_LIMIT
    page_size: int = 10
    context_radius: int = DEFAULT_CONTEXT_RADIUS
    chrome_rows: int = DEFAULT_CHROME_ROWS
    mouse_support: bool = True
    color_blind_mode: bool = False
    history_path: Path = DEFAULT_HISTORY_PATH


_FIELD_TYPES: Dict[str, type] = {
    "title": str,
    "placeholder": str,
    "result_limit": int,
    "page_size": int,
    "context_radius": int,
    "chrome_rows": int,
    "mouse_support": bool,
    "color_blind_mode": bool,
    "history_path": Path,
}


def load_preferences(path: Optional[Path] = None) -> Dict[str, Any]:
    """Read dialog overrides from a YAML mapping.

    A missing file yields no overrides. Unknown keys are ignored with a
    warning so older configs keep working.
    """

    target = (path or DEFAULT_CONFIG_PATH).expanduser()
    if not target.exists():
        return {}
    try:
        payload = yaml.safe_load(target.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise PreferencesError(f"Invalid YAML in {target}: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise PreferencesError(f"{target} must contain a mapping of settings")

    overrides: Dict[str, Any] = {}
    for key, value in payload.items():
        if key not in _FIELD_TYPES:
            LOGGER.warning("Ignoring unknown preference '%s' in %s", key, target)
            continue
        overrides[key] = _coerce(key, value)
    return overrides


def apply_preferences(
    config: Optional[DialogConfig],
    overrides: Mapping[str, Any],
) -> DialogConfig:
    """Return a copy of ``config`` with validated overrides applied."""

    base = config or DialogConfig()
    known = {item.name for item in fields(DialogConfig)}
    cleaned = {
        key: _coerce(key, value)
        for key, value in overrides.items()
        if key in known and value is not None
    }
    return replace(base, **cleaned)


def _coerce(key: str, value: Any) -> Any:
    expected = _FIELD_TYPES[key]
    if expected is bool:
        if isinstance(value, bool):
            return value
        raise PreferencesError(f"Preference '{key}' must be true or false")
    if expected is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise PreferencesError(f"Preference '{key}' must be an integer")
        if value < 0:
            raise PreferencesError(f"Preference '{key}' must not be negative")
        if key in {"result_limit", "page_size"} and value == 0:
            raise PreferencesError(f"Preference '{key}' must be positive")
        return value
    if expected is Path:
        if isinstance(value, Path):
            return value
        if isinstance(value, str) and value:
            return Path(value)
        raise PreferencesError(f"Preference '{key}' must be a path")
    if not isinstance(value, str):
        raise PreferencesError(f"Preference '{key}' must be a string")
    return value


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_HISTORY_PATH",
    "DialogConfig",
    "PreferencesError",
    "apply_preferences",
    "load_preferences",
]
