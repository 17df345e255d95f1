"""Command-line entry point for the histsearch picker."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional

import typer

from .history.entries import HistoryEntry, dedupe
from .history.loaders import HistoryLoadError, load_history, load_stream
from .search.highlight import excerpt
from .search.ranker import RESULT_LIMIT, FuzzyRanker
from .shell.dialog import HistorySearchDialog
from .shell.preferences import (
    DialogConfig,
    PreferencesError,
    apply_preferences,
    load_preferences,
)
from .utils.logging import set_verbosity
from .utils.rich_render import build_palette, build_results_table, get_console


app = typer.Typer(help="Fuzzy search over prompt and command history")

CANCELLED_EXIT_CODE = 130


def _fail(message: str) -> NoReturn:
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _build_config(config_path: Optional[Path], **overrides: Any) -> DialogConfig:
    try:
        stored = load_preferences(config_path)
        config = apply_preferences(None, stored)
        return apply_preferences(config, overrides)
    except PreferencesError as exc:
        _fail(str(exc))


def _load_entries(source: str) -> List[HistoryEntry]:
    if source == "-":
        return load_stream(sys.stdin)
    try:
        return load_history(Path(source))
    except HistoryLoadError as exc:
        _fail(str(exc))


def _result_payload(result, context_radius: int) -> Dict[str, object]:
    return {
        "input": result.item.input,
        "score": result.match.score if result.match else None,
        "indices": list(result.match.indices) if result.match else [],
        "excerpt": excerpt(result.item, result.match, context_radius),
    }


@app.command()
def search(
    history: Optional[Path] = typer.Argument(
        None,
        help="History snapshot to search (defaults to the configured history_path).",
        show_default=False,
    ),
    query: str = typer.Option(
        "",
        "--query",
        "-q",
        help="Initial filter text.",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="YAML preferences file (defaults to ~/.histsearch/config.yaml).",
    ),
    no_mouse: bool = typer.Option(
        False,
        "--no-mouse",
        help="Disable pointer hover and click handling.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Open the interactive history search dialog and print the chosen entry."""

    set_verbosity(verbose)
    if history is not None and str(history) == "-":
        _fail("Interactive search needs a history file; '-' works with rank and dedupe.")
    overrides: Dict[str, Any] = {}
    if no_mouse:
        overrides["mouse_support"] = False
    config = _build_config(config_path, **overrides)
    entries = _load_entries(str(history or config.history_path))

    dialog = HistorySearchDialog(entries, config=config)
    if query:
        dialog.set_query(query)
    selected = dialog.run()
    if selected is None:
        raise typer.Exit(code=CANCELLED_EXIT_CODE)
    typer.echo(selected.input)


@app.command("rank")
def rank_command(
    history: str = typer.Argument(..., help="History snapshot, or '-' to read lines from stdin."),
    query: str = typer.Argument(..., help="Filter text to rank against."),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        min=1,
        help=f"Maximum number of results (defaults to result_limit, {RESULT_LIMIT}).",
    ),
    context_radius: Optional[int] = typer.Option(
        None,
        "--context",
        min=0,
        help="Characters of context around matches in excerpts.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON records."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML preferences file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Rank history entries against QUERY without opening the dialog."""

    set_verbosity(verbose)
    config = _build_config(
        config_path,
        context_radius=context_radius,
        result_limit=limit,
    )
    candidates = dedupe(_load_entries(history))
    results = FuzzyRanker(limit=config.result_limit).rank(candidates, query)

    if as_json:
        payload = [_result_payload(result, config.context_radius) for result in results]
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return
    if not results:
        typer.echo(f"No history entries match '{query}'.")
        return
    get_console().print(
        build_results_table(
            results,
            title=config.title,
            context_radius=config.context_radius,
            palette=build_palette(config.color_blind_mode),
        )
    )


@app.command("dedupe")
def dedupe_command(
    history: str = typer.Argument(..., help="History snapshot, or '-' to read lines from stdin."),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON records."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Print unique history entries, most recent first."""

    set_verbosity(verbose)
    candidates = dedupe(_load_entries(history))
    if as_json:
        payload = [candidate.entry.to_dict() for candidate in candidates]
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return
    for candidate in candidates:
        typer.echo(candidate.input)


def main() -> None:
    """Entry point compatible with console_scripts."""

    app()


if __name__ == "__main__":
    main()
