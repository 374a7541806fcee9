"""Command line interface for arraysearch."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from arraysearch.config import DEFAULT_MAX_DEPTH, SearchOptions
from arraysearch.matchers import MATCHERS, get_matcher
from arraysearch.search import Searcher
from arraysearch.traversal.paths import resolve_path
from arraysearch.utils.files import load_records


console = Console()
app = typer.Typer(help="arraysearch - filter JSON records by nested values")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load(data: Path) -> List[Any]:
    try:
        return load_records(data)
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _decode_term(term: str) -> Any:
    """Read ``123``, ``true`` or ``null`` as JSON literals, anything else as text."""
    try:
        return json.loads(term)
    except json.JSONDecodeError:
        return term


def _summarize(record: Any, width: int = 120) -> str:
    text = json.dumps(record, ensure_ascii=False, default=str)
    return text if len(text) <= width else text[: width - 3] + "..."


@app.command()
def search(
    data: Path = typer.Argument(..., help="JSON array or JSON lines file", resolve_path=True),
    term: str = typer.Argument(..., help="Search term"),
    keys: Optional[List[str]] = typer.Option(
        None, "--key", "-k", help="Dot path to search, e.g. orders[].item (repeatable)"
    ),
    match: str = typer.Option(
        "default", "--match", "-m", help=f"Matcher: {', '.join(sorted(MATCHERS))}"
    ),
    flags: str = typer.Option("i", help="Regular expression flags for --match regex"),
    max_depth: int = typer.Option(DEFAULT_MAX_DEPTH, help="Maximum nesting depth"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Disable the path cache"),
    parallel: bool = typer.Option(False, "--parallel", help="Filter large inputs in chunks"),
    as_json: bool = typer.Option(False, "--json", help="Print matches as JSON lines"),
    limit: int = typer.Option(50, help="Maximum number of rows to display"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print the records matching TERM."""
    _setup_logging(verbose)
    try:
        matcher = get_matcher(match, flags)
        options = SearchOptions(
            keys=keys or None,
            custom_match=matcher,
            max_depth=max_depth,
            enable_path_cache=not no_cache,
            parallel=parallel,
        )
    except (TypeError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    records = _load(data)
    query = _decode_term(term) if match == "exact" else term
    results = Searcher(options).search(records, query)

    if as_json:
        for record in results:
            typer.echo(json.dumps(record, ensure_ascii=False, default=str))
        return

    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#")
    table.add_column("Record")
    for index, record in enumerate(results[:limit]):
        table.add_row(str(index), _summarize(record))

    console.print(table)
    console.print(f"{len(results)} of {len(records)} records matched.")


@app.command()
def resolve(
    data: Path = typer.Argument(..., help="JSON array or JSON lines file", resolve_path=True),
    path: str = typer.Argument(..., help="Dot path, e.g. orders[].item"),
    max_depth: int = typer.Option(DEFAULT_MAX_DEPTH, help="Maximum flattening depth"),
) -> None:
    """Show the values each record yields at PATH."""
    if not path.strip():
        raise typer.BadParameter("Path must not be empty")
    records = _load(data)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#")
    table.add_column("Values")
    for index, record in enumerate(records):
        values = resolve_path(record, path, max_depth)
        table.add_row(str(index), _summarize(values))

    console.print(table)
