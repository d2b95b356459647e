"""History command implementation.

Lists, shows and removes past searches.
"""

import json

import typer
from typing_extensions import Annotated

from quickref.config import get_defaults, load_config
from quickref.history import SearchHistory

app = typer.Typer(help="Browse past searches")


def _history() -> SearchHistory:
    defaults = get_defaults(load_config())
    return SearchHistory(limit=defaults["history_limit"])


@app.command("list")
def list_entries():
    """List past searches, newest first."""
    entries = _history().entries()

    if not entries:
        typer.echo("No search history.")
        return

    for index, entry in enumerate(entries):
        target = entry.get("target") or {}
        label = target.get("path") or entry.get("search_text", "?")
        count = len(entry.get("matched", [])) + len(entry.get("unresolved", []))
        flag = " (incomplete)" if entry.get("truncated") else ""
        typer.echo(f"[{index}] {label} - {count} results{flag}")


@app.command()
def show(
    index: Annotated[int, typer.Argument(help="Entry number from 'history list'")],
    format: Annotated[
        str, typer.Option("--format", help="Output format: summary, json")
    ] = "summary",
):
    """Show the results of a past search."""
    entries = _history().entries()

    if not 0 <= index < len(entries):
        typer.echo(f"No history entry at index {index}.", err=True)
        raise typer.Exit(1)

    entry = entries[index]

    if format == "json":
        typer.echo(json.dumps(entry, indent=2))
        return

    typer.echo(f"Search: {entry.get('search_text')}")
    typer.echo(f"When: {entry.get('searched_at')}")
    for match in entry.get("matched", []):
        typer.echo(f"  {match.get('path')}")
    for path in entry.get("unresolved", []):
        typer.echo(f"  {path}")


@app.command()
def remove(
    index: Annotated[int, typer.Argument(help="Entry number from 'history list'")],
):
    """Remove one entry from history."""
    try:
        removed = _history().remove(index)
    except IndexError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)

    typer.echo(f"Removed search for {removed.get('search_text')}")


@app.command()
def clear():
    """Delete all search history."""
    _history().clear()
    typer.echo("History cleared.")
