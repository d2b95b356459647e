"""Find command implementation."""

import json
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from enum import Enum
from pathlib import Path

import typer
from typing_extensions import Annotated

from quickref.config import get_defaults, load_config
from quickref.errors import InvalidArgumentError
from quickref.history import SearchHistory
from quickref.project import find_anchors
from quickref.search import ReferenceFinder, SearchResult

# Options may follow TARGET, e.g. `quickref find <guid> --project ~/Game`
app = typer.Typer(
    help="Find references to an asset",
    context_settings={"allow_interspersed_args": True},
)


class OutputFormat(str, Enum):
    """Output formats for search results."""
    summary = "summary"
    json = "json"
    paths = "paths"


@app.callback(invoke_without_command=True)
def find(
    ctx: typer.Context,
    target: Annotated[
        str, typer.Argument(help="Asset GUID, asset path, or any text to search for")
    ],
    project: Annotated[
        Path | None, typer.Option("--project", "-p", help="Unity project directory")
    ] = None,
    root: Annotated[
        list[str] | None,
        typer.Option("--root", "-r", help="Directory to search (repeatable)"),
    ] = None,
    ext: Annotated[
        list[str] | None,
        typer.Option("--ext", "-e", help="File extension to search (repeatable)"),
    ] = None,
    format: Annotated[
        OutputFormat, typer.Option("--format", help="Output format: summary, json, paths")
    ] = OutputFormat.summary,
    anchors: Annotated[
        bool, typer.Option("--anchors", help="Show the fileID of each referencing object")
    ] = False,
    no_history: Annotated[
        bool, typer.Option("--no-history", help="Don't record this search in history")
    ] = False,
):
    """Find references to an asset across the project."""
    defaults = get_defaults(load_config())
    project_dir = (project or Path(defaults["project_dir"])).expanduser().resolve()

    if not (project_dir / "Assets").is_dir():
        typer.echo(f"Not a Unity project (no Assets directory): {project_dir}", err=True)
        raise typer.Exit(1)

    finder = ReferenceFinder(
        project_dir,
        roots=root or defaults["roots"],
        extensions=ext or defaults["extensions"],
        max_results=defaults["max_results"],
        max_workers=defaults["max_workers"],
    )

    try:
        result = _run_cancellable(finder, target)
    except InvalidArgumentError as e:
        typer.echo(f"Invalid search: {e}", err=True)
        raise typer.Exit(1)

    if result.cancelled:
        typer.echo("Search cancelled.", err=True)
        raise typer.Exit(130)

    if result.unavailable:
        typer.echo(
            f"Search tool '{finder.backend.tool}' is not available on this system.",
            err=True,
        )
        raise typer.Exit(1)

    file_ids = _collect_anchors(project_dir, result) if anchors else {}

    if format == OutputFormat.json:
        data = result.to_dict()
        if anchors:
            for entry in data["matched"]:
                entry["file_ids"] = file_ids.get(entry["path"], [])
        typer.echo(json.dumps(data, indent=2))
    elif format == OutputFormat.paths:
        for asset in result.matched:
            typer.echo(asset.path)
        for path in result.unresolved:
            typer.echo(path)
    else:
        _display_summary(result, file_ids)

    if result.truncated:
        typer.echo(
            f"Warning: more than {finder.max_results} results; list is incomplete.",
            err=True,
        )

    if not no_history:
        SearchHistory(limit=defaults["history_limit"]).add(result)


def _run_cancellable(finder: ReferenceFinder, target: str) -> SearchResult:
    """Run the search in a worker thread so Ctrl+C can cancel it cleanly."""
    cancel_event = threading.Event()
    with ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(finder.find, target, cancel_event=cancel_event)
        while True:
            try:
                return future.result(timeout=0.1)
            except FuturesTimeoutError:
                continue
            except KeyboardInterrupt:
                # Kill running search processes, then collect the cancelled result
                cancel_event.set()
                return future.result()


def _collect_anchors(project_dir: Path, result: SearchResult) -> dict[str, list[int]]:
    """Map each matched asset path to the fileIDs of its referencing objects."""
    file_ids = {}
    for asset in result.matched:
        lines = result.hit_lines.get(asset, [])
        file_ids[asset.path] = find_anchors(project_dir / asset.path, lines)
    return file_ids


def _display_summary(result: SearchResult, file_ids: dict[str, list[int]]) -> None:
    if result.target is not None:
        typer.echo(f"Target: {result.target.path} ({result.target.guid})")
    else:
        typer.echo(f"Target: {result.search_text}")
    typer.echo()

    if not result.matched and not result.unresolved:
        typer.echo("No references found.")

    if result.matched:
        typer.echo(f"Found {len(result.matched)} references:")
        for asset in result.matched:
            typer.echo(f"  {asset.path}")
            if asset.path in file_ids:
                for file_id in file_ids[asset.path]:
                    typer.echo(f"    FileID: {file_id}")

    if result.unresolved:
        if result.matched:
            typer.echo()
        typer.echo(f"Found {len(result.unresolved)} non-asset references:")
        for path in result.unresolved:
            typer.echo(f"  {path}")

    if result.failed_invocations:
        typer.echo()
        typer.echo(
            f"{result.failed_invocations} search(es) failed; results may be partial."
        )

    typer.echo()
    typer.echo(f"Search took {result.duration:.2f}s")
