"""Guid command implementation."""

from pathlib import Path

import typer
from typing_extensions import Annotated

from quickref.config import get_defaults, load_config
from quickref.project import AssetIndex

app = typer.Typer(
    help="Look up asset GUIDs",
    context_settings={"allow_interspersed_args": True},
)


@app.callback(invoke_without_command=True)
def guid(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Asset path, or a GUID to look up")],
    project: Annotated[
        Path | None, typer.Option("--project", "-p", help="Unity project directory")
    ] = None,
):
    """Print the GUID of an asset, or the asset path of a GUID."""
    defaults = get_defaults(load_config())
    project_dir = (project or Path(defaults["project_dir"])).expanduser().resolve()
    index = AssetIndex(project_dir)

    found = index.guid_for_path(path)
    if found:
        typer.echo(found)
        return

    asset = index.asset_for_guid(path)
    if asset:
        typer.echo(asset.path)
        return

    typer.echo(f"No tracked asset for '{path}' in {project_dir}", err=True)
    raise typer.Exit(1)
