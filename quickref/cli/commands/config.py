"""Config command implementation.

Manages the quickref configuration file.
"""

import typer
from typing_extensions import Annotated

from quickref.config import (
    CONFIG_FILE,
    get_defaults,
    init_config,
    load_config,
    set_config_value,
)
from quickref.config.paths import CONFIG_DIR

app = typer.Typer(help="Manage configuration")


@app.command()
def init(
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Overwrite existing config")
    ] = False,
):
    """Initialize configuration directory and template config file."""
    created = init_config(overwrite=force)

    if created:
        typer.echo(f"Created config directory: {CONFIG_DIR}")
        typer.echo(f"Created config file: {CONFIG_FILE}")
        typer.echo()
        typer.echo("Edit the config file to set your project directory.")
    else:
        typer.echo(f"Config already exists at {CONFIG_FILE}")
        typer.echo("Use --force to overwrite.")


@app.command()
def show():
    """Display the effective configuration.

    Values missing from the config file are shown with their defaults.
    """
    config = load_config()

    if not config:
        typer.echo(f"No config file at {CONFIG_FILE}; using defaults.")
        typer.echo()

    typer.echo("[defaults]")
    for key, value in get_defaults(config).items():
        typer.echo(f"  {key} = {value}")


@app.command("set")
def set_value(
    key: Annotated[
        str,
        typer.Argument(
            help="Configuration key (dot notation, e.g., 'defaults.max_results')"
        ),
    ],
    value: Annotated[str, typer.Argument(help="Configuration value")],
):
    """Set a configuration value using dot notation.

    Examples:
        quickref config set defaults.max_results 200
        quickref config set defaults.extensions prefab,unity,mat,asset
    """
    try:
        set_config_value(key, value)
        typer.echo(f"Set {key} = {value}")
    except ValueError as e:
        typer.echo(f"Invalid value: {e}", err=True)
        raise typer.Exit(1)
