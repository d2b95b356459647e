"""Main CLI entry point for quickref."""

import typer
from typing_extensions import Annotated

from quickref import __version__
from quickref.cli import commands
from quickref.config import get_defaults, load_config
from quickref.logging import setup_logging

app = typer.Typer(
    name="quickref",
    help="Find references to Unity assets across a project",
    no_args_is_help=True,
)

# Register command groups
app.add_typer(commands.find.app, name="find")
app.add_typer(commands.guid.app, name="guid")
app.add_typer(commands.history.app, name="history")
app.add_typer(commands.config.app, name="config")


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
):
    """Find references to Unity assets across a project."""
    level = "DEBUG" if verbose else get_defaults(load_config())["log_level"]
    setup_logging(level)


@app.command()
def version():
    """Show version information."""
    typer.echo(f"quickref version {__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
