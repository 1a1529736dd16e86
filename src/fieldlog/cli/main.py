#!/usr/bin/env python3
"""
fieldlog CLI Main Application

Typer-based command-line interface for previewing export templates and
listing the exports an operation would produce.
"""

from typing import Optional

import typer

from fieldlog.cli import __version__
from fieldlog.cli.commands import exports, templates
from fieldlog.cli.utils import console, setup_logging

# Create main Typer application
app = typer.Typer(
    name="fieldlog",
    help="Export planning for amateur-radio field operations",
    context_settings={"help_option_names": ["-h", "--help"]},
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.command("preview", help="Render a template against sample data")(templates.preview_command)
app.command("partials", help="List the partial templates")(templates.partials_command)
app.command("exports", help="List the exports for an operation file")(exports.exports_command)


def version_callback(value: bool):
    """Show version information."""
    if value:
        console.print(f"[bold cyan]fieldlog[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def app_callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version information and exit"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    fieldlog - export planning for field operations

    [bold]Quick Start:[/bold]

    • Preview a name template: [cyan]fieldlog preview '{{> RefActivityName }}'[/cyan]
    • List partials: [cyan]fieldlog partials --compact[/cyan]
    • Plan exports: [cyan]fieldlog exports operation.qson[/cyan]
    """
    setup_logging(verbose)


def main():
    """Entry point for the fieldlog console script."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
