"""
Template Commands

Preview export name and title templates against sample data and list the
partial templates available to them.
"""

from typing import Annotated, Optional

import typer
from rich.table import Table
from rich.text import Text

from fieldlog.cli.sample import sample_preview
from fieldlog.cli.utils import console, handle_fieldlog_error, load_settings
from fieldlog.core.exceptions import FieldlogError
from fieldlog.exports.resolver import partials_for_settings, run_template_for_operation


def preview_command(
    template: Annotated[str, typer.Argument(help="Template to render, e.g. '{{> RefActivityName }}'")],
    compact: Annotated[Optional[bool], typer.Option("--compact/--normal", help="Use compact file name partials")] = None,
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="Settings file path")] = None,
):
    """
    Render a template against a sample park activation.

    [bold]Examples:[/bold]

    • [cyan]fieldlog preview '{{> RefActivityName }}'[/cyan]
    • [cyan]fieldlog preview --compact '{{ log.station | downcase }}-{{ op.date | compact }}'[/cyan]
    """
    try:
        settings = load_settings(config, {'use_compact_file_names': compact})
        result = run_template_for_operation(template, settings, **sample_preview())
    except FieldlogError as e:
        handle_fieldlog_error(e)
        return

    console.print(result, markup=False, highlight=False, soft_wrap=True)
    if result.startswith("ERROR:"):
        raise typer.Exit(1)


def partials_command(
    compact: Annotated[Optional[bool], typer.Option("--compact/--normal", help="Show compact file name partials")] = None,
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="Settings file path")] = None,
):
    """
    List the partial templates, including overrides from the default export settings.
    """
    try:
        settings = load_settings(config, {'use_compact_file_names': compact})
    except FieldlogError as e:
        handle_fieldlog_error(e)
        return

    table = Table(title="Partial Templates")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Template", style="white")

    for name, source in sorted(partials_for_settings(settings).items()):
        table.add_row(name, Text(source))

    console.print(table)
