"""
Exports Command

Resolve the export jobs for a QSON operation file and show them as a table
or as JSON.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Dict, List, Optional

import typer
from rich.table import Table
from rich.text import Text

from fieldlog.cli.utils import build_registry, console, handle_fieldlog_error, load_operation_file, load_settings
from fieldlog.core.exceptions import FieldlogError
from fieldlog.exports.resolver import ExportOptionResolver
from fieldlog.models import ExportJob, OurInfo


class OutputFormat(str, Enum):
    table = "table"
    json = "json"


def job_to_dict(job: ExportJob) -> Dict[str, Any]:
    """JSON-friendly summary of an export job."""
    return {
        'fileName': job.file_name,
        'title': job.title,
        'format': job.format,
        'exportLabel': job.export_label,
        'exportType': job.export_type,
        'handler': job.handler.key,
        'optionKey': job.option_key,
        'ref': job.ref.ref or job.ref.type,
        'station': job.our_info.call if job.our_info else None,
        'priority': job.priority,
    }


def exports_command(
    operation_file: Annotated[Path, typer.Argument(help="QSON operation file", exists=True, dir_okay=False)],
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="Settings file path")] = None,
    stations: Annotated[Optional[List[str]], typer.Option("--station", "-s", help="Station callsign to export for (repeatable)")] = None,
    compact: Annotated[Optional[bool], typer.Option("--compact/--normal", help="Use compact file names")] = None,
    output_format: Annotated[OutputFormat, typer.Option("--output-format", "-f", help="Output format")] = OutputFormat.table,
    discover: Annotated[bool, typer.Option("--discover/--no-discover", help="Load handlers from installed packages")] = True,
):
    """
    List the export files an operation would produce.

    [bold]Examples:[/bold]

    • [cyan]fieldlog exports operation.qson[/cyan]
    • [cyan]fieldlog exports operation.qson --station N0CALL --station N0CALL/P -f json[/cyan]
    """
    try:
        settings = load_settings(config, {'use_compact_file_names': compact})
        operation, qsos = load_operation_file(operation_file)
        registry = build_registry(discover=discover)
        our_infos = [OurInfo(call=call.upper()) for call in stations] if stations else None
        resolver = ExportOptionResolver(registry)
        jobs = resolver.resolve_for_stations(operation, qsos, settings, our_infos)
    except FieldlogError as e:
        handle_fieldlog_error(e)
        return

    rows = [job_to_dict(job) for job in jobs]

    if output_format == OutputFormat.json:
        typer.echo(json.dumps(rows, indent=2))
        return

    for error in registry.load_errors + resolver.errors:
        console.print(Text(f"Warning: {error.message}", style="yellow"), soft_wrap=True)

    if not rows:
        console.print("[yellow]No exports available for this operation[/yellow]")
        return

    table = Table(title=f"Exports for {operation.title or operation.uuid or operation_file.name}")
    table.add_column("File", style="cyan")
    table.add_column("Title")
    table.add_column("Label", style="green")
    table.add_column("Priority", justify="right")

    for row in rows:
        table.add_row(Text(row['fileName']), Text(row['title']), Text(row['exportLabel']), str(row['priority']))

    console.print(table)
