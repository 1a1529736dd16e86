"""
CLI Utilities

Shared helpers for CLI commands: console output, logging setup, settings
and operation file loading, and error reporting.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from fieldlog.core.config import AppSettings, ConfigManager
from fieldlog.core.exceptions import FieldlogError, ValidationError, ErrorCode
from fieldlog.handlers import HandlerRegistry, builtin_handlers
from fieldlog.models import Operation, QSO

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Route log records through rich; DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
    )


def handle_fieldlog_error(error: FieldlogError) -> None:
    """Print a structured error and exit with status 1."""
    console.print(Panel(
        f"[red]{escape(error.get_user_message())}[/red]",
        title="[red]Error[/red]",
        border_style="red"
    ))
    raise typer.Exit(1)


def load_settings(config: Optional[str], cli_args: Optional[Dict[str, Any]] = None) -> AppSettings:
    """Load settings from the config file, environment and CLI overrides."""
    return ConfigManager(config).load_settings(cli_args=cli_args)


def build_registry(discover: bool = True) -> HandlerRegistry:
    """Registry with the built-in handlers plus any installed handler packages."""
    registry = HandlerRegistry()
    for handler in builtin_handlers():
        registry.register_handler(handler)
    if discover:
        registry.load_entry_points()
    return registry


def load_operation_file(path: Path) -> Tuple[Operation, List[QSO]]:
    """
    Load an operation and its QSOs from a QSON file.

    Accepts either ``{"operation": {...}, "qsos": [...]}`` or an operation
    object with an embedded ``qsos`` list.

    Raises:
        ValidationError: If the file cannot be read or has the wrong shape
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(
            f"Could not read operation file {path}: {e}",
            field_name="operation_file",
            field_value=str(path),
            cause=e
        )

    if not isinstance(data, dict):
        raise ValidationError(
            f"Operation file {path} must contain a JSON object",
            error_code=ErrorCode.VALIDATION_TYPE_MISMATCH,
            field_name="operation_file",
            field_value=str(path)
        )

    raw_operation = data.get('operation', data)
    if not isinstance(raw_operation, dict):
        raise ValidationError(
            f"Operation file {path} has no operation object",
            error_code=ErrorCode.VALIDATION_MISSING_FIELD,
            field_name="operation"
        )

    raw_qsos = data.get('qsos', raw_operation.get('qsos')) or []
    return Operation.from_dict(raw_operation), [QSO.from_dict(q) for q in raw_qsos]
