"""
Export planning for fieldlog.

Collects export options from handlers and resolves them into export jobs
with file names and titles rendered from templates.
"""

from fieldlog.exports.collector import OptionCollector, collect_export_option_groups, gather_references
from fieldlog.exports.context import build_template_context
from fieldlog.exports.formats import (
    FormatInfo,
    FORMATS,
    DATA_EXTENSIONS,
    DATA_FORMAT_DESCRIPTIONS,
    extension_for,
    description_for,
)
from fieldlog.exports.resolver import (
    ExportOptionResolver,
    resolve_export_jobs,
    resolve_export_jobs_for_stations,
    run_template_for_operation,
    extra_data_for_templates,
)

__all__ = [
    'OptionCollector',
    'collect_export_option_groups',
    'gather_references',
    'build_template_context',
    'FormatInfo',
    'FORMATS',
    'DATA_EXTENSIONS',
    'DATA_FORMAT_DESCRIPTIONS',
    'extension_for',
    'description_for',
    'ExportOptionResolver',
    'resolve_export_jobs',
    'resolve_export_jobs_for_stations',
    'run_template_for_operation',
    'extra_data_for_templates',
]
