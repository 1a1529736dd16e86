"""
Template processing system for fieldlog.

Jinja2-based compilation of export file name and title templates, with a
fixed helper library and named partials.
"""

from .engine import ExportTemplateEngine, CompiledTemplate, DEFAULT_TEMPLATE_DATA
from .helpers import HELPERS
from .partials import (
    BASE_PARTIALS,
    DEFAULT_NAME_TEMPLATE,
    DEFAULT_TITLE_TEMPLATE,
    base_partial_templates,
)

__all__ = [
    'ExportTemplateEngine',
    'CompiledTemplate',
    'DEFAULT_TEMPLATE_DATA',
    'HELPERS',
    'BASE_PARTIALS',
    'DEFAULT_NAME_TEMPLATE',
    'DEFAULT_TITLE_TEMPLATE',
    'base_partial_templates',
]
