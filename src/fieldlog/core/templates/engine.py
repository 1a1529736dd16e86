"""
Export Template Engine

Jinja2-based compilation of export name and title templates. Each compiled
template gets its own environment, built from an explicit helper table and
partial table, so nothing is registered globally.
"""

import re
import logging
from typing import Any, Callable, Dict, List, Optional

from jinja2 import (
    ChainableUndefined,
    DictLoader,
    Environment,
    Template,
    TemplateError as JinjaTemplateError,
)

from fieldlog.core.exceptions import TemplateEvaluationError
from fieldlog.core.templates.helpers import HELPERS, CALLABLE_ALIASES


DEFAULT_TEMPLATE_DATA: Dict[str, Any] = {
    'app': {
        'name': 'fieldlog Portable Logger',
        'shortName': 'fieldlog',
    }
}

ERROR_PREFIX = "ERROR IN TEMPLATE"


def _finalize(value: Any) -> Any:
    """Render missing leaves as empty strings rather than 'None'."""
    return "" if value is None else value


class CompiledTemplate:
    """
    A compiled export template, callable with a context.

    Templates that failed to compile still produce a callable: it renders an
    ``ERROR IN TEMPLATE`` marker followed by the original source, so a broken
    user template shows up in the resulting file name.
    """

    def __init__(self, source: str, template: Optional[Template] = None, error: Optional[str] = None):
        self.source = source
        self.error = error
        self._template = template

    @property
    def failed(self) -> bool:
        """True when compilation failed."""
        return self._template is None

    def __call__(self, context: Dict[str, Any], data: Optional[Dict[str, Any]] = None) -> str:
        """
        Evaluate the template.

        Args:
            context: Template context (``log``, ``op``, ``qso``...)
            data: Extra data exposed to templates as ``data``

        Returns:
            Rendered string

        Raises:
            TemplateEvaluationError: If rendering fails
        """
        if self._template is None:
            return f"{ERROR_PREFIX} {self.source}"

        variables = dict(context)
        variables['data'] = DEFAULT_TEMPLATE_DATA if data is None else data
        try:
            return self._template.render(variables)
        except JinjaTemplateError as e:
            raise TemplateEvaluationError(e.message or str(e), template=self.source, cause=e)
        except Exception as e:
            # helper failures
            raise TemplateEvaluationError(str(e), template=self.source, cause=e)

    def __repr__(self) -> str:
        state = "failed" if self.failed else "ok"
        return f"CompiledTemplate({self.source!r}, {state})"


class ExportTemplateEngine:
    """
    Compiles export templates with a fixed helper table and per-call partials.

    Besides plain Jinja2 syntax, the Handlebars-style partial shorthand
    ``{{> Name }}`` is accepted and converted to ``{% include "Name" %}``.
    """

    def __init__(self, helpers: Optional[Dict[str, Callable[..., Any]]] = None):
        """
        Initialize the template engine.

        Args:
            helpers: Helper table; defaults to the built-in helper library
        """
        self.logger = logging.getLogger(__name__)
        self.helpers = dict(HELPERS if helpers is None else helpers)

    def compile(self, source: Optional[str], partials: Optional[Dict[str, str]] = None) -> CompiledTemplate:
        """
        Compile a template string.

        Never raises: syntax errors produce an error template.

        Args:
            source: Template source (None is treated as empty)
            partials: Partial templates available for inclusion

        Returns:
            CompiledTemplate
        """
        source = source or ""
        env = self._create_environment(partials or {})
        try:
            template = env.from_string(self._convert_partial_shorthand(source))
        except JinjaTemplateError as e:
            self.logger.warning(f"Error compiling template {source!r}: {e}")
            return CompiledTemplate(source, error=str(e))
        return CompiledTemplate(source, template=template)

    def render(
        self,
        source: Optional[str],
        context: Dict[str, Any],
        partials: Optional[Dict[str, str]] = None,
        data: Optional[Dict[str, Any]] = None
    ) -> str:
        """Compile and evaluate a template in one step."""
        return self.compile(source, partials)(context, data)

    def validate_template(self, source: str, partials: Optional[Dict[str, str]] = None) -> List[str]:
        """
        Validate a template string.

        Args:
            source: Template string to validate
            partials: Partials the template may include

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []
        compiled = self.compile(source, partials)
        if compiled.failed:
            errors.append(f"Template syntax error: {compiled.error}")
            return errors

        for name in self._find_includes(self._convert_partial_shorthand(source)):
            if name not in (partials or {}):
                errors.append(f"Unknown partial: {name}")
        return errors

    def _create_environment(self, partials: Dict[str, str]) -> Environment:
        """Build a fresh environment with helpers and partials registered."""
        env = Environment(
            loader=DictLoader({
                name: self._convert_partial_shorthand(text) for name, text in partials.items()
            }),
            autoescape=False,  # file names and titles, not HTML
            undefined=ChainableUndefined,
            finalize=_finalize,
        )
        for name, helper in self.helpers.items():
            env.filters[name] = helper
            env.globals[CALLABLE_ALIASES.get(name, name)] = helper
        return env

    @staticmethod
    def _convert_partial_shorthand(template: str) -> str:
        """
        Convert ``{{> Name }}`` partial inclusions to Jinja2 ``include`` tags.

        Args:
            template: Template string that might use the shorthand

        Returns:
            Jinja2-compatible template string
        """
        return re.sub(r'\{\{>\s*([A-Za-z_][\w.-]*)\s*\}\}', r'{% include "\1" %}', template)

    @staticmethod
    def _find_includes(template: str) -> List[str]:
        return re.findall(r'\{%-?\s*include\s+["\']([^"\']+)["\']', template)
