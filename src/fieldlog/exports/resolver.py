"""
Export Option Resolver

Turns collected export option groups into concrete export jobs: resolves the
layered template settings for each group, compiles its name and title
templates once, and evaluates them for every reference in the group.

Template failures never abort the listing. A template that does not compile
renders an ``ERROR IN TEMPLATE`` marker, and one that fails while rendering
is replaced by ``ERROR: <message>`` for that job only.
"""

import copy
import logging
from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING

from fieldlog.core.config.manager import select_export_settings, select_default_export_settings
from fieldlog.core.config.models import DEFAULT_EXPORT_SETTINGS_KEY, ExportSettings
from fieldlog.core.exceptions import ErrorCode, ErrorContext, HandlerError, TemplateEvaluationError
from fieldlog.core.templates.engine import CompiledTemplate, ExportTemplateEngine, DEFAULT_TEMPLATE_DATA
from fieldlog.core.templates.partials import DEFAULT_NAME_TEMPLATE, DEFAULT_TITLE_TEMPLATE, base_partial_templates
from fieldlog.exports.collector import OptionCollector, require_inputs
from fieldlog.exports.context import build_template_context
from fieldlog.exports.formats import description_for, extension_for
from fieldlog.handlers.base import BaseHandler, HandlerRegistry
from fieldlog.models import ExportJob, ExportOptionGroup, Operation, OurInfo, QSO, Reference, coerce_priority
from fieldlog.utils import collapse_whitespace, ensure_extension, sanitize_filename

if TYPE_CHECKING:
    from fieldlog.core.config.models import AppSettings


logger = logging.getLogger("fieldlog.exports.resolver")

FALLBACK_FILE_NAME = "export"


def extra_data_for_templates(settings: Optional['AppSettings'] = None) -> Dict[str, Any]:
    """Data exposed to templates as ``data`` (application name and short name)."""
    return copy.deepcopy(DEFAULT_TEMPLATE_DATA)


def partials_for_settings(
    settings: Optional['AppSettings'],
    export_settings: Optional[ExportSettings] = None
) -> Dict[str, str]:
    """
    Partial table for a compilation.

    Overrides from the global ``default`` export settings apply first, then
    any from the export's own settings.
    """
    overrides = dict(select_default_export_settings(settings).partial_overrides())
    if export_settings is not None:
        overrides.update(export_settings.partial_overrides())
    compact = bool(settings.use_compact_file_names) if settings is not None else False
    return base_partial_templates(use_compact_file_names=compact, overrides=overrides)


class ExportOptionResolver:
    """
    Resolves export jobs for an operation.

    Handler failures found while collecting options or reading a handler's
    default settings are logged and listed in ``errors`` after each run.

    Example:
        resolver = ExportOptionResolver(registry)
        for job in resolver.resolve(operation, qsos, settings, OurInfo(call="N0CALL")):
            print(job.file_name, job.title)
    """

    def __init__(
        self,
        registry: Optional[HandlerRegistry] = None,
        engine: Optional[ExportTemplateEngine] = None
    ):
        """
        Args:
            registry: Handler registry; defaults to the global registry
            engine: Template engine; defaults to one with the built-in helpers
        """
        self.collector = OptionCollector(registry)
        self.engine = engine or ExportTemplateEngine()
        self.settings_errors: List[HandlerError] = []
        self.logger = logger

    @property
    def registry(self) -> HandlerRegistry:
        return self.collector.registry

    @property
    def errors(self) -> List[HandlerError]:
        """Handler failures of the last run, collection first."""
        return self.collector.errors + self.settings_errors

    def resolve(
        self,
        operation: Operation,
        qsos: Sequence[QSO],
        settings: Optional['AppSettings'],
        our_info: Optional[OurInfo]
    ) -> List[ExportJob]:
        """
        Resolve the export jobs for one station identity.

        Args:
            operation: Operation being exported
            qsos: Its contacts
            settings: Application settings
            our_info: Station identity used in file names and titles

        Returns:
            Export jobs sorted by descending priority

        Raises:
            ValidationError: If operation or qsos is missing
        """
        return self.resolve_for_stations(operation, qsos, settings, [our_info])

    def resolve_for_stations(
        self,
        operation: Operation,
        qsos: Sequence[QSO],
        settings: Optional['AppSettings'],
        our_infos: Optional[Sequence[Optional[OurInfo]]] = None
    ) -> List[ExportJob]:
        """
        Resolve export jobs for several station identities.

        Options are collected once and resolved per station identity. Without
        ``our_infos``, the operation's station call and its additional station
        calls are used, falling back to the configured operator call.

        Returns:
            Jobs for all stations, sorted by descending priority
        """
        require_inputs(operation, qsos)

        if our_infos is None:
            calls = operation.all_station_calls
            if not calls and settings is not None and settings.operator_call:
                calls = [settings.operator_call]
            our_infos = [OurInfo(call=call) for call in calls]

        self.settings_errors = []
        groups = self.collector.collect(operation, qsos, settings)

        jobs: List[ExportJob] = []
        for our_info in our_infos:
            jobs.extend(self.resolve_groups(groups, operation, settings, our_info))
        return sort_jobs(jobs)

    def resolve_groups(
        self,
        groups: Sequence[ExportOptionGroup],
        operation: Operation,
        settings: Optional['AppSettings'],
        our_info: Optional[OurInfo]
    ) -> List[ExportJob]:
        """Resolve already collected groups into sorted export jobs."""
        jobs: List[ExportJob] = []
        for group in groups:
            jobs.extend(self._resolve_group(group, operation, settings, our_info))
        return sort_jobs(jobs)

    def export_settings_for(self, group: ExportOptionGroup, settings: Optional['AppSettings']) -> ExportSettings:
        """
        Resolve the template settings for a group.

        The user's settings for the option key are layered over the handler's
        default export settings. When they set ``custom_templates`` to False,
        the global default settings are used instead, keeping only the
        ``private_data`` flag of the discarded settings.

        Handler defaults that fail or do not validate are ignored.
        """
        export_settings = select_export_settings(
            settings,
            group.option_key,
            self._handler_defaults(group)
        )
        if export_settings.custom_templates is False:
            private_data = export_settings.private_data
            export_settings = select_export_settings(settings, DEFAULT_EXPORT_SETTINGS_KEY)
            export_settings.private_data = private_data
        return export_settings

    def _handler_defaults(self, group: ExportOptionGroup) -> Optional[ExportSettings]:
        handler = group.handler
        try:
            defaults = handler.default_export_settings()
            if not defaults:
                return None
            if isinstance(defaults, ExportSettings):
                return defaults
            return ExportSettings.model_validate(defaults)
        except Exception as e:
            message = f"Ignoring default export settings of handler {handler.key} for {group.option_key}: {e}"
            self.settings_errors.append(HandlerError(
                message,
                error_code=ErrorCode.HANDLER_SETTINGS_INVALID,
                handler_key=handler.key,
                context=ErrorContext(stage="export_settings", option_key=group.option_key),
                cause=e
            ))
            self.logger.warning(message)
            return None

    def _resolve_group(
        self,
        group: ExportOptionGroup,
        operation: Operation,
        settings: Optional['AppSettings'],
        our_info: Optional[OurInfo]
    ) -> List[ExportJob]:
        option = group.option
        handler = group.handler
        export_settings = self.export_settings_for(group, settings)

        partials = partials_for_settings(settings, export_settings)
        name_template = self.engine.compile(
            export_settings.name_template or option.name_template or DEFAULT_NAME_TEMPLATE,
            partials
        )
        title_template = self.engine.compile(
            export_settings.title_template or option.title_template or DEFAULT_TITLE_TEMPLATE,
            partials
        )
        data = extra_data_for_templates(settings)

        extension = extension_for(option.format)
        export_label = (
            option.export_label
            or option.export_name
            or f"{handler.short_name or handler.name} {description_for(option.format)}"
        )
        export_type = option.export_type or handler.key

        jobs = []
        for ref in group.refs:
            context = build_template_context(
                option=option,
                settings=settings,
                operation=operation,
                our_info=our_info,
                handler=handler,
                ref=ref
            )

            title = collapse_whitespace(self._evaluate(title_template, context, data, "title", handler))
            context['log']['title'] = title

            name = collapse_whitespace(self._evaluate(name_template, context, data, "name", handler))
            file_name = sanitize_filename(ensure_extension(name or FALLBACK_FILE_NAME, extension))

            jobs.append(ExportJob(
                format=option.format,
                file_name=file_name,
                title=title,
                export_label=export_label,
                export_type=export_type,
                handler=handler,
                ref=ref,
                operation=operation,
                our_info=our_info,
                option=option,
                option_key=group.option_key,
                priority=coerce_priority(option.priority) or 0,
                settings=settings,
                export_settings=export_settings,
            ))
        return jobs

    def _evaluate(
        self,
        template: CompiledTemplate,
        context: Dict[str, Any],
        data: Dict[str, Any],
        field: str,
        handler: BaseHandler
    ) -> str:
        try:
            return template(context, data)
        except TemplateEvaluationError as e:
            self.logger.warning(f"Error evaluating {field} template {template.source!r} for {handler.key}: {e.message}")
            return f"ERROR: {e.message}"


def sort_jobs(jobs: List[ExportJob]) -> List[ExportJob]:
    """Sort jobs by descending priority; missing priority counts as 0."""
    return sorted(jobs, key=lambda job: -(coerce_priority(job.priority) or 0))


def resolve_export_jobs(
    operation: Operation,
    qsos: Sequence[QSO],
    settings: Optional['AppSettings'],
    our_info: Optional[OurInfo],
    registry: Optional[HandlerRegistry] = None,
    engine: Optional[ExportTemplateEngine] = None
) -> List[ExportJob]:
    """Resolve export jobs for one station identity."""
    return ExportOptionResolver(registry, engine).resolve(operation, qsos, settings, our_info)


def resolve_export_jobs_for_stations(
    operation: Operation,
    qsos: Sequence[QSO],
    settings: Optional['AppSettings'],
    our_infos: Optional[Sequence[OurInfo]] = None,
    registry: Optional[HandlerRegistry] = None,
    engine: Optional[ExportTemplateEngine] = None
) -> List[ExportJob]:
    """Resolve export jobs for every station callsign used in the operation."""
    return ExportOptionResolver(registry, engine).resolve_for_stations(operation, qsos, settings, our_infos)


def run_template_for_operation(
    template: Optional[str],
    settings: Optional['AppSettings'],
    operation: Optional[Operation] = None,
    our_info: Optional[OurInfo] = None,
    handler: Optional[BaseHandler] = None,
    ref: Optional[Reference] = None,
    qso: Optional[QSO] = None,
    engine: Optional[ExportTemplateEngine] = None
) -> str:
    """
    Compile and evaluate a single template, for previews.

    Returns:
        The rendered text, or ``ERROR: <template>`` if it cannot be rendered
    """
    engine = engine or ExportTemplateEngine()
    compiled = engine.compile(template, partials_for_settings(settings))
    if compiled.failed:
        return f"ERROR: {template}"

    context = build_template_context(
        settings=settings,
        operation=operation,
        our_info=our_info,
        handler=handler,
        ref=ref,
        qso=qso
    )
    try:
        return compiled(context, extra_data_for_templates(settings))
    except TemplateEvaluationError as e:
        logger.warning(f"Error running template {template!r}: {e.message}")
        return f"ERROR: {template}"
