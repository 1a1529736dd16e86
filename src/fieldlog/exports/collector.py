"""
Export option collection.

Asks every relevant handler for export suggestions and groups the answers by
option identity and reference identity. A handler that fails is logged and
treated as having suggested nothing.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING

from fieldlog.core.exceptions import HandlerError, ValidationError, ErrorCode, ErrorContext
from fieldlog.handlers.base import BaseHandler, HandlerRegistry, EXPORT_TAG, handler_registry
from fieldlog.models import ExportOption, ExportOptionGroup, Operation, QSO, Reference

if TYPE_CHECKING:
    from fieldlog.core.config.models import AppSettings


SEGMENT_EVENTS = ('start', 'break')


def gather_references(operation: Operation, qsos: Sequence[QSO]) -> List[Reference]:
    """
    References active during the operation.

    Segment events (``start`` and ``break``) on non-deleted QSOs carry the
    references in use from that point on. Operations without segments use
    their own reference list.
    """
    refs: List[Reference] = []
    for qso in qsos:
        if qso.deleted or qso.event is None or qso.event.event not in SEGMENT_EVENTS:
            continue
        refs.extend(qso.event.refs)

    if not refs:
        refs = list(operation.refs)

    unique: List[Reference] = []
    for ref in refs:
        if ref not in unique:
            unique.append(ref)
    return unique


class OptionCollector:
    """
    Collects export option groups from the handlers in a registry.

    Handler failures never abort a collection. Each one is logged and kept in
    ``errors`` (reset on every ``collect`` call) as a ``HandlerError``.
    """

    def __init__(self, registry: Optional[HandlerRegistry] = None):
        """
        Args:
            registry: Handler registry; defaults to the global registry
        """
        self.registry = registry if registry is not None else handler_registry
        self.errors: List[HandlerError] = []
        self.logger = logging.getLogger("fieldlog.exports.collector")

    def collect(
        self,
        operation: Operation,
        qsos: Sequence[QSO],
        settings: Optional['AppSettings'] = None
    ) -> List[ExportOptionGroup]:
        """
        Collect export option groups for an operation.

        Args:
            operation: Operation being exported
            qsos: Its contacts
            settings: Application settings passed through to handlers

        Returns:
            Flat list of groups, in no particular order

        Raises:
            ValidationError: If operation or qsos is missing
        """
        require_inputs(operation, qsos)
        self.errors = []

        groups: Dict[str, ExportOptionGroup] = {}

        for ref in gather_references(operation, qsos):
            if not ref.type:
                continue
            handler = self.registry.find_best_hook(
                f"ref:{ref.type}",
                lambda h: h.supports_export_suggestions
            )
            if handler is None:
                continue

            options = self._suggest(handler, operation, qsos, ref, settings)
            if not options:
                continue
            try:
                ref_key = handler.key_for_ref(ref)
                for option in options:
                    option_key = option.option_key(handler.key)
                    group_key = f"{option_key}-{ref_key}"
                    group = groups.get(group_key) or ExportOptionGroup(
                        option_key=option_key,
                        ref_key=ref_key,
                        handler=handler,
                        option=option
                    )
                    group.add_ref(ref)
                    groups[group_key] = group
            except Exception as e:
                self._record_failure(
                    handler, ref, e,
                    ErrorCode.HANDLER_IDENTITY_FAILED,
                    f"Handler {handler.key} failed to identify reference {ref.type} {ref.ref}: {e}"
                )

        for handler in self.registry.find_hooks(EXPORT_TAG):
            if not handler.supports_export_suggestions:
                continue
            for option in self._suggest(handler, operation, qsos, None, settings):
                option_key = option.option_key(handler.key)
                if option_key not in groups:
                    groups[option_key] = ExportOptionGroup(
                        option_key=option_key,
                        ref_key=handler.key,
                        handler=handler,
                        option=option,
                        refs=[Reference(type=handler.key)]
                    )

        self.logger.debug(f"Collected {len(groups)} export option groups for operation {operation.uuid}")
        return list(groups.values())

    def _suggest(
        self,
        handler: BaseHandler,
        operation: Operation,
        qsos: Sequence[QSO],
        ref: Optional[Reference],
        settings: Optional['AppSettings']
    ) -> List[ExportOption]:
        """Call a handler, isolating failures of the call and of each suggestion."""
        try:
            suggestions = handler.suggest_export_options(
                operation=operation,
                qsos=list(qsos),
                ref=ref,
                settings=settings
            )
        except Exception as e:
            self._record_failure(
                handler, ref, e,
                ErrorCode.HANDLER_SUGGESTION_FAILED,
                f"Handler {handler.key} failed to suggest export options: {e}"
            )
            return []

        options = []
        for suggestion in suggestions or []:
            if not suggestion:
                continue
            try:
                options.append(self._coerce(suggestion))
            except Exception as e:
                self._record_failure(
                    handler, ref, e,
                    ErrorCode.HANDLER_SUGGESTION_FAILED,
                    f"Handler {handler.key} suggested an invalid export option: {e}"
                )
        return options

    def _record_failure(
        self,
        handler: BaseHandler,
        ref: Optional[Reference],
        cause: Exception,
        error_code: ErrorCode,
        message: str
    ) -> None:
        error = HandlerError(
            message,
            error_code=error_code,
            handler_key=handler.key,
            context=ErrorContext(
                stage="collect",
                details={'ref': f"{ref.type}-{ref.ref}" if ref else None}
            ),
            cause=cause
        )
        self.errors.append(error)
        self.logger.warning(message)

    @staticmethod
    def _coerce(option: Any) -> ExportOption:
        if isinstance(option, ExportOption):
            return option
        if isinstance(option, dict):
            return ExportOption.from_dict(option)
        raise TypeError(f"Unsupported export option: {option!r}")


def collect_export_option_groups(
    operation: Operation,
    qsos: Sequence[QSO],
    settings: Optional['AppSettings'] = None,
    registry: Optional[HandlerRegistry] = None
) -> List[ExportOptionGroup]:
    """Collect export option groups using ``registry`` (or the global one)."""
    return OptionCollector(registry).collect(operation, qsos, settings)


def require_inputs(operation: Any, qsos: Any) -> None:
    if operation is None:
        raise ValidationError("An operation is required", field_name="operation")
    if qsos is None:
        raise ValidationError("A QSO list is required", field_name="qsos")
