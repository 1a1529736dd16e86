"""
Base Handler Architecture

Defines the capability contract that activity and export handlers implement,
and the registry that maps capability tags to handlers.

Capability tags are either ``ref:<type>`` (the handler understands
references of that type, e.g. ``ref:potaActivation``) or ``export`` (a
generic exporter that applies to every operation).
"""

import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union, TYPE_CHECKING

from fieldlog.core.exceptions import HandlerError, ValidationError, ErrorCode
from fieldlog.models import ExportOption, Operation, QSO, Reference

if TYPE_CHECKING:
    from fieldlog.core.config.models import AppSettings


EXPORT_TAG = "export"
VALID_TAG_REGEX = re.compile(r'^(ref:\w+|export)$')
ENTRY_POINT_GROUP = "fieldlog.handlers"

Suggestion = Union[ExportOption, Dict[str, Any]]


class BaseHandler:
    """
    Base class for activity and export handlers.

    Subclasses set the class attributes and override the capabilities they
    provide. ``suggest_export_options`` is optional: handlers that do not
    override it are never asked for suggestions.
    """

    key: str = ""
    name: str = ""
    short_name: Optional[str] = None
    type: Optional[str] = None
    priority: int = 0
    ref_types: Sequence[str] = ()
    export_hook: bool = False

    def __init__(self, **attributes: Any):
        for attribute, value in attributes.items():
            setattr(self, attribute, value)
        if not self.key:
            raise ValidationError(f"{type(self).__name__} has no key", field_name="key")
        self.logger = logging.getLogger(f"fieldlog.handlers.{self.key}")

    @property
    def display_short_name(self) -> str:
        return self.short_name or self.name or self.key

    @property
    def supports_export_suggestions(self) -> bool:
        """True when the handler overrides ``suggest_export_options``."""
        return type(self).suggest_export_options is not BaseHandler.suggest_export_options

    def capability_tags(self) -> List[str]:
        """Tags this handler registers under."""
        tags = [f"ref:{ref_type}" for ref_type in self.ref_types]
        if self.export_hook:
            tags.append(EXPORT_TAG)
        return tags

    def suggest_export_options(
        self,
        operation: Operation,
        qsos: List[QSO],
        ref: Optional[Reference],
        settings: 'AppSettings'
    ) -> Optional[List[Suggestion]]:
        """
        Propose export options for an operation.

        Args:
            operation: The operation being exported
            qsos: Its contacts
            ref: The reference being considered, or None for export hooks
            settings: Application settings

        Returns:
            Export options (or dictionaries in the QSON option shape), or None
        """
        return None

    def key_for_ref(self, ref: Reference) -> str:
        """
        Identity of a reference for grouping exports.

        Two references with the same key produce a single export. The default
        combines type and code.
        """
        return f"{ref.type}-{ref.ref}"

    def default_export_settings(self) -> Optional[Dict[str, Any]]:
        """Handler defaults placed beneath the user's export settings."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key='{self.key}', priority={self.priority})"


class HandlerRegistry:
    """
    Registry mapping capability tags to handlers.

    Handlers under one tag are ordered by descending priority; equal
    priorities keep registration order. Registering a handler whose key is
    already present under a tag replaces the earlier registration.
    """

    def __init__(self):
        self._hooks: Dict[str, List[BaseHandler]] = {}
        self.load_errors: List[HandlerError] = []
        self.logger = logging.getLogger("fieldlog.registry")

    def register(self, tag: str, handler: BaseHandler) -> None:
        """
        Register a handler under a capability tag.

        Args:
            tag: ``ref:<type>`` or ``export``
            handler: Handler to register

        Raises:
            ValidationError: If the tag is not a valid capability tag
        """
        if not VALID_TAG_REGEX.match(tag or ""):
            raise ValidationError(
                f"Invalid hook tag {tag!r} for handler {handler.key}",
                error_code=ErrorCode.HANDLER_INVALID_TAG,
                field_name="tag",
                field_value=tag
            )

        hooks = [h for h in self._hooks.get(tag, []) if h.key != handler.key]
        hooks.append(handler)
        hooks.sort(key=lambda h: -(h.priority or 0))
        self._hooks[tag] = hooks

        self.logger.debug(f"Registered handler: {handler.key} for {tag} (priority: {handler.priority})")

    def register_handler(self, handler: BaseHandler) -> List[str]:
        """
        Register a handler under every tag it declares.

        Returns:
            The tags it was registered under
        """
        tags = handler.capability_tags()
        for tag in tags:
            self.register(tag, handler)
        return tags

    def unregister(self, handler: BaseHandler) -> None:
        """Remove a handler (by key) from every tag."""
        for tag in list(self._hooks):
            self._hooks[tag] = [h for h in self._hooks[tag] if h.key != handler.key]
            if not self._hooks[tag]:
                del self._hooks[tag]
        self.logger.debug(f"Unregistered handler: {handler.key}")

    def find_hooks(self, tag: str, key: Optional[str] = None) -> List[BaseHandler]:
        """
        Handlers registered under a tag, best first.

        Args:
            tag: Capability tag
            key: Optional handler key to filter on
        """
        hooks = list(self._hooks.get(tag, []))
        if key:
            hooks = [h for h in hooks if h.key == key]
        return hooks

    def find_best_hook(
        self,
        tag: str,
        predicate: Optional[Callable[[BaseHandler], bool]] = None
    ) -> Optional[BaseHandler]:
        """
        The best handler for a tag, optionally the best one satisfying ``predicate``.
        """
        for handler in self._hooks.get(tag, []):
            if predicate is None or predicate(handler):
                return handler
        return None

    def tags(self) -> List[str]:
        return sorted(self._hooks)

    def clear(self) -> None:
        """Clear all registrations."""
        self._hooks.clear()
        self.load_errors.clear()
        self.logger.debug("Cleared handler registry")

    def load_entry_points(self, group: str = ENTRY_POINT_GROUP) -> List[BaseHandler]:
        """
        Discover and register handlers published as entry points.

        Each entry point may name a handler class, a handler instance, or a
        callable returning an iterable of handlers. Entry points that fail to
        load are logged, kept in ``load_errors`` and skipped.

        Returns:
            Handlers registered by this call
        """
        from importlib.metadata import entry_points

        loaded: List[BaseHandler] = []
        for entry_point in entry_points(group=group):
            try:
                handlers = self._instantiate(entry_point.load())
            except Exception as e:
                error = HandlerError(
                    f"Failed to load handler entry point {entry_point.name}: {e}",
                    error_code=ErrorCode.HANDLER_LOAD_FAILED,
                    handler_key=entry_point.name,
                    cause=e
                )
                self.load_errors.append(error)
                self.logger.warning(error.message)
                continue
            for handler in handlers:
                self.register_handler(handler)
                loaded.append(handler)
        return loaded

    @staticmethod
    def _instantiate(obj: Any) -> Iterable[BaseHandler]:
        if isinstance(obj, BaseHandler):
            return [obj]
        if isinstance(obj, type) and issubclass(obj, BaseHandler):
            return [obj()]
        if callable(obj):
            result = obj()
            if isinstance(result, BaseHandler):
                return [result]
            return list(result)
        raise TypeError(f"{obj!r} is not a handler")

    def get_registry_stats(self) -> Dict[str, Any]:
        """Number of handlers per tag and the handler list."""
        return {
            'total_tags': len(self._hooks),
            'handlers_by_tag': {tag: [h.key for h in hooks] for tag, hooks in self._hooks.items()},
        }


# Global registry instance
handler_registry = HandlerRegistry()


def register_handler(handler: BaseHandler) -> List[str]:
    """Register a handler with the global registry."""
    return handler_registry.register_handler(handler)
