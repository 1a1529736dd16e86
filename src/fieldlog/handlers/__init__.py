"""
Handlers for fieldlog

Activity and export handlers plug into export planning through the
capability contract defined here and are looked up by capability tag.
"""

from typing import List

from fieldlog.handlers.base import (
    BaseHandler,
    HandlerRegistry,
    handler_registry,
    register_handler,
    EXPORT_TAG,
    ENTRY_POINT_GROUP,
)
from fieldlog.handlers.devmode import DevModeExportHandler


def builtin_handlers() -> List[BaseHandler]:
    """Handlers shipped with fieldlog itself."""
    return [DevModeExportHandler()]


__all__ = [
    'BaseHandler',
    'HandlerRegistry',
    'handler_registry',
    'register_handler',
    'builtin_handlers',
    'DevModeExportHandler',
    'EXPORT_TAG',
    'ENTRY_POINT_GROUP',
]
