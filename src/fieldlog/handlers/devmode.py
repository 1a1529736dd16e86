"""
Developer mode export handler.

Offers a raw QSON dump of every operation while developer mode is enabled.
"""

from typing import Any, Dict, List, Optional

from fieldlog.handlers.base import BaseHandler
from fieldlog.models import ExportOption


class DevModeExportHandler(BaseHandler):
    """Generic export handler that suggests a QSON export in developer mode."""

    key = "devmode"
    name = "Developer Mode"
    short_name = "Dev"
    type = "export"
    priority = -100
    export_hook = True

    def suggest_export_options(self, operation, qsos, ref, settings) -> Optional[List[ExportOption]]:
        if settings is None or not settings.dev_mode:
            return None
        return [ExportOption(
            format="qson",
            export_type="devmode-qson",
            export_name="Developer Mode: QSON Export",
            name_template="{{ op.date }}.{{ log.station }}.{{ first8(op.uuid) }}",
            title_template="{{ log.station }}: {{ log.title }} on {{ op.date }}",
            priority=-100,
            extra={'icon': 'briefcase-upload', 'devMode': True, 'selectedByDefault': False},
        )]

    def default_export_settings(self) -> Optional[Dict[str, Any]]:
        return {'privateData': True}
