"""
Sample data for template previews.

A one-park activation with a single contact, used by ``fieldlog preview`` so
templates can be tried without a real operation file.
"""

from typing import Any, Dict

from fieldlog.handlers.base import BaseHandler
from fieldlog.models import ExportOption, Operation, OurInfo, QSO, Reference


SAMPLE_START_MILLIS = 1735732800000  # 2025-01-01 12:00 UTC
SAMPLE_END_MILLIS = 1735740000000


class SampleParkHandler(BaseHandler):
    """Stand-in for a parks activity handler."""

    key = "pota"
    name = "Parks on the Air"
    short_name = "POTA"
    type = "potaActivation"
    ref_types = ("potaActivation",)

    def suggest_export_options(self, operation, qsos, ref, settings):
        return [ExportOption(
            format="adif",
            name_template="{{> RefActivityName }}",
            title_template="{{> RefActivityTitle }}",
        )]


def sample_preview() -> Dict[str, Any]:
    """Keyword arguments for ``run_template_for_operation``."""
    ref = Reference(type="potaActivation", ref="K-1234", name="Example Park", short_name="Example")
    operation = Operation(
        uuid="0b7e9f52-3c4d-4e5f-8a9b-1c2d3e4f5a6b",
        station_call="N0CALL",
        operator_call="N0CALL",
        start_at_millis_min=SAMPLE_START_MILLIS,
        start_at_millis_max=SAMPLE_START_MILLIS,
        end_at_millis_max=SAMPLE_END_MILLIS,
        title="at K-1234",
        user_title="New Year activation",
        refs=[ref],
        grid="FN31",
    )
    qso = QSO(
        uuid="5f1c2d3e-0000-4000-8000-000000000001",
        their={'call': "K1ABC", 'name': "Alice", 'grid': "FN42"},
        our={'call': "N0CALL", 'grid': "FN31"},
        notes="Park to park",
    )
    return {
        'operation': operation,
        'our_info': OurInfo(call="N0CALL", base_call="N0CALL", grid="FN31"),
        'handler': SampleParkHandler(),
        'ref': ref,
        'qso': qso,
    }
