"""
Shared Test Configuration and Fixtures

Sample operations, references, settings and handlers for the export planning
tests.
"""

import pytest
from typing import List, Optional

from fieldlog.core.config.models import AppSettings
from fieldlog.handlers.base import BaseHandler, HandlerRegistry
from fieldlog.models import ExportOption, Operation, OurInfo, QSO, QSOEvent, Reference


NEW_YEAR_NOON_MILLIS = 1735732800000  # 2025-01-01 12:00:00 UTC


class ParkHandler(BaseHandler):
    """Parks handler that suggests one ADIF export per park."""

    key = "pota"
    name = "Parks on the Air"
    short_name = "POTA"
    type = "potaActivation"
    ref_types = ("park",)

    def __init__(self, options: Optional[List[ExportOption]] = None, **attributes):
        super().__init__(**attributes)
        self.options = options if options is not None else [
            ExportOption(format="adif", name_template="{{> RefActivityName }}")
        ]
        self.calls = []

    def suggest_export_options(self, operation, qsos, ref, settings):
        self.calls.append(ref)
        return list(self.options)

    def key_for_ref(self, ref):
        return f"{ref.type}-{ref.ref.upper()}"


class QSONExportHandler(BaseHandler):
    """Generic exporter suggesting a QSON dump of every operation."""

    key = "qson-export"
    name = "QSON Export"
    type = "export"
    export_hook = True

    def suggest_export_options(self, operation, qsos, ref, settings):
        return [ExportOption(format="qson", export_type="full", priority=10)]


class SilentHandler(BaseHandler):
    """Handler that does not implement export suggestions."""

    key = "silent"
    name = "Silent"
    ref_types = ("park",)


@pytest.fixture
def park_ref():
    return Reference(type="park", ref="K-1234", name="Example Park")


@pytest.fixture
def operation(park_ref):
    return Operation(
        uuid="a1b2c3d4-e5f6-4789-abcd-0123456789ab",
        station_call="N0CALL",
        operator_call="N0CALL",
        start_at_millis_min=NEW_YEAR_NOON_MILLIS,
        start_at_millis_max=NEW_YEAR_NOON_MILLIS,
        end_at_millis_max=NEW_YEAR_NOON_MILLIS + 3600 * 1000,
        title="at K-1234",
        refs=[park_ref],
    )


@pytest.fixture
def qsos():
    return [
        QSO(uuid="q1", their={'call': "K1ABC", 'name': "Alice"}, our={'call': "N0CALL"}, notes="first"),
        QSO(uuid="q2", their={'call': "W2XYZ"}, our={'call': "N0CALL"}),
    ]


@pytest.fixture
def our_info():
    return OurInfo(call="N0CALL")


@pytest.fixture
def settings():
    return AppSettings()


@pytest.fixture
def park_handler():
    return ParkHandler()


@pytest.fixture
def export_handler():
    return QSONExportHandler()


@pytest.fixture
def silent_handler():
    return SilentHandler()


@pytest.fixture
def registry(park_handler):
    registry = HandlerRegistry()
    registry.register_handler(park_handler)
    return registry


@pytest.fixture
def segment_qso():
    """Factory for QSO records carrying a segment event."""
    def make(event: str, refs: List[Reference], deleted: bool = False, uuid: str = "event"):
        return QSO(uuid=uuid, deleted=deleted, event=QSOEvent(event=event, refs=refs))
    return make
