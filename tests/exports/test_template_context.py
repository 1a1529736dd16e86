"""
Tests for template context construction.
"""

from fieldlog.core.config.models import AppSettings
from fieldlog.exports.context import build_template_context
from fieldlog.models import ExportOption, Operation, OurInfo, QSO, Reference


class TestBuildTemplateContext:
    """Test build_template_context."""

    def test_full_context(self, operation, park_handler, park_ref):
        option = ExportOption(
            format="adif",
            export_type="activator",
            export_name="POTA Activator Log",
            template_data={'modifier': "activator"},
        )
        context = build_template_context(
            option=option,
            settings=AppSettings(use_compact_file_names=True),
            operation=operation,
            our_info=OurInfo(call="N0CALL/P", base_call="N0CALL"),
            handler=park_handler,
            ref=park_ref,
        )

        assert context['settings'] == {'useCompactFileNames': True}

        log = context['log']
        assert log['station'] == "N0CALL/P"
        assert log['callInfo']['baseCall'] == "N0CALL"
        assert log['ref'] == "K-1234"
        assert log['refName'] == "Example Park"
        assert log['refShortName'] is None
        assert log['handlerType'] == "potaActivation"
        assert log['handlerName'] == "Parks on the Air"
        assert log['handlerShortName'] == "POTA"
        assert log['exportFormat'] == "adif"
        assert log['exportType'] == "activator"
        assert log['exportName'] == "POTA Activator Log"
        assert log['modifier'] == "activator"

        op = context['op']
        assert op['station'] == "N0CALL"
        assert op['operator'] == "N0CALL"
        assert op['date'] == "2025-01-01"
        assert op['startDate'] == "2025-01-01"
        assert op['endDate'] == "2025-01-01"
        assert op['uuid'] == operation.uuid
        assert op['title'] == "at K-1234"
        assert op['refs'] == [{'type': "park", 'ref': "K-1234", 'name': "Example Park", 'shortName': None, 'prefix': None}]

        assert context['qso'] is None

    def test_station_lists(self):
        operation = Operation(station_call="N0CALL", station_call_plus=["N0CALL/P", "K1ABC"])
        op = build_template_context(operation=operation)['op']
        assert op['allStations'] == ["N0CALL", "N0CALL/P", "K1ABC"]
        assert op['otherStations'] == ["N0CALL/P", "K1ABC"]

    def test_template_data_can_override_log_fields(self):
        option = ExportOption(format="adif", template_data={'ref': "OVERRIDE"})
        context = build_template_context(option=option, ref=Reference(type="park", ref="K-1234"))
        assert context['log']['ref'] == "OVERRIDE"

    def test_everything_absent(self):
        context = build_template_context()
        assert context['settings'] == {'useCompactFileNames': False}
        assert context['log']['station'] is None
        assert context['log']['handlerShortName'] is None
        assert context['op']['date'] == ""
        assert context['op']['allStations'] == []
        assert context['qso'] is None

    def test_missing_dates(self):
        op = build_template_context(operation=Operation(uuid="x"))['op']
        assert (op['date'], op['startDate'], op['endDate']) == ("", "", "")

    def test_handler_without_short_name_uses_name(self, silent_handler):
        assert build_template_context(handler=silent_handler)['log']['handlerShortName'] == "Silent"

    def test_qso_context(self):
        qso = QSO(
            their={'call': "K1ABC", 'name': "Alice", 'grid': "FN42", 'state': "MA"},
            our={'call': "N0CALL"},
            notes="thanks",
        )
        context = build_template_context(qso=qso)
        assert context['qso'] == {
            'their': {'call': "K1ABC", 'name': "Alice", 'grid': "FN42"},
            'our': {'call': "N0CALL", 'name': None, 'grid': None},
            'notes': "thanks",
        }
