"""
Template context construction.

Builds the nested dictionary that export name and title templates are
evaluated against. Every input is optional; absent inputs produce empty
leaves instead of errors.
"""

from typing import Any, Dict, Optional, TYPE_CHECKING

from fieldlog.models import ExportOption, Operation, OurInfo, QSO, Reference
from fieldlog.utils import fmt_iso_date

if TYPE_CHECKING:
    from fieldlog.core.config.models import AppSettings
    from fieldlog.handlers.base import BaseHandler


def build_template_context(
    option: Optional[ExportOption] = None,
    settings: Optional['AppSettings'] = None,
    operation: Optional[Operation] = None,
    our_info: Optional[OurInfo] = None,
    handler: Optional['BaseHandler'] = None,
    ref: Optional[Reference] = None,
    qso: Optional[QSO] = None
) -> Dict[str, Any]:
    """
    Build the context for one export.

    The context has four namespaces:

    - ``settings``: ``useCompactFileNames``
    - ``log``: the export being produced (station, reference, handler,
      option format and type), extended with the option's ``template_data``
    - ``op``: the operation (stations, operator, ISO dates, titles, refs)
    - ``qso``: the contact being described, or None

    Args:
        option: Export option being resolved
        settings: Application settings
        operation: Operation being exported
        our_info: Station identity for this export
        handler: Handler that suggested the option
        ref: Reference the export is for
        qso: Contact, for per-QSO templates

    Returns:
        Context dictionary
    """
    return {
        'settings': {
            'useCompactFileNames': bool(settings.use_compact_file_names) if settings is not None else False,
        },
        'log': _log_context(option, our_info, handler, ref),
        'op': _operation_context(operation),
        'qso': _qso_context(qso),
    }


def _log_context(
    option: Optional[ExportOption],
    our_info: Optional[OurInfo],
    handler: Optional['BaseHandler'],
    ref: Optional[Reference]
) -> Dict[str, Any]:
    log = {
        'station': our_info.call if our_info else None,
        'callInfo': our_info.to_dict() if our_info else None,
        'ref': ref.ref if ref else None,
        'refName': ref.name if ref else None,
        'refShortName': ref.short_name if ref else None,
        'refPrefix': ref.prefix if ref else None,
        'handlerType': handler.type if handler else None,
        'handlerName': handler.name if handler else None,
        'handlerShortName': (handler.short_name or handler.name) if handler else None,
        'exportFormat': option.format if option else None,
        'exportType': option.export_type if option else None,
        'exportName': option.export_name if option else None,
    }
    if option and option.template_data:
        log.update(option.template_data)
    return log


def _operation_context(operation: Optional[Operation]) -> Dict[str, Any]:
    if operation is None:
        return {
            'station': None, 'operator': None, 'allStations': [], 'otherStations': [],
            'date': "", 'startDate': "", 'endDate': "", 'uuid': None, 'title': None,
            'userTitle': None, 'userNotes': None, 'refs': [], 'grid': None,
        }

    return {
        'station': operation.station_call,
        'operator': operation.operator_call,
        'allStations': operation.all_station_calls,
        'otherStations': [call for call in operation.station_call_plus if call],
        'date': fmt_iso_date(operation.start_at_millis_max),
        'startDate': fmt_iso_date(operation.start_at_millis_min),
        'endDate': fmt_iso_date(operation.end_at_millis_max),
        'uuid': operation.uuid,
        'title': operation.title,
        'userTitle': operation.user_title,
        'userNotes': operation.user_notes,
        'refs': [ref.to_dict() for ref in operation.refs],
        'grid': operation.grid,
    }


def _qso_context(qso: Optional[QSO]) -> Optional[Dict[str, Any]]:
    if qso is None:
        return None

    def station(info: Dict[str, Any]) -> Dict[str, Any]:
        return {'call': info.get('call'), 'name': info.get('name'), 'grid': info.get('grid')}

    return {
        'their': station(qso.their),
        'our': station(qso.our),
        'notes': qso.notes,
    }
