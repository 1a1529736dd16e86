"""
Data model for operations, contacts and export planning.

The dataclasses here normalize QSON-shaped dictionaries (camelCase keys, as
stored by the logging application) into attribute access for the export
engine. They carry no behavior beyond small conveniences.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from fieldlog.core.config.models import AppSettings, ExportSettings
    from fieldlog.handlers.base import BaseHandler


DEFAULT_EXPORT_TYPE = "export"
DEFAULT_FORMAT = "other"


@dataclass(frozen=True)
class Reference:
    """
    One activity association (park, summit, contest entry...) of an operation.

    ``extra`` keeps any handler-specific keys (Field Day class, location...)
    that have no dedicated field.
    """

    type: str = ""
    ref: str = ""
    name: Optional[str] = None
    short_name: Optional[str] = None
    prefix: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'Reference':
        """Create a Reference from a QSON reference dictionary."""
        known = {'type', 'ref', 'name', 'shortName', 'short_name', 'prefix', 'refPrefix'}
        return cls(
            type=raw.get('type') or "",
            ref=raw.get('ref') or "",
            name=raw.get('name'),
            short_name=raw.get('shortName', raw.get('short_name')),
            prefix=raw.get('prefix', raw.get('refPrefix')),
            extra={k: v for k, v in raw.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary form used inside template contexts."""
        data = dict(self.extra)
        data.update({
            'type': self.type,
            'ref': self.ref,
            'name': self.name,
            'shortName': self.short_name,
            'prefix': self.prefix,
        })
        return data


@dataclass
class QSOEvent:
    """An event marker on a QSO record, such as the start of a new segment."""

    event: str = ""
    refs: List[Reference] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'QSOEvent':
        return cls(
            event=raw.get('event') or "",
            refs=[_coerce_ref(r) for r in raw.get('refs') or []],
        )


@dataclass
class QSO:
    """One logged two-way contact."""

    uuid: str = ""
    their: Dict[str, Any] = field(default_factory=dict)
    our: Dict[str, Any] = field(default_factory=dict)
    notes: Optional[str] = None
    deleted: bool = False
    event: Optional[QSOEvent] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'QSO':
        event = raw.get('event')
        if isinstance(event, dict):
            event = QSOEvent.from_dict(event)
        return cls(
            uuid=raw.get('uuid') or "",
            their=dict(raw.get('their') or {}),
            our=dict(raw.get('our') or {}),
            notes=raw.get('notes'),
            deleted=bool(raw.get('deleted', False)),
            event=event,
        )


@dataclass
class Operation:
    """One radio activation session."""

    uuid: str = ""
    station_call: Optional[str] = None
    station_call_plus: List[str] = field(default_factory=list)
    operator_call: Optional[str] = None
    start_at_millis_min: Optional[int] = None
    start_at_millis_max: Optional[int] = None
    end_at_millis_max: Optional[int] = None
    title: Optional[str] = None
    user_title: Optional[str] = None
    user_notes: Optional[str] = None
    refs: List[Reference] = field(default_factory=list)
    grid: Optional[str] = None

    @property
    def all_station_calls(self) -> List[str]:
        """Main station call followed by any additional station calls."""
        calls = [self.station_call] if self.station_call else []
        return calls + [c for c in self.station_call_plus if c]

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'Operation':
        """Create an Operation from a QSON operation dictionary."""
        plus = raw.get('stationCallPlusArray')
        if plus is None:
            plus = raw.get('station_call_plus') or []
        return cls(
            uuid=raw.get('uuid') or "",
            station_call=raw.get('stationCall', raw.get('station_call')),
            station_call_plus=list(plus),
            operator_call=raw.get('operatorCall', raw.get('operator_call')),
            start_at_millis_min=raw.get('startAtMillisMin'),
            start_at_millis_max=raw.get('startAtMillisMax'),
            end_at_millis_max=raw.get('endAtMillisMax'),
            title=raw.get('title'),
            user_title=raw.get('userTitle'),
            user_notes=raw.get('userNotes', raw.get('notes')),
            refs=[_coerce_ref(r) for r in raw.get('refs') or []],
            grid=raw.get('grid'),
        )


@dataclass
class OurInfo:
    """Station identity used for one export run."""

    call: str = ""
    base_call: Optional[str] = None
    name: Optional[str] = None
    grid: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'call': self.call,
            'baseCall': self.base_call or self.call,
            'name': self.name,
            'grid': self.grid,
        }


@dataclass
class ExportOption:
    """
    A handler's proposal for one exportable artifact.

    ``extra`` carries any additional handler fields (icon, selection
    defaults...) through to the resulting export job untouched.
    """

    format: str = DEFAULT_FORMAT
    export_type: Optional[str] = None
    export_label: Optional[str] = None
    export_name: Optional[str] = None
    name_template: Optional[str] = None
    title_template: Optional[str] = None
    template_data: Dict[str, Any] = field(default_factory=dict)
    priority: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'ExportOption':
        """
        Create an ExportOption from a handler's dictionary suggestion.

        A missing format counts as ``other``; a priority that is not a number
        counts as 0.
        """
        mapping = {
            'format': 'format',
            'exportType': 'export_type',
            'exportLabel': 'export_label',
            'exportName': 'export_name',
            'nameTemplate': 'name_template',
            'titleTemplate': 'title_template',
            'templateData': 'template_data',
            'priority': 'priority',
        }
        names = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in raw.items():
            attr = mapping.get(key, key)
            if attr in names and attr != 'extra':
                values[attr] = value
            else:
                extra[key] = value
        values['format'] = values.get('format') or DEFAULT_FORMAT
        values['priority'] = coerce_priority(values.get('priority'))
        values['template_data'] = dict(values.get('template_data') or {})
        return cls(extra=extra, **values)

    def option_key(self, handler_key: str) -> str:
        """Identity of this option across references: handler, format and type."""
        return f"{handler_key}-{self.format}-{self.export_type or DEFAULT_EXPORT_TYPE}"


@dataclass
class ExportOptionGroup:
    """
    Unit of deduplication: one option from one handler, fanned out to refs.

    References are accumulated by identity key, so two references that the
    handler considers the same activity produce a single export.
    """

    option_key: str
    ref_key: str
    handler: 'BaseHandler'
    option: ExportOption
    refs: List[Reference] = field(default_factory=list)

    def add_ref(self, ref: Reference) -> bool:
        """Append ``ref`` unless an entry with the same identity key exists."""
        key = self.handler.key_for_ref(ref)
        if any(self.handler.key_for_ref(existing) == key for existing in self.refs):
            return False
        self.refs.append(ref)
        return True


@dataclass
class ExportJob:
    """A fully resolved export: what to write, under which name and title."""

    format: str
    file_name: str
    title: str
    export_label: str
    export_type: str
    handler: 'BaseHandler'
    ref: Reference
    operation: Operation
    our_info: Optional[OurInfo]
    option: ExportOption
    option_key: str = ""
    priority: float = 0
    settings: Optional['AppSettings'] = None
    export_settings: Optional['ExportSettings'] = None

    @property
    def export_name(self) -> Optional[str]:
        return self.option.export_name

    @property
    def template_data(self) -> Dict[str, Any]:
        return self.option.template_data

    def __getattr__(self, name: str) -> Any:
        # Handler-specific option fields (icon, selectedByDefault...) pass through.
        option = self.__dict__.get('option')
        if option is not None and name in option.extra:
            return option.extra[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")


def coerce_priority(value: Any) -> Optional[float]:
    """
    Numeric priority of an option; anything that is not a number counts as 0.

    Examples:
        >>> coerce_priority("5")
        5.0
        >>> coerce_priority("high")
        0
        >>> coerce_priority(None) is None
        True
    """
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def _coerce_ref(raw: Any) -> Reference:
    if isinstance(raw, Reference):
        return raw
    return Reference.from_dict(raw or {})
