"""
Base partial templates for export names and titles.

Partials are included from any template with ``{% include "Name" %}`` or the
shorthand ``{{> Name }}``. Three families exist:

- ``RefActivityName``: activity at a place, e.g. ``2025-01-01 N0CALL at K-1234``
  (compact: ``N0CALL@K-1234-20250101``)
- ``OtherActivityName``: activity with no place, e.g. ``2025-01-01 N0CALL for WFD``
  (compact: ``N0CALL-wfd-20250101``)
- ``DefaultName``: generic fallback built from the operation title

The unqualified names resolve to the ``Normal`` or ``Compact`` variant
depending on the ``use_compact_file_names`` setting.
"""

from typing import Dict, Optional


BASE_PARTIALS: Dict[str, str] = {
    'RefActivityNameNormal': (
        "{{ op.date }} {{ log.station }} at "
        "{% if log.refPrefix %}{{ log.refPrefix }} {% endif %}{{ log.ref }}"
    ),
    'RefActivityNameCompact': (
        "{{ log.station }}@"
        "{% if log.refPrefix %}{{ log.refPrefix | downcase | dash }}-{% endif %}"
        "{{ log.ref }}-{{ op.date | compact }}"
    ),
    'OtherActivityNameNormal': "{{ op.date }} {{ log.station }} for {{ log.handlerShortName }}",
    'OtherActivityNameCompact': (
        "{{ log.station }}-{{ log.handlerShortName | downcase | dash }}-{{ op.date | compact }}"
    ),
    'DefaultNameNormal': "{{ op.date }} {{ log.station }} {{ op.title }} {{ log.modifier }}",
    'DefaultNameCompact': (
        "{% filter dash %}{{ log.station }}-{{ op.date | compact }}-"
        "{{ op.title | downcase }}-{{ log.modifier | downcase }}{% endfilter %}"
    ),
    'RefActivityTitle': "{{ log.station }}: {{ log.handlerShortName }} at {{ log.ref }} on {{ op.date }}",
    'OtherActivityTitle': "{{ log.station }}: {{ log.handlerShortName }} on {{ op.date }}",
    'DefaultTitle': "{{ log.station }}: {{ log.handlerShortName }} on {{ op.date }}",
    'ADIFNotes': "{{ qso.notes }}",
    'ADIFComment': "{{ qso.notes }}",
    'ADIFQslMsg': "{{ join(op.refs | map(attribute='ref') | list) }}",
}

SELECTABLE_PARTIALS = ('RefActivityName', 'OtherActivityName', 'DefaultName')

DEFAULT_NAME_TEMPLATE = "{{> DefaultName }}"
DEFAULT_TITLE_TEMPLATE = "{{> DefaultTitle }}"


def base_partial_templates(
    use_compact_file_names: bool = False,
    overrides: Optional[Dict[str, str]] = None
) -> Dict[str, str]:
    """
    Build the partial table for one compilation.

    Args:
        use_compact_file_names: Select the compact variant for unqualified names
        overrides: User replacements for any partial, by name

    Returns:
        Mapping of partial name to template source
    """
    partials = dict(BASE_PARTIALS)
    overrides = {name: source for name, source in (overrides or {}).items() if source}
    partials.update(overrides)

    variant = 'Compact' if use_compact_file_names else 'Normal'
    for name in SELECTABLE_PARTIALS:
        if name not in overrides:
            partials[name] = partials[f"{name}{variant}"]

    return partials
