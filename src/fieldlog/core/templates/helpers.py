"""
Template helpers for export names and titles.

Every helper is a plain function over positional arguments. Missing values
(``None``, Jinja2 undefined, ``False``, empty strings or lists) are ignored,
so templates can pass optional context fields without guarding them.

The ``HELPERS`` table maps the names templates use to these functions; the
template engine registers each entry both as a filter and as a callable.
"""

import re
from typing import Any, Callable, Dict, Iterable, List

from jinja2 import Undefined


def _is_empty(value: Any) -> bool:
    if value is None or value is False or isinstance(value, Undefined):
        return True
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) == 0
    return False


def _text(value: Any) -> str:
    return "" if _is_empty(value) else str(value)


def _present(args: Iterable[Any]) -> List[str]:
    return [_text(arg) for arg in args if not _is_empty(arg)]


def _separated(args: Iterable[Any], separator: str) -> str:
    text = separator.join(_present(args))
    text = re.sub(r'[^a-zA-Z0-9]', separator, text)
    text = re.sub(re.escape(separator) + r'+', separator, text)
    return text.strip(separator)


def compact(*args: Any) -> str:
    """Strip everything but letters and digits: ``2025-01-01`` -> ``20250101``."""
    return re.sub(r'[^a-zA-Z0-9]', '', "".join(_present(args)))


def dash(*args: Any) -> str:
    """Join with dashes and turn every other symbol run into one dash."""
    return _separated(args, '-')


def underscore(*args: Any) -> str:
    """Join with underscores and turn every other symbol run into one underscore."""
    return _separated(args, '_')


def trim(*args: Any) -> str:
    return re.sub(r'\s+', ' ', " ".join(_present(args))).strip()


def downcase(*args: Any) -> str:
    return " ".join(_present(args)).lower()


def upcase(*args: Any) -> str:
    return " ".join(_present(args)).upper()


def titlecase(*args: Any) -> str:
    """Capitalize the first letter of each word."""
    return re.sub(r'\b\w', lambda match: match.group(0).upper(), " ".join(_present(args)))


def first8(value: Any) -> str:
    return _text(value)[:8]


def join(items: Any, separator: str = ", ", final: str = " and ") -> str:
    """
    Join items with ``separator``, using ``final`` before the last one.

    ``["A"]`` -> ``"A"``, ``["A", "B"]`` -> ``"A and B"``,
    ``["A", "B", "C"]`` -> ``"A, B and C"``.
    """
    if not isinstance(items, (list, tuple)):
        return _text(items)
    parts = _present(items)
    if len(parts) <= 1:
        return "".join(parts)
    return separator.join(parts[:-1]) + final + parts[-1]


def join_space(items: Any) -> str:
    if not isinstance(items, (list, tuple)):
        return _text(items)
    return " ".join(_present(items))


def join_comma(items: Any) -> str:
    if not isinstance(items, (list, tuple)):
        return _text(items)
    return ", ".join(_present(items))


def join_comma_compact(items: Any) -> str:
    if not isinstance(items, (list, tuple)):
        return _text(items)
    return ",".join(_present(items))


def or_(*args: Any) -> Any:
    """First non-empty argument, or an empty string."""
    for arg in args:
        if not _is_empty(arg):
            return arg
    return ""


def and_(*args: Any) -> Any:
    """Last argument when every argument is non-empty, otherwise False."""
    if not args or any(_is_empty(arg) for arg in args):
        return False
    return args[-1]


def eq(a: Any, b: Any) -> bool:
    return a == b


def ne(a: Any, b: Any) -> bool:
    return a != b


def _compare(a: Any, b: Any, op: Callable[[Any, Any], bool]) -> bool:
    if _is_empty(a) or _is_empty(b):
        return False
    try:
        return op(a, b)
    except TypeError:
        try:
            return op(float(a), float(b))
        except (TypeError, ValueError):
            return False


def gt(a: Any, b: Any) -> bool:
    return _compare(a, b, lambda x, y: x > y)


def ge(a: Any, b: Any) -> bool:
    return _compare(a, b, lambda x, y: x >= y)


def lt(a: Any, b: Any) -> bool:
    return _compare(a, b, lambda x, y: x < y)


def le(a: Any, b: Any) -> bool:
    return _compare(a, b, lambda x, y: x <= y)


def includes(container: Any, item: Any) -> bool:
    if _is_empty(container) or isinstance(item, Undefined):
        return False
    if isinstance(container, str):
        return _text(item) in container
    try:
        return item in container
    except TypeError:
        return False


def starts_with(value: Any, prefix: Any) -> bool:
    return _text(value).startswith(_text(prefix))


def ends_with(value: Any, suffix: Any) -> bool:
    return _text(value).endswith(_text(suffix))


HELPERS: Dict[str, Callable[..., Any]] = {
    'compact': compact,
    'dash': dash,
    'underscore': underscore,
    'trim': trim,
    'downcase': downcase,
    'upcase': upcase,
    'titlecase': titlecase,
    'first8': first8,
    'join': join,
    'joinSpace': join_space,
    'joinComma': join_comma,
    'joinCommaCompact': join_comma_compact,
    'or': or_,
    'and': and_,
    'eq': eq,
    'ne': ne,
    'gt': gt,
    'ge': ge,
    'lt': lt,
    'le': le,
    'includes': includes,
    'startsWith': starts_with,
    'endsWith': ends_with,
}

# Template names that are keywords cannot be called as functions in Jinja2.
CALLABLE_ALIASES: Dict[str, str] = {
    'or': 'or_',
    'and': 'and_',
}
