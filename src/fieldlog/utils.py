"""
Utility functions for fieldlog.

Filename sanitization, whitespace normalization and date formatting shared by
the export planning modules.
"""

import re
from datetime import datetime, timezone
from typing import Optional, Union


def collapse_whitespace(text: Optional[str]) -> str:
    """
    Collapse runs of whitespace into single spaces and trim both ends.

    Examples:
        >>> collapse_whitespace("  2025-01-01   N0CALL \\n at K-1234 ")
        '2025-01-01 N0CALL at K-1234'
        >>> collapse_whitespace(None)
        ''
    """
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text).strip()


def sanitize_filename(filename: str) -> str:
    """
    Replace path separators and colons in a file name with dashes.

    Export files are written into a single directory per operation, so any
    character that could be read as a directory separator or a drive/stream
    marker is neutralized.

    Args:
        filename: The file name to sanitize

    Returns:
        str: The file name with '/', '\\' and ':' replaced by '-'

    Examples:
        >>> sanitize_filename("N0CALL: POTA/K-1234.adi")
        'N0CALL- POTA-K-1234.adi'
    """
    return re.sub(r'[/\\:]', '-', filename)


def ensure_extension(filename: str, extension: str) -> str:
    """
    Append ``.<extension>`` unless the name already ends with it.

    Examples:
        >>> ensure_extension("log", "adi")
        'log.adi'
        >>> ensure_extension("log.adi", "adi")
        'log.adi'
    """
    suffix = f".{extension}"
    if filename.endswith(suffix):
        return filename
    return f"{filename}{suffix}"


def fmt_iso_date(millis: Optional[Union[int, float]]) -> str:
    """
    Format epoch milliseconds as an ISO 8601 date (YYYY-MM-DD) in UTC.

    Returns an empty string when no timestamp is available.

    Examples:
        >>> fmt_iso_date(1735732800000)
        '2025-01-01'
        >>> fmt_iso_date(None)
        ''
    """
    if millis is None or millis == "":
        return ""
    try:
        moment = datetime.fromtimestamp(float(millis) / 1000.0, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return ""
    return moment.strftime('%Y-%m-%d')
