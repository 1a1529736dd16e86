"""
Export format table.

Maps the data format named by an export option to its file extension and a
human-readable description. Unknown formats fall back to ``other``.
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class FormatInfo:
    """Information about an export format."""
    name: str
    extension: str
    description: str


FALLBACK_FORMAT = "other"

FORMATS: Dict[str, FormatInfo] = {
    info.name: info for info in (
        FormatInfo("adif", "adi", "ADIF"),
        FormatInfo("cabrillo", "log", "Cabrillo"),
        FormatInfo("qson", "qson", "QSON"),
        FormatInfo("json", "json", "JSON"),
        FormatInfo("txt", "txt", "Text"),
        FormatInfo("text", "txt", "Text"),
        FormatInfo("csv", "csv", "Comma-Separated Values"),
        FormatInfo("tsv", "tsv", "Tab-Separated Values"),
        FormatInfo(FALLBACK_FORMAT, "dat", "Data"),
    )
}

DATA_EXTENSIONS: Dict[str, str] = {name: info.extension for name, info in FORMATS.items()}
DATA_FORMAT_DESCRIPTIONS: Dict[str, str] = {name: info.description for name, info in FORMATS.items()}


def format_info(format_name: Optional[str]) -> FormatInfo:
    """Format information, falling back to ``other`` for unknown formats."""
    return FORMATS.get(format_name or FALLBACK_FORMAT) or FORMATS[FALLBACK_FORMAT]


def extension_for(format_name: Optional[str]) -> str:
    return format_info(format_name).extension


def description_for(format_name: Optional[str]) -> str:
    return format_info(format_name).description
