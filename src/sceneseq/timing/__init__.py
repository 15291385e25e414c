"""Duration and source list parsing."""

from .duration import (
    format_hms,
    normalize_duration,
    parse_duration_ms,
    split_ms,
)
from .sources import (
    SourceEntry,
    append_source_line,
    format_source_line,
    parse_source_line,
    parse_sources,
)

__all__ = [
    # Durations
    "format_hms",
    "normalize_duration",
    "parse_duration_ms",
    "split_ms",
    # Source lists
    "SourceEntry",
    "append_source_line",
    "format_source_line",
    "parse_source_line",
    "parse_sources",
]
