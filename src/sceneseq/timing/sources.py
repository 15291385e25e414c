"""Parsing of ``name|duration`` source list text."""

from dataclasses import dataclass
from typing import Optional

from .duration import format_hms, parse_duration_ms


@dataclass(frozen=True)
class SourceEntry:
    """One step of a scene's sequence."""

    name: str
    duration_ms: int


def parse_source_line(line: str) -> Optional[SourceEntry]:
    """Parse one ``name|duration`` line.

    The first ``|`` separates the name from the duration text. Returns None
    for blank lines and lines without a separator or duration.
    """
    ln = line.strip()
    if not ln:
        return None
    name, sep, duration = ln.partition("|")
    if not sep or not duration:
        return None
    return SourceEntry(name=name.strip(), duration_ms=parse_duration_ms(duration))


def parse_sources(text: Optional[str]) -> list[SourceEntry]:
    """Parse a newline separated source list, keeping order and duplicates."""
    entries: list[SourceEntry] = []
    for line in (text or "").splitlines():
        entry = parse_source_line(line)
        if entry is not None:
            entries.append(entry)
    return entries


def format_source_line(name: str, duration_ms: int) -> str:
    """Render a source list line in canonical form."""
    return f"{name}|{format_hms(duration_ms)}"


def append_source_line(text: Optional[str], name: str, duration_ms: int) -> str:
    """Append a canonical line to existing list text."""
    current = text or ""
    sep = "\n" if current else ""
    return f"{current}{sep}{format_source_line(name, duration_ms)}"
