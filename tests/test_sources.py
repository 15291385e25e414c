"""Tests for source list parsing."""

from sceneseq.timing import (
    SourceEntry,
    append_source_line,
    format_source_line,
    parse_source_line,
    parse_sources,
)


def test_parse_sources_keeps_order_and_drops_malformed_lines() -> None:
    text = "A|00:00:01.000\nB|2s\nmalformed\nC|500ms"
    assert parse_sources(text) == [
        SourceEntry("A", 1000),
        SourceEntry("B", 2000),
        SourceEntry("C", 500),
    ]


def test_duplicates_are_distinct_steps() -> None:
    entries = parse_sources("A|1s\nA|2s")
    assert [(e.name, e.duration_ms) for e in entries] == [("A", 1000), ("A", 2000)]


def test_first_pipe_splits_and_sides_are_trimmed() -> None:
    assert parse_source_line("  Lower Third  |  1:30 ") == SourceEntry("Lower Third", 90_000)
    assert parse_source_line("Odd|name|3s") == SourceEntry("Odd", 3000)


def test_blank_and_separator_less_lines_are_dropped() -> None:
    assert parse_source_line("") is None
    assert parse_source_line("   ") is None
    assert parse_source_line("no separator") is None
    assert parse_source_line("Missing|") is None


def test_windows_line_endings() -> None:
    assert parse_sources("A|1s\r\nB|1s\r\n") == [SourceEntry("A", 1000), SourceEntry("B", 1000)]


def test_empty_text() -> None:
    assert parse_sources("") == []
    assert parse_sources(None) == []


def test_unparseable_duration_is_zero() -> None:
    assert parse_sources("A|soon") == [SourceEntry("A", 0)]


def test_format_and_append_lines() -> None:
    assert format_source_line("A", 1500) == "A|00:00:01.500"
    assert append_source_line("", "A", 1000) == "A|00:00:01.000"
    assert append_source_line("A|00:00:01.000", "B", 2000) == "A|00:00:01.000\nB|00:00:02.000"
