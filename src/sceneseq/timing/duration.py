"""Forgiving duration parsing and canonical ``HH:MM:SS.mmm`` formatting."""

import math
import re

_NUMBER_RE = re.compile(r"^\s*(\d+(?:\.\d*)?|\.\d+)\s*$")

_UNIT_TOKEN_RE = re.compile(
    r"(?<![\d.\-])(\d+\.?\d*|\.\d+)\s*"
    r"(hours|hour|hrs|hr|h|minutes|minute|mins|min|mn|msecs|msec|ms|m|seconds|second|secs|sec|s)"
    r"(?![a-z])"
)
_BARE_SECONDS_RE = re.compile(r"^(\d+\.?\d*)\s*s$")
_BARE_MILLIS_RE = re.compile(r"^(\d+)$")

# milliseconds per unit alias
UNIT_MS = {
    "h": 3_600_000,
    "hr": 3_600_000,
    "hrs": 3_600_000,
    "hour": 3_600_000,
    "hours": 3_600_000,
    "m": 60_000,
    "min": 60_000,
    "mn": 60_000,
    "mins": 60_000,
    "minute": 60_000,
    "minutes": 60_000,
    "s": 1_000,
    "sec": 1_000,
    "secs": 1_000,
    "second": 1_000,
    "seconds": 1_000,
    "ms": 1,
    "msec": 1,
    "msecs": 1,
}

MS_PER_HOUR = 3_600_000
MS_PER_MINUTE = 60_000
MS_PER_SECOND = 1_000


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _to_number(token: str) -> float:
    """Parse an unsigned decimal token, anything else counts as zero."""
    match = _NUMBER_RE.match(token)
    if not match:
        return 0.0
    return float(match.group(1))


def _parse_colon_form(text: str) -> int:
    parts = [p for p in text.split(":") if p]
    hours = minutes = seconds = 0.0
    if len(parts) == 3:
        hours, minutes, seconds = (_to_number(p) for p in parts)
    elif len(parts) == 2:
        minutes, seconds = (_to_number(p) for p in parts)
    elif len(parts) == 1:
        seconds = _to_number(parts[0])

    whole = math.floor(seconds)
    frac = seconds - whole
    return int((hours * 3600 + minutes * 60 + whole) * 1000) + _round_half_up(frac * 1000)


def parse_duration_ms(text: str) -> int:
    """Convert free-form duration text to milliseconds.

    Accepted forms, tried in this order:

    - ``HH:MM:SS.mmm``, ``MM:SS.mmm`` or ``SS.mmm``
    - unit tokens such as ``1h2m3s``, ``90s``, ``750ms`` or ``1.5 min``
    - a bare number followed by ``s`` (seconds)
    - a bare integer (raw milliseconds)

    Args:
        text: Duration text typed by an operator. ``None`` is accepted.

    Returns:
        Duration in milliseconds. Anything unparseable yields 0.
    """
    if not text:
        return 0
    s = text.strip().lower().replace(",", ".")
    if not s:
        return 0

    if ":" in s:
        return _parse_colon_form(s)

    matched = False
    total = 0
    for value, unit in _UNIT_TOKEN_RE.findall(s):
        matched = True
        total += _round_half_up(float(value) * UNIT_MS[unit])
    if matched:
        return total

    bare_seconds = _BARE_SECONDS_RE.match(s)
    if bare_seconds:
        return _round_half_up(float(bare_seconds.group(1)) * 1000)

    bare_millis = _BARE_MILLIS_RE.match(s)
    if bare_millis:
        return int(bare_millis.group(1))

    return 0


def split_ms(ms: int) -> tuple[int, int, int, int]:
    """Split milliseconds into (hours, minutes, seconds, milliseconds)."""
    ms = max(0, int(ms))
    hours, ms = divmod(ms, MS_PER_HOUR)
    minutes, ms = divmod(ms, MS_PER_MINUTE)
    seconds, ms = divmod(ms, MS_PER_SECOND)
    return hours, minutes, seconds, ms


def format_hms(ms: int) -> str:
    """Format milliseconds as ``HH:MM:SS.mmm``. Negative input is clamped to zero."""
    hours, minutes, seconds, millis = split_ms(ms)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"


def normalize_duration(text: str) -> tuple[str, int]:
    """Parse ``text`` and return its canonical form along with the milliseconds."""
    ms = parse_duration_ms(text)
    return format_hms(ms), ms
