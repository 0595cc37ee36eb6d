"""Text formatting helpers shared by the tools and the diagnosis report."""

import re
from datetime import datetime, timedelta, timezone

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def format_duration(duration: timedelta) -> str:
    """Format a duration as ``45s``, ``5m30s`` or ``2h15m45s``."""
    total_seconds = int(duration.total_seconds())
    if total_seconds < 60:
        return f"{total_seconds}s"
    if total_seconds < 3600:
        return f"{total_seconds // 60}m{total_seconds % 60}s"
    hours, remainder = divmod(total_seconds, 3600)
    return f"{hours}h{remainder // 60}m{remainder % 60}s"


def truncate_string(value: str, max_length: int) -> str:
    """Cut a string to max_length characters, marking the cut with an ellipsis."""
    if len(value) <= max_length:
        return value
    return value[:max_length] + "..."


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as RFC 3339, using the ``Z`` suffix for UTC."""
    offset = value.utcoffset()
    if offset is None or offset == timedelta(0):
        return value.replace(tzinfo=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    return value.isoformat(timespec="seconds")


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an Argo timestamp, returning None for unset or zero values."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    if parsed.year <= 1:
        return None
    return parsed


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as ``90s``, ``5m`` or ``1h30m``.

    Raises:
        ValueError: If the text is not a sequence of number+unit parts
    """
    text = value.strip()
    if text == "0":
        return timedelta(0)
    position = 0
    seconds = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()
    if not text or position != len(text):
        raise ValueError(f"invalid duration {value!r}, expected e.g. 30s, 5m or 1h30m")
    return timedelta(seconds=seconds)
