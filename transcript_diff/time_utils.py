"""Timestamp helpers for bracketed transcript line prefixes."""

from __future__ import annotations

import math
import re
from typing import Optional

BRACKET_TIMESTAMP_RE = re.compile(r"^\s*\[(?P<stamp>[^\]]*)\]\s*")
TIMESTAMP_CONTENT_RE = re.compile(r"^[\d:.,\s-]+$")


def parse_timestamp(value: Optional[str]) -> float:
    """
    Convert ``value`` (``HH:MM:SS`` or ``HH:MM:SS.mmm``) into seconds.

    ``MM:SS`` and bare seconds are tolerated as well, and for a
    ``start - end`` range only the start is read. Malformed input returns
    zero rather than raising, so a line with a garbled bracket still counts as
    a turn boundary.
    """

    if not value:
        return 0.0
    sanitized = value.strip().replace(",", ".")
    if " - " in sanitized:
        sanitized = sanitized.split(" - ", 1)[0].strip()
    parts = sanitized.split(":")
    if len(parts) == 3:
        hours, minutes, seconds = parts
    elif len(parts) == 2:
        hours = "0"
        minutes, seconds = parts
    elif len(parts) == 1:
        hours, minutes, seconds = "0", "0", parts[0]
    else:
        return 0.0
    try:
        total_seconds = int(hours) * 3600 + int(minutes) * 60 + float(seconds)
    except ValueError:
        return 0.0
    if not math.isfinite(total_seconds):
        return 0.0
    return max(0.0, total_seconds)


def looks_like_timestamp(stamp: Optional[str]) -> bool:
    """True when ``stamp`` holds only digits and time separators, not e.g. ``laughs``."""

    return bool(stamp) and TIMESTAMP_CONTENT_RE.match(stamp) is not None


def split_bracket_timestamp(line: str) -> tuple[Optional[str], str]:
    """
    Split a leading ``[...]`` prefix off ``line``.

    Returns ``(stamp, rest)`` where ``stamp`` is the bracket content (``None``
    when the line has no leading bracket).
    """

    match = BRACKET_TIMESTAMP_RE.match(line)
    if not match:
        return None, line
    return match.group("stamp"), line[match.end():]


def format_timestamp(seconds: float) -> str:
    """
    Format ``seconds`` into the ``HH:MM:SS.mmm`` form used in line prefixes.
    """

    seconds = max(0.0, seconds)
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds - (hours * 3600 + minutes * 60)
    return f"{hours:02d}:{minutes:02d}:{secs:06.3f}"


__all__ = [
    "BRACKET_TIMESTAMP_RE",
    "TIMESTAMP_CONTENT_RE",
    "format_timestamp",
    "looks_like_timestamp",
    "parse_timestamp",
    "split_bracket_timestamp",
]
