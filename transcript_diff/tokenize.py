"""Split transcript text into comparison tokens."""

from __future__ import annotations

import re
from typing import List

WHITESPACE_SPLIT_RE = re.compile(r"(\s+)")

MODE_WORD = "word"
MODE_CHAR = "char"
DIFF_MODES = (MODE_WORD, MODE_CHAR)


def split_words(text: str) -> List[str]:
    """Return the non-empty whitespace-delimited words of ``text``."""

    return [word for word in text.split() if word]


def split_render_tokens(text: str) -> List[str]:
    """
    Split ``text`` into words and the whitespace runs between them.

    Keeping the whitespace runs as tokens lets a rendered diff reproduce the
    original line breaks and spacing exactly.
    """

    return [part for part in WHITESPACE_SPLIT_RE.split(text) if part]


def split_chars(text: str) -> List[str]:
    return list(text)


def tokenize(text: str, mode: str = MODE_WORD) -> List[str]:
    """
    Tokenize ``text`` for rendering at ``mode`` granularity (``word`` or ``char``).
    """

    if mode == MODE_WORD:
        return split_render_tokens(text)
    if mode == MODE_CHAR:
        return split_chars(text)
    raise ValueError(f"Unsupported diff mode: {mode!r} (expected one of {', '.join(DIFF_MODES)})")


__all__ = [
    "DIFF_MODES",
    "MODE_CHAR",
    "MODE_WORD",
    "split_chars",
    "split_render_tokens",
    "split_words",
    "tokenize",
]
