"""Normalized comparison mode: word map substitution plus case/punctuation folding."""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Optional, Union

from .diarization import split_speaker_tag
from .word_map import WordMap, apply_word_map

PUNCTUATION_RE = re.compile(r"[^\w\s]|_")
WHITESPACE_RE = re.compile(r"\s+")

WordMapLike = Union[WordMap, Mapping[str, Iterable[str]]]


def clean_text(text: str) -> str:
    """Lower-case ``text``, drop punctuation and underscores, collapse whitespace."""

    text = PUNCTUATION_RE.sub("", text.lower())
    return WHITESPACE_RE.sub(" ", text).strip()


def substitute_words(text: str, word_map: Optional[WordMapLike]) -> str:
    if not word_map:
        return text
    if isinstance(word_map, WordMap):
        return word_map.apply(text)
    return apply_word_map(text, word_map)


def normalize_text(text: str, word_map: Optional[WordMapLike] = None) -> str:
    """
    Normalize ``text`` line by line for comparison.

    Any leading ``[timestamp]`` and ``Speaker:`` label is kept verbatim; only
    the content after it is alias-substituted and folded.
    """

    normalized = []
    for line in text.split("\n"):
        tagged = split_speaker_tag(line)
        content = clean_text(substitute_words(tagged.text, word_map))
        if tagged.prefix:
            normalized.append(f"{tagged.prefix} {content}" if content else tagged.prefix)
        else:
            normalized.append(content)
    return "\n".join(normalized)


__all__ = ["WordMapLike", "clean_text", "normalize_text", "substitute_words"]
