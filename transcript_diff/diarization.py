"""Parse ``[HH:MM:SS] Speaker: text`` transcript lines into speaker turns."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .time_utils import looks_like_timestamp, parse_timestamp, split_bracket_timestamp

DEFAULT_TAIL_SECONDS = 3.0

SPEAKER_LABEL_RE = re.compile(r"^(?P<speaker>[^:]{1,100}?)[ \t]*:[ \t]*")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaggedLine:
    """One transcript line split into its verbatim tag prefix and content."""

    stamp: Optional[str]
    speaker: Optional[str]
    prefix: str
    text: str


@dataclass(frozen=True)
class DiarizationSegment:
    start: float
    end: float
    speaker: str

    @property
    def duration(self) -> float:
        return self.end - self.start


def split_speaker_tag(line: str) -> TaggedLine:
    """
    Split ``line`` into an optional bracketed timestamp, speaker label and content.

    ``prefix`` is the exact leading text covering the timestamp and the
    colon-terminated label (without the whitespace that follows the colon).
    On a line without a label, a leading bracket that is not a timestamp
    (``[laughs]``) stays part of the content.
    """

    stamp, rest = split_bracket_timestamp(line)
    consumed = len(line) - len(rest)
    match = SPEAKER_LABEL_RE.match(rest)
    speaker = match.group("speaker").strip() if match else None
    if not speaker:
        if stamp is not None and not looks_like_timestamp(stamp):
            return TaggedLine(stamp=None, speaker=None, prefix="", text=line.strip())
        prefix = line[:consumed].rstrip()
        return TaggedLine(stamp=stamp, speaker=None, prefix=prefix, text=rest.strip())

    colon_end = consumed + rest.index(":") + 1
    return TaggedLine(
        stamp=stamp,
        speaker=speaker,
        prefix=line[:colon_end],
        text=line[colon_end:].strip(),
    )


def strip_speaker_tags(text: str) -> str:
    """
    Drop timestamps and speaker labels, joining the remaining content with single spaces.
    """

    contents = []
    for line in text.splitlines():
        content = split_speaker_tag(line).text
        if content:
            contents.append(content)
    return " ".join(contents)


def _turn_starts(lines: Iterable[str]) -> List[Tuple[float, str]]:
    starts: List[Tuple[float, str]] = []
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        tagged = split_speaker_tag(line)
        if tagged.speaker is None:
            logger.debug("Skipping line %d without a speaker label: %r", lineno, line)
            continue
        if tagged.stamp is None:
            logger.debug("Skipping line %d without a timestamp: %r", lineno, line)
            continue
        starts.append((parse_timestamp(tagged.stamp), tagged.speaker))
    return starts


def parse_diarization(
    text: str,
    total_duration: Optional[float] = None,
    *,
    tail_seconds: float = DEFAULT_TAIL_SECONDS,
) -> List[DiarizationSegment]:
    """
    Build one speaker segment per timestamped, labelled line of ``text``.

    Each segment ends where the next one starts. The final segment ends at
    ``total_duration`` when that lies past its start, otherwise ``tail_seconds``
    after it. Lines without a label or without a leading timestamp add no
    boundary; an unreadable timestamp counts as second zero. Turns are
    ordered by start time (stable for equal starts) so segments never overlap.
    """

    starts = sorted(_turn_starts(text.splitlines()), key=lambda item: item[0])
    segments: List[DiarizationSegment] = []
    for index, (start, speaker) in enumerate(starts):
        if index + 1 < len(starts):
            end = starts[index + 1][0]
        elif total_duration is not None and total_duration > start:
            end = total_duration
        else:
            end = start + tail_seconds
        segments.append(DiarizationSegment(start=start, end=end, speaker=speaker))
    return segments


__all__ = [
    "DEFAULT_TAIL_SECONDS",
    "DiarizationSegment",
    "TaggedLine",
    "parse_diarization",
    "split_speaker_tag",
    "strip_speaker_tags",
]
