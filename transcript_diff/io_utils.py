"""File IO helpers: JSON output and transcript input (plain text or WebVTT)."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, List, Optional, Tuple

import webvtt

from .time_utils import format_timestamp, parse_timestamp

DEFAULT_UNKNOWN_SPEAKER = "unknown_speaker"

VOICE_TAG_PATTERN = re.compile(r"^<v(?:\.[^\s>]+)*\s+([^>]+)>(.*)$", re.IGNORECASE)
COLON_SPEAKER_PATTERN = re.compile(r"^\s*([^:]{1,100}?)\s*:\s*(.+)$")
CLOSING_VOICE_TAG = re.compile(r"</v>", re.IGNORECASE)


def write_json(path: Path, payload: Any) -> None:
    """
    Write ``payload`` to ``path`` as UTF-8 JSON, ensuring parent directories exist.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, ensure_ascii=False)
        fh.write("\n")


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def extract_voice_line(line: str, default_speaker: Optional[str]) -> Tuple[Optional[str], str]:
    """
    Pull a speaker out of a ``<v Name>text`` or ``Name: text`` cue line.

    Returns ``(speaker, content)``; ``speaker`` is None when the line names none.
    """

    match = VOICE_TAG_PATTERN.match(line)
    if match:
        return match.group(1).strip(), CLOSING_VOICE_TAG.sub("", match.group(2)).strip()
    match = COLON_SPEAKER_PATTERN.match(line)
    if match and default_speaker is None:
        return match.group(1).strip(), match.group(2).strip()
    return None, CLOSING_VOICE_TAG.sub("", line).strip()


def vtt_to_tagged_lines(path: Path) -> List[str]:
    """
    Convert WebVTT cues into ``[HH:MM:SS.mmm] Speaker: text`` lines.
    """

    lines: List[str] = []
    previous_speaker: Optional[str] = None

    for cue in webvtt.read(str(path)):
        voice = getattr(cue, "voice", None)
        cue_speaker = voice.strip() if voice else None
        contents: List[str] = []

        raw_text = getattr(cue, "raw_text", cue.text)
        for raw_line in raw_text.splitlines():
            line = raw_line.strip()
            if not line:
                continue
            speaker_candidate, content = extract_voice_line(line, cue_speaker)
            if speaker_candidate:
                cue_speaker = speaker_candidate
            if content:
                contents.append(content)

        text = " ".join(contents).strip()
        if not text:
            continue

        speaker = cue_speaker or previous_speaker or DEFAULT_UNKNOWN_SPEAKER
        start = format_timestamp(parse_timestamp(cue.start))
        lines.append(f"[{start}] {speaker}: {text}")
        previous_speaker = speaker

    return lines


def read_transcript(path: Path) -> str:
    """
    Read a transcript as tagged text; ``.vtt`` files are converted cue by cue.
    """

    if path.suffix.lower() == ".vtt":
        return "\n".join(vtt_to_tagged_lines(path))
    return path.read_text(encoding="utf-8")


__all__ = [
    "DEFAULT_UNKNOWN_SPEAKER",
    "extract_voice_line",
    "read_transcript",
    "vtt_to_tagged_lines",
    "write_json",
    "write_text",
]
