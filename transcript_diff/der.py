"""Duration-weighted diarization error rate between two speaker timelines."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Sequence

from .diarization import DEFAULT_TAIL_SECONDS, DiarizationSegment, parse_diarization
from .wer import rate_to_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DerMetrics:
    """
    DER with its duration components (seconds).

    ``der == (speaker_confusion + missed_speech + false_alarm) / reference_duration``
    whenever ``reference_duration`` is positive.
    """

    der: float
    speaker_confusion: float = 0.0
    missed_speech: float = 0.0
    false_alarm: float = 0.0
    reference_duration: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "der": rate_to_json(self.der),
            "speaker_confusion": self.speaker_confusion,
            "missed_speech": self.missed_speech,
            "false_alarm": self.false_alarm,
            "reference_duration": self.reference_duration,
        }


def total_duration(segments: Sequence[DiarizationSegment]) -> float:
    return sum(segment.end - segment.start for segment in segments)


def overlap(first: DiarizationSegment, second: DiarizationSegment) -> float:
    return max(0.0, min(first.end, second.end) - max(first.start, second.start))


def der_from_segments(
    reference: Sequence[DiarizationSegment],
    hypothesis: Sequence[DiarizationSegment],
) -> DerMetrics:
    """
    Score ``hypothesis`` against ``reference`` by pairwise temporal overlap.

    Speaker labels must match exactly to count as correct; no label
    permutation is searched.
    """

    reference_duration = total_duration(reference)
    hypothesis_duration = total_duration(hypothesis)
    if reference_duration == 0:
        return DerMetrics(
            der=1.0 if hypothesis else 0.0,
            false_alarm=hypothesis_duration,
        )

    total_overlap = 0.0
    correct_overlap = 0.0
    for ref_segment in reference:
        for hyp_segment in hypothesis:
            shared = overlap(ref_segment, hyp_segment)
            if not shared:
                continue
            total_overlap += shared
            if ref_segment.speaker == hyp_segment.speaker:
                correct_overlap += shared

    speaker_confusion = total_overlap - correct_overlap
    missed_speech = max(0.0, reference_duration - total_overlap)
    false_alarm = max(0.0, hypothesis_duration - total_overlap)
    der = (speaker_confusion + missed_speech + false_alarm) / reference_duration
    return DerMetrics(
        der=der,
        speaker_confusion=speaker_confusion,
        missed_speech=missed_speech,
        false_alarm=false_alarm,
        reference_duration=reference_duration,
    )


def calculate_der(
    reference: str,
    hypothesis: str,
    *,
    tail_seconds: float = DEFAULT_TAIL_SECONDS,
) -> DerMetrics:
    """
    Parse both tagged transcripts and compute DER.

    The reference is parsed without a duration hint; its last segment end is
    then used as the audio duration when extending the hypothesis's final turn.
    """

    ref_segments = parse_diarization(reference, tail_seconds=tail_seconds)
    if total_duration(ref_segments) == 0:
        hyp_segments = parse_diarization(hypothesis, tail_seconds=tail_seconds)
        return der_from_segments(ref_segments, hyp_segments)

    audio_duration = max(segment.end for segment in ref_segments)
    hyp_segments = parse_diarization(hypothesis, audio_duration, tail_seconds=tail_seconds)
    logger.debug(
        "DER over %d reference and %d hypothesis segments (audio %.3fs)",
        len(ref_segments),
        len(hyp_segments),
        audio_duration,
    )
    return der_from_segments(ref_segments, hyp_segments)


__all__ = [
    "DerMetrics",
    "calculate_der",
    "der_from_segments",
    "overlap",
    "total_duration",
]
