"""
Transcript comparison: diff markup, WER, DER and word-map suggestions.

The top-level scripts (``compare_transcripts.py``, ``manage_word_map.py``)
are thin wrappers over the functions re-exported here.
"""

from .alignment import EditOp, align  # noqa: F401
from .comparison import Panel, compare_transcripts  # noqa: F401
from .der import DerMetrics, calculate_der  # noqa: F401
from .diarization import DiarizationSegment, parse_diarization, strip_speaker_tags  # noqa: F401
from .markup import compute_diff_markup  # noqa: F401
from .normalize import normalize_text  # noqa: F401
from .suggestions import Suggestion, extract_substitutions  # noqa: F401
from .wer import WerMetrics, calculate_wer  # noqa: F401
from .word_map import WordMap, WordMapError, apply_word_map  # noqa: F401

__all__ = [
    "DerMetrics",
    "DiarizationSegment",
    "EditOp",
    "Panel",
    "Suggestion",
    "WerMetrics",
    "WordMap",
    "WordMapError",
    "align",
    "apply_word_map",
    "calculate_der",
    "calculate_wer",
    "compare_transcripts",
    "compute_diff_markup",
    "extract_substitutions",
    "normalize_text",
    "parse_diarization",
    "strip_speaker_tags",
]
