"""Compare one ground-truth transcript against any number of hypotheses."""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .config import CompareConfig
from .der import DerMetrics, calculate_der
from .diarization import strip_speaker_tags
from .markup import FORMAT_HTML, compute_diff_markup
from .normalize import normalize_text
from .suggestions import Suggestion, dedupe_suggestions, extract_substitutions, filter_known_suggestions
from .wer import WerMetrics, calculate_wer
from .word_map import WordMap

logger = logging.getLogger(__name__)


@dataclass
class Panel:
    title: str
    text: str


@dataclass
class HypothesisResult:
    title: str
    markup: str
    wer: WerMetrics
    der: DerMetrics
    suggestions: List[Suggestion] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "wer": self.wer.to_dict(),
            "der": self.der.to_dict(),
            "suggestions": [suggestion.to_dict() for suggestion in self.suggestions],
            "markup": self.markup,
        }


@dataclass
class ComparisonResult:
    ground_truth: Panel
    ground_truth_display: str
    normalized: bool
    diff_mode: str
    hypotheses: List[HypothesisResult]
    suggestions: List[Suggestion]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ground_truth": self.ground_truth.title,
            "normalized": self.normalized,
            "diff_mode": self.diff_mode,
            "hypotheses": [result.to_dict() for result in self.hypotheses],
            "suggestions": [suggestion.to_dict() for suggestion in self.suggestions],
        }


def set_ground_truth(panels: Sequence[Panel], index: int) -> List[Panel]:
    """
    Move ``panels[index]`` to the front, keeping the others in order.
    """

    if index <= 0 or index >= len(panels):
        return list(panels)
    chosen = panels[index]
    return [chosen] + [panel for position, panel in enumerate(panels) if position != index]


def compare_panel(
    reference: Panel,
    hypothesis: Panel,
    config: CompareConfig,
    word_map: Optional[WordMap] = None,
    *,
    markup_format: str = FORMAT_HTML,
) -> HypothesisResult:
    """
    Score one hypothesis against the ground truth.

    The diff runs over the display text (tags kept, normalized when the mode
    is on), WER over tag-stripped content, DER over the raw tagged text, and
    suggestions over tag-stripped normalized content.
    """

    if config.normalized:
        ref_display = normalize_text(reference.text, word_map)
        hyp_display = normalize_text(hypothesis.text, word_map)
    else:
        ref_display, hyp_display = reference.text, hypothesis.text

    ref_content = strip_speaker_tags(reference.text)
    hyp_content = strip_speaker_tags(hypothesis.text)
    ref_normalized = normalize_text(ref_content, word_map)
    hyp_normalized = normalize_text(hyp_content, word_map)

    if config.normalized:
        wer = calculate_wer(ref_normalized, hyp_normalized)
    else:
        wer = calculate_wer(ref_content, hyp_content)

    markup = compute_diff_markup(
        ref_display,
        hyp_display,
        config.diff_mode,
        output_format=markup_format,
        delete_style=config.delete_style,
        insert_style=config.insert_style,
    )
    der = calculate_der(reference.text, hypothesis.text, tail_seconds=config.tail_seconds)
    suggestions = filter_known_suggestions(
        dedupe_suggestions(extract_substitutions(ref_normalized, hyp_normalized)),
        word_map,
    )
    logger.debug("%s: WER %.4f, DER %.4f, %d suggestions", hypothesis.title, wer.wer, der.der, len(suggestions))
    return HypothesisResult(title=hypothesis.title, markup=markup, wer=wer, der=der, suggestions=suggestions)


def compare_transcripts(
    panels: Sequence[Panel],
    config: Optional[CompareConfig] = None,
    word_map: Optional[WordMap] = None,
    *,
    markup_format: str = FORMAT_HTML,
) -> ComparisonResult:
    """
    Compare ``panels[0]`` (the ground truth) against every later panel.
    """

    if not panels:
        raise ValueError("At least one transcript is required")
    config = config or CompareConfig()
    reference, hypotheses = panels[0], panels[1:]
    results = [
        compare_panel(reference, hypothesis, config, word_map, markup_format=markup_format)
        for hypothesis in hypotheses
    ]
    combined = dedupe_suggestions(suggestion for result in results for suggestion in result.suggestions)
    reference_display = normalize_text(reference.text, word_map) if config.normalized else reference.text
    return ComparisonResult(
        ground_truth=reference,
        ground_truth_display=reference_display,
        normalized=config.normalized,
        diff_mode=config.diff_mode,
        hypotheses=results,
        suggestions=combined,
    )


def format_rate(value: float) -> str:
    if value == float("inf"):
        return "inf"
    return f"{value * 100:.2f}%"


def render_html_report(result: ComparisonResult) -> str:
    """
    Render a self-contained HTML page with one section per hypothesis.

    Expects ``result`` to hold HTML markup.
    """

    sections = []
    ground_truth = html.escape(result.ground_truth_display, quote=False).replace("\n", "<br />")
    sections.append(
        "<section class=\"ground-truth\">"
        f"<h2>{html.escape(result.ground_truth.title)} (ground truth)</h2>"
        f"<div class=\"transcript\">{ground_truth}</div>"
        "</section>"
    )
    for hypothesis in result.hypotheses:
        wer, der = hypothesis.wer, hypothesis.der
        body = hypothesis.markup.replace("\n", "<br />") or '<span class="no-diff">No difference.</span>'
        sections.append(
            "<section class=\"hypothesis\">"
            f"<h2>{html.escape(hypothesis.title)}</h2>"
            f"<div class=\"transcript\">{body}</div>"
            "<table class=\"metrics\">"
            f"<tr><th>WER</th><td>{format_rate(wer.wer)}</td>"
            f"<th>Substitutions</th><td>{wer.subs}</td>"
            f"<th>Insertions</th><td>{wer.ins}</td>"
            f"<th>Deletions</th><td>{wer.dels}</td></tr>"
            f"<tr><th>DER</th><td>{format_rate(der.der)}</td>"
            f"<th>Speaker confusion</th><td>{der.speaker_confusion:.3f}s</td>"
            f"<th>False alarm</th><td>{der.false_alarm:.3f}s</td>"
            f"<th>Missed speech</th><td>{der.missed_speech:.3f}s</td></tr>"
            "</table>"
            "</section>"
        )
    return (
        "<!DOCTYPE html>\n<html><head><meta charset=\"utf-8\"><title>Transcript comparison</title>"
        "<style>.transcript{white-space:pre-wrap;font-family:sans-serif;}"
        "th{text-align:left;padding-right:0.5em;}td{padding-right:1.5em;}</style>"
        "</head><body>\n" + "\n".join(sections) + "\n</body></html>\n"
    )


__all__ = [
    "ComparisonResult",
    "HypothesisResult",
    "Panel",
    "compare_panel",
    "compare_transcripts",
    "format_rate",
    "render_html_report",
    "set_ground_truth",
]
