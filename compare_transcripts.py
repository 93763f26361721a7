#!/usr/bin/env python3
"""Compare a ground-truth transcript against one or more hypotheses (WER, DER, diff)."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from transcript_diff.comparison import Panel, compare_transcripts, format_rate, render_html_report, set_ground_truth
from transcript_diff.config import CompareConfig, ConfigError, load_config, load_environment
from transcript_diff.io_utils import read_transcript, write_json, write_text
from transcript_diff.markup import FORMAT_TEXT
from transcript_diff.tokenize import DIFF_MODES
from transcript_diff.word_map import WordMap, WordMapError, load_word_map


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare transcripts against a ground truth and report WER/DER.")
    parser.add_argument("reference", type=Path, help="Ground-truth transcript (.txt or .vtt)")
    parser.add_argument("hypotheses", nargs="+", type=Path, help="Hypothesis transcripts to score")
    parser.add_argument(
        "--ground-truth",
        type=int,
        default=0,
        help="Index of the transcript to treat as ground truth (0 = reference, 1 = first hypothesis, ...)",
    )
    parser.add_argument("--mode", choices=DIFF_MODES, default=None, help="Diff granularity (default: word)")
    parser.add_argument(
        "--normalized",
        action="store_true",
        default=None,
        help="Ignore case and punctuation and apply the word map before diffing and WER",
    )
    parser.add_argument("--word-map", type=Path, help="Word map JSON ({target: [aliases]})")
    parser.add_argument("--tail-seconds", type=float, help="Duration given to the final speaker turn")
    parser.add_argument("--config", type=Path, help="YAML settings file")
    parser.add_argument("--json", type=Path, help="Write the full report as JSON to this path")
    parser.add_argument("--html", type=Path, help="Write an HTML diff report to this path")
    parser.add_argument("--show-diff", action="store_true", help="Print a [-deleted-]{+inserted+} diff per hypothesis")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    return parser.parse_args(argv)


def load_panels(paths: Sequence[Path]) -> List[Panel]:
    panels: List[Panel] = []
    for path in paths:
        try:
            text = read_transcript(path)
        except FileNotFoundError:
            raise SystemExit(f"[error] Transcript not found: {path}")
        panels.append(Panel(title=path.stem, text=text))
    return panels


def resolve_word_map(config: CompareConfig) -> Optional[WordMap]:
    if not config.word_map_path:
        return None
    try:
        return load_word_map(config.word_map_path)
    except WordMapError as exc:
        raise SystemExit(f"[error] {exc}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    load_environment()

    try:
        config = load_config(
            args.config,
            overrides={
                "diff_mode": args.mode,
                "normalized": args.normalized,
                "tail_seconds": args.tail_seconds,
                "word_map_path": args.word_map,
            },
        )
    except FileNotFoundError as exc:
        raise SystemExit(f"[error] Config file not found: {exc.filename}")
    except ConfigError as exc:
        raise SystemExit(f"[error] {exc}")

    panels = load_panels([args.reference, *args.hypotheses])
    if not 0 <= args.ground_truth < len(panels):
        raise SystemExit(f"[error] --ground-truth must be between 0 and {len(panels) - 1}")
    panels = set_ground_truth(panels, args.ground_truth)
    word_map = resolve_word_map(config)

    result = compare_transcripts(panels, config, word_map)

    print(f"Ground truth: {result.ground_truth.title}" + (" (normalized)" if result.normalized else ""))
    for hypothesis in result.hypotheses:
        wer, der = hypothesis.wer, hypothesis.der
        print(
            f"{hypothesis.title}: WER {format_rate(wer.wer)} "
            f"(S={wer.subs} I={wer.ins} D={wer.dels}); "
            f"DER {format_rate(der.der)} "
            f"(confusion={der.speaker_confusion:.2f}s missed={der.missed_speech:.2f}s false_alarm={der.false_alarm:.2f}s)"
        )

    if args.show_diff:
        text_result = compare_transcripts(panels, config, word_map, markup_format=FORMAT_TEXT)
        for hypothesis in text_result.hypotheses:
            print(f"\n--- {result.ground_truth.title}\n+++ {hypothesis.title}")
            print(hypothesis.markup)

    if result.suggestions:
        print("\nSuggested word map entries:")
        for suggestion in result.suggestions:
            print(f"  {suggestion.source} -> {suggestion.target}")

    if args.json:
        write_json(args.json, result.to_dict())
        print(f"[info] Wrote JSON report to {args.json}", file=sys.stderr)
    if args.html:
        write_text(args.html, render_html_report(result))
        print(f"[info] Wrote HTML report to {args.html}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
