#!/usr/bin/env python3
"""Inspect and edit the word equivalence map used by normalized comparisons."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from transcript_diff.config import ConfigError, load_config, load_environment
from transcript_diff.diarization import strip_speaker_tags
from transcript_diff.io_utils import read_transcript
from transcript_diff.normalize import normalize_text
from transcript_diff.suggestions import Suggestion, collect_suggestions, remove_suggestion
from transcript_diff.word_map import WordMap, WordMapError, load_word_map, merge_word_maps, save_word_map

DEFAULT_WORD_MAP = Path("word_map.json")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage the {target: [aliases]} word map.")
    parser.add_argument("--word-map", type=Path, help=f"Word map JSON (default: config, env, or {DEFAULT_WORD_MAP})")
    parser.add_argument("--config", type=Path, help="YAML settings file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Print every target and its aliases")

    add = sub.add_parser("add", help="Map SOURCE onto TARGET")
    add.add_argument("source")
    add.add_argument("target")

    remove = sub.add_parser("remove", help="Remove SOURCE from TARGET")
    remove.add_argument("source")
    remove.add_argument("target")

    remove_target = sub.add_parser("remove-target", help="Remove TARGET and all of its aliases")
    remove_target.add_argument("target")

    import_cmd = sub.add_parser("import", help="Replace the map with the contents of a JSON file")
    import_cmd.add_argument("payload", type=Path)

    export = sub.add_parser("export", help="Write the map to a JSON file")
    export.add_argument("destination", type=Path)

    merge = sub.add_parser("merge", help="Merge map files into OUTPUT (earlier files win conflicts)")
    merge.add_argument("output", type=Path)
    merge.add_argument("inputs", nargs="+", type=Path)

    suggest = sub.add_parser("suggest", help="Mine single-word substitutions from transcripts")
    suggest.add_argument("reference", type=Path, help="Ground-truth transcript")
    suggest.add_argument("hypotheses", nargs="+", type=Path, help="Hypothesis transcripts")
    suggest.add_argument("--accept", action="store_true", help="Add every suggestion to the map")
    suggest.add_argument(
        "--reject",
        action="append",
        default=[],
        metavar="SOURCE=TARGET",
        help="Drop this suggestion (repeatable)",
    )
    return parser.parse_args(argv)


def resolve_map_path(args: argparse.Namespace) -> Path:
    if args.word_map:
        return args.word_map
    try:
        config = load_config(args.config)
    except (FileNotFoundError, ConfigError) as exc:
        raise SystemExit(f"[error] {exc}")
    return config.word_map_path or DEFAULT_WORD_MAP


def open_map(path: Path) -> WordMap:
    try:
        return load_word_map(path)
    except WordMapError as exc:
        raise SystemExit(f"[error] {exc}")


def cmd_list(word_map: WordMap) -> None:
    if not len(word_map):
        print("No word mappings defined.")
        return
    for target in word_map:
        print(f"{target}: {', '.join(word_map.aliases_for(target))}")


def cmd_import(word_map: WordMap, payload_path: Path) -> None:
    try:
        payload = json.loads(payload_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise SystemExit(f"[error] Import file not found: {payload_path}")
    except json.JSONDecodeError as exc:
        raise SystemExit(f"[error] Invalid JSON in {payload_path}: {exc}")
    try:
        word_map.replace(payload)
    except WordMapError as exc:
        raise SystemExit(f"[error] Invalid word map format: {exc}")


def parse_rejection(value: str) -> Suggestion:
    source, sep, target = value.partition("=")
    if not sep or not source.strip() or not target.strip():
        raise SystemExit(f"[error] --reject expects SOURCE=TARGET, got {value!r}")
    return Suggestion(source=source.strip(), target=target.strip())


def cmd_suggest(
    word_map: WordMap,
    reference: Path,
    hypotheses: Sequence[Path],
    accept: bool,
    rejected: Sequence[str] = (),
) -> bool:
    try:
        ref_text = read_transcript(reference)
        hyp_texts = [read_transcript(path) for path in hypotheses]
    except FileNotFoundError as exc:
        raise SystemExit(f"[error] Transcript not found: {exc.filename}")

    def prepare(text: str) -> str:
        return normalize_text(strip_speaker_tags(text), word_map)

    suggestions = collect_suggestions(prepare(ref_text), [prepare(text) for text in hyp_texts], word_map)
    for value in rejected:
        suggestions = remove_suggestion(suggestions, parse_rejection(value))
    if not suggestions:
        print("No new substitutions found.")
        return False
    changed = False
    for suggestion in suggestions:
        print(f"{suggestion.source} -> {suggestion.target}")
        if accept:
            changed = word_map.add_alias(suggestion.source, suggestion.target) or changed
    return changed


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    load_environment()

    if args.command == "merge":
        try:
            merged = merge_word_maps(args.inputs)
        except WordMapError as exc:
            raise SystemExit(f"[error] {exc}")
        save_word_map(args.output, merged)
        print(f"Merged {len(args.inputs)} files into {args.output} ({len(merged)} targets).")
        return 0

    map_path = resolve_map_path(args)
    word_map = open_map(map_path)
    changed = False

    if args.command == "list":
        cmd_list(word_map)
    elif args.command == "add":
        changed = word_map.add_alias(args.source, args.target)
        if not changed:
            print(f"[warn] Nothing to add for {args.source!r} -> {args.target!r}", file=sys.stderr)
    elif args.command == "remove":
        changed = word_map.remove_alias(args.source, args.target)
        if not changed:
            print(f"[warn] {args.source!r} is not an alias of {args.target!r}", file=sys.stderr)
    elif args.command == "remove-target":
        changed = word_map.remove_target(args.target)
        if not changed:
            print(f"[warn] Target {args.target!r} not found", file=sys.stderr)
    elif args.command == "import":
        cmd_import(word_map, args.payload)
        changed = True
    elif args.command == "export":
        save_word_map(args.destination, word_map)
        print(f"Exported {len(word_map)} targets to {args.destination}")
    elif args.command == "suggest":
        changed = cmd_suggest(word_map, args.reference, args.hypotheses, args.accept, args.reject)
    else:
        raise SystemExit(f"[error] Unsupported command: {args.command}")

    if changed:
        save_word_map(map_path, word_map)
        print(f"Saved {map_path} ({len(word_map)} targets).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
