"""Mine single-word substitutions from word alignments as word map candidates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .alignment import DELETE, INSERT, align
from .tokenize import split_words
from .word_map import WordMap


@dataclass(frozen=True)
class Suggestion:
    """A proposed ``source -> target`` alias, cased as observed in the texts."""

    source: str
    target: str

    @property
    def key(self) -> str:
        return f"{self.source.lower()}|{self.target.lower()}"

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "target": self.target}


def extract_substitutions(reference: str, hypothesis: str) -> List[Suggestion]:
    """
    Find one-word-for-one-word replacements between ``reference`` and ``hypothesis``.

    A delete run immediately followed by an insert run, each holding exactly
    one word, becomes ``Suggestion(source=inserted, target=deleted)``. Longer
    runs are ambiguous and skipped.
    """

    alignment = align(split_words(reference), split_words(hypothesis))
    suggestions: List[Suggestion] = []
    index = 0
    while index < len(alignment) - 1:
        current, following = alignment[index], alignment[index + 1]
        if (
            current.kind == DELETE
            and following.kind == INSERT
            and len(current.run) == 1
            and len(following.run) == 1
        ):
            suggestions.append(Suggestion(source=following.run[0], target=current.run[0]))
            index += 2
            continue
        index += 1
    return suggestions


def dedupe_suggestions(suggestions: Iterable[Suggestion]) -> List[Suggestion]:
    """Keep the first of each case-insensitively equal ``source|target`` pair."""

    unique: Dict[str, Suggestion] = {}
    for suggestion in suggestions:
        unique.setdefault(suggestion.key, suggestion)
    return list(unique.values())


def filter_known_suggestions(
    suggestions: Iterable[Suggestion],
    word_map: Optional[WordMap],
) -> List[Suggestion]:
    """
    Drop suggestions the map already covers, or whose source equals its target.
    """

    lookup = word_map.lookup() if word_map else {}
    kept: List[Suggestion] = []
    for suggestion in suggestions:
        source = suggestion.source.lower()
        target = suggestion.target.lower()
        if source == target:
            continue
        if lookup.get(source) == target:
            continue
        kept.append(suggestion)
    return kept


def remove_suggestion(suggestions: Iterable[Suggestion], rejected: Suggestion) -> List[Suggestion]:
    return [suggestion for suggestion in suggestions if suggestion.key != rejected.key]


def collect_suggestions(
    reference: str,
    hypotheses: Iterable[str],
    word_map: Optional[WordMap] = None,
) -> List[Suggestion]:
    """
    Mine every hypothesis against ``reference``, then dedupe and drop known aliases.
    """

    mined: List[Suggestion] = []
    for hypothesis in hypotheses:
        mined.extend(extract_substitutions(reference, hypothesis))
    return filter_known_suggestions(dedupe_suggestions(mined), word_map)


__all__ = [
    "Suggestion",
    "collect_suggestions",
    "dedupe_suggestions",
    "extract_substitutions",
    "filter_known_suggestions",
    "remove_suggestion",
]
