"""Word equivalence map: many lower-cased aliases mapped onto one canonical target."""

from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Pattern, Tuple

from .io_utils import write_json

logger = logging.getLogger(__name__)


class WordMapError(ValueError):
    """Raised when a word map payload cannot be accepted."""


def validate_word_map(payload: Any) -> Dict[str, List[str]]:
    """
    Check that ``payload`` is ``{target: [alias, ...]}`` and return it in canonical form.

    Targets and aliases are lower-cased, alias lists deduplicated and sorted,
    and targets with no aliases dropped. An alias listed under two different
    targets is rejected.
    """

    if not isinstance(payload, dict):
        raise WordMapError(f"Word map must be a JSON object, got {type(payload).__name__}")

    canonical: Dict[str, List[str]] = {}
    owner: Dict[str, str] = {}
    for target, sources in payload.items():
        if not isinstance(target, str):
            raise WordMapError(f"Word map target {target!r} is not a string")
        if not isinstance(sources, list) or not all(isinstance(source, str) for source in sources):
            raise WordMapError(f"Aliases for {target!r} must be a list of strings")
        key = target.strip().lower()
        for source in sources:
            alias = source.strip().lower()
            if not alias or not key or alias == key:
                continue
            if owner.get(alias, key) != key:
                raise WordMapError(f"Alias {alias!r} is mapped to both {owner[alias]!r} and {key!r}")
            owner[alias] = key
            canonical.setdefault(key, [])
            if alias not in canonical[key]:
                canonical[key].append(alias)

    return {target: sorted(aliases) for target, aliases in sorted(canonical.items())}


def migrate_legacy_map(payload: Mapping[str, str]) -> Dict[str, List[str]]:
    """
    Convert an older ``{source: target}`` map into ``{target: [sources]}``.
    """

    migrated: Dict[str, List[str]] = {}
    for source, target in payload.items():
        key = str(target).lower()
        alias = str(source).lower()
        if not key or not alias or key == alias:
            continue
        migrated.setdefault(key, [])
        if alias not in migrated[key]:
            migrated[key].append(alias)
    return {target: sorted(aliases) for target, aliases in sorted(migrated.items())}


def _is_legacy_payload(payload: Any) -> bool:
    return isinstance(payload, dict) and bool(payload) and isinstance(next(iter(payload.values())), str)


def build_lookup(mapping: Mapping[str, Iterable[str]]) -> Dict[str, str]:
    """Flatten ``{target: [aliases]}`` into a case-insensitive ``alias -> target`` dict."""

    lookup: Dict[str, str] = {}
    for target, sources in mapping.items():
        for source in sources:
            if source:
                lookup[source.lower()] = target
    return lookup


@lru_cache(maxsize=32)
def _alias_pattern(aliases: Tuple[str, ...]) -> Pattern[str]:
    escaped = "|".join(re.escape(alias) for alias in aliases)
    return re.compile(rf"\b({escaped})\b", re.IGNORECASE)


def apply_word_map(text: str, mapping: Mapping[str, Iterable[str]]) -> str:
    """
    Replace whole-word alias occurrences in ``text`` with their canonical target.

    Matching is case-insensitive and longer aliases are tried first; the
    replacement is the target exactly as stored in the map.
    """

    if not text or not mapping:
        return text
    lookup = build_lookup(mapping)
    if not lookup:
        return text
    aliases = tuple(sorted(lookup, key=len, reverse=True))
    pattern = _alias_pattern(aliases)
    return pattern.sub(lambda match: lookup.get(match.group(0).lower(), match.group(0)), text)


class WordMap:
    """
    Mutable holder for the equivalence map.

    Every alias belongs to exactly one target and a target only exists while
    it has at least one alias.
    """

    def __init__(self, mapping: Optional[Mapping[str, Iterable[str]]] = None) -> None:
        self._targets: Dict[str, List[str]] = {}
        if mapping:
            self.replace(dict((target, list(sources)) for target, sources in mapping.items()))

    def __len__(self) -> int:
        return len(self._targets)

    def __contains__(self, target: object) -> bool:
        return isinstance(target, str) and target.lower() in self._targets

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._targets))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WordMap):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"WordMap({self.to_dict()!r})"

    def aliases_for(self, target: str) -> List[str]:
        return list(self._targets.get(target.lower(), []))

    def target_for(self, alias: str) -> Optional[str]:
        alias = alias.lower()
        for target, sources in self._targets.items():
            if alias in sources:
                return target
        return None

    def add_alias(self, source: str, target: str) -> bool:
        """
        Map ``source`` onto ``target``; return False when nothing changed.

        An alias already owned by another target moves to ``target``.
        """

        alias = (source or "").strip().lower()
        key = (target or "").strip().lower()
        if not alias or not key or alias == key:
            return False
        current = self.target_for(alias)
        if current == key:
            return False
        if current is not None:
            logger.info("Moving alias %r from %r to %r", alias, current, key)
            self.remove_alias(alias, current)
        sources = self._targets.setdefault(key, [])
        sources.append(alias)
        sources.sort()
        return True

    def remove_alias(self, source: str, target: str) -> bool:
        key = target.lower()
        alias = source.lower()
        sources = self._targets.get(key)
        if not sources or alias not in sources:
            return False
        sources.remove(alias)
        if not sources:
            del self._targets[key]
        return True

    def remove_target(self, target: str) -> bool:
        return self._targets.pop(target.lower(), None) is not None

    def replace(self, payload: Any) -> None:
        """
        Swap in an imported map wholesale.

        Raises ``WordMapError`` for an invalid payload, leaving the current
        map untouched.
        """

        self._targets = validate_word_map(payload)

    def lookup(self) -> Dict[str, str]:
        return build_lookup(self._targets)

    def to_dict(self) -> Dict[str, List[str]]:
        return {target: list(sources) for target, sources in sorted(self._targets.items())}

    def apply(self, text: str) -> str:
        return apply_word_map(text, self._targets)


def load_word_map(path: Path) -> WordMap:
    """
    Read a word map JSON file, migrating the legacy ``{source: target}`` layout.

    A missing file yields an empty map; unparsable JSON raises ``WordMapError``.
    """

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Word map %s not found; continuing with an empty map.", path)
        return WordMap()
    except json.JSONDecodeError as exc:
        raise WordMapError(f"Failed to parse word map {path}: {exc}") from exc

    if _is_legacy_payload(data):
        logger.debug("Migrating legacy word map layout in %s", path)
        if not all(isinstance(value, str) for value in data.values()):
            raise WordMapError(f"Mixed legacy and current layouts in {path}")
        data = migrate_legacy_map(data)
    word_map = WordMap()
    word_map.replace(data)
    return word_map


def save_word_map(path: Path, word_map: WordMap) -> None:
    write_json(path, word_map.to_dict())


def merge_word_maps(paths: Iterable[Path]) -> WordMap:
    """
    Merge several map files; on a conflicting alias the earlier file wins.
    """

    merged = WordMap()
    for path in paths:
        for target, sources in load_word_map(path).to_dict().items():
            for source in sources:
                current = merged.target_for(source)
                if current is not None and current != target:
                    logger.warning(
                        "Conflict for %r: %r vs %r (keeping first from earlier file)",
                        source,
                        current,
                        target,
                    )
                    continue
                merged.add_alias(source, target)
    return merged


__all__ = [
    "WordMap",
    "WordMapError",
    "apply_word_map",
    "build_lookup",
    "load_word_map",
    "merge_word_maps",
    "migrate_legacy_map",
    "save_word_map",
    "validate_word_map",
]
