"""Longest-common-subsequence alignment between two token sequences."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Hashable, List, Sequence, Tuple

EQUAL = "equal"
INSERT = "insert"
DELETE = "delete"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditOp:
    """A run of consecutive tokens that share one edit kind."""

    kind: str
    run: Tuple[str, ...]

    def joined(self, separator: str = "") -> str:
        return separator.join(self.run)


Alignment = List[EditOp]


def _intern(reference: Sequence[str], hypothesis: Sequence[str]) -> Tuple[List[int], List[int]]:
    """
    Map every distinct token to a small integer so the row updates compare ints.
    """

    ids: Dict[Hashable, int] = {}
    ref_ids = [ids.setdefault(token, len(ids)) for token in reference]
    hyp_ids = [ids.setdefault(token, len(ids)) for token in hypothesis]
    return ref_ids, hyp_ids


def _match_masks(hyp_ids: Sequence[int]) -> Dict[int, int]:
    masks: Dict[int, int] = {}
    for position, token in enumerate(hyp_ids):
        masks[token] = masks.get(token, 0) | (1 << position)
    return masks


def _lcs_rows(ref_ids: Sequence[int], hyp_ids: Sequence[int]) -> List[int]:
    """
    Compute the LCS table one row per int, one bit per hypothesis position.

    Bit ``j - 1`` of ``rows[i]`` is set when ``lcs(ref[:i], hyp[:j])`` is one
    more than ``lcs(ref[:i], hyp[:j - 1])``; summing the low ``j`` bits gives
    the dense table cell. Each row costs a handful of big-int operations, so
    the table needs ``n * m`` bits instead of ``n * m`` list slots.
    """

    full = (1 << len(hyp_ids)) - 1
    masks = _match_masks(hyp_ids)
    rows = [0]
    unchanged = full
    for token in ref_ids:
        matched = unchanged & masks.get(token, 0)
        unchanged = ((unchanged + matched) | (unchanged - matched)) & full
        rows.append(~unchanged & full)
    return rows


def merge_steps(steps: Sequence[Tuple[str, str]]) -> Alignment:
    """
    Collapse single-token ``(kind, token)`` steps into runs of the same kind.
    """

    merged: Alignment = []
    current_kind = None
    current_run: List[str] = []
    for kind, token in steps:
        if kind != current_kind and current_run:
            merged.append(EditOp(kind=current_kind, run=tuple(current_run)))
            current_run = []
        current_kind = kind
        current_run.append(token)
    if current_run:
        merged.append(EditOp(kind=current_kind, run=tuple(current_run)))
    return merged


def align(reference: Sequence[str], hypothesis: Sequence[str]) -> Alignment:
    """
    Compute a minimal equal/insert/delete script turning ``reference`` into ``hypothesis``.

    The backtrack walks from the bottom-right of the LCS table, taking a
    match whenever the current tokens are equal, otherwise an insertion when
    dropping a hypothesis token keeps an LCS at least as long as dropping a
    reference token, otherwise a deletion. With unequal tokens that test
    reduces to "column j adds nothing to row i", a single bit of the packed
    row. A shared suffix is peeled off first; the backtrack would emit it as
    matches anyway, so the script is unchanged while the table shrinks.
    """

    reference = list(reference)
    hypothesis = list(hypothesis)

    suffix = 0
    while (
        suffix < len(reference)
        and suffix < len(hypothesis)
        and reference[len(reference) - 1 - suffix] == hypothesis[len(hypothesis) - 1 - suffix]
    ):
        suffix += 1

    ref_body = reference[: len(reference) - suffix]
    hyp_body = hypothesis[: len(hypothesis) - suffix]
    ref_ids, hyp_ids = _intern(ref_body, hyp_body)
    logger.debug(
        "Aligning %d x %d tokens (%d shared suffix tokens trimmed)",
        len(ref_body),
        len(hyp_body),
        suffix,
    )
    rows = _lcs_rows(ref_ids, hyp_ids)

    steps: List[Tuple[str, str]] = []
    i, j = len(ref_body), len(hyp_body)
    while i > 0 or j > 0:
        if i > 0 and j > 0 and ref_ids[i - 1] == hyp_ids[j - 1]:
            steps.append((EQUAL, ref_body[i - 1]))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or not (rows[i] >> (j - 1)) & 1):
            steps.append((INSERT, hyp_body[j - 1]))
            j -= 1
        else:
            steps.append((DELETE, ref_body[i - 1]))
            i -= 1
    steps.reverse()

    if suffix:
        steps.extend((EQUAL, token) for token in reference[len(reference) - suffix:])
    return merge_steps(steps)


def reference_tokens(alignment: Alignment) -> List[str]:
    """Rebuild the reference sequence from the equal and delete runs."""

    return [token for op in alignment if op.kind in (EQUAL, DELETE) for token in op.run]


def hypothesis_tokens(alignment: Alignment) -> List[str]:
    """Rebuild the hypothesis sequence from the equal and insert runs."""

    return [token for op in alignment if op.kind in (EQUAL, INSERT) for token in op.run]


__all__ = [
    "DELETE",
    "EQUAL",
    "INSERT",
    "Alignment",
    "EditOp",
    "align",
    "hypothesis_tokens",
    "merge_steps",
    "reference_tokens",
]
