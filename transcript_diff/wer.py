"""Word error rate via Levenshtein alignment with operation counts."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List

from .tokenize import split_words

OP_MATCH = "M"
OP_SUB = "S"
OP_INS = "I"
OP_DEL = "D"


@dataclass(frozen=True)
class WerMetrics:
    wer: float
    subs: int
    ins: int
    dels: int

    @property
    def errors(self) -> int:
        return self.subs + self.ins + self.dels

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wer": rate_to_json(self.wer),
            "subs": self.subs,
            "ins": self.ins,
            "dels": self.dels,
        }


def rate_to_json(value: float) -> Any:
    """Represent an unbounded rate as ``"inf"`` so reports stay valid JSON."""

    return "inf" if math.isinf(value) else value


def _edit_operations(ref_words: List[str], hyp_words: List[str]) -> List[List[str]]:
    """
    Fill the edit-distance table and return the chosen operation per cell.

    When several predecessors tie on cost, substitution/match wins, then
    insertion, then deletion.
    """

    n, m = len(ref_words), len(hyp_words)
    dp = [[0] * (m + 1) for _ in range(n + 1)]
    ops = [[""] * (m + 1) for _ in range(n + 1)]

    for i in range(n + 1):
        dp[i][0] = i
        ops[i][0] = OP_DEL
    for j in range(m + 1):
        dp[0][j] = j
        ops[0][j] = OP_INS

    for i in range(1, n + 1):
        for j in range(1, m + 1):
            cost = 0 if ref_words[i - 1] == hyp_words[j - 1] else 1
            del_cost = dp[i - 1][j] + 1
            ins_cost = dp[i][j - 1] + 1
            sub_cost = dp[i - 1][j - 1] + cost

            if sub_cost <= ins_cost and sub_cost <= del_cost:
                dp[i][j] = sub_cost
                ops[i][j] = OP_SUB if cost else OP_MATCH
            elif ins_cost < del_cost:
                dp[i][j] = ins_cost
                ops[i][j] = OP_INS
            else:
                dp[i][j] = del_cost
                ops[i][j] = OP_DEL
    return ops


def calculate_wer(reference: str, hypothesis: str) -> WerMetrics:
    """
    Score ``hypothesis`` against ``reference`` by word error rate.

    Both texts are split on whitespace. An empty reference yields ``wer=0``
    for an empty hypothesis and ``wer=inf`` otherwise, with every hypothesis
    word counted as an insertion.
    """

    ref_words = split_words(reference)
    hyp_words = split_words(hypothesis)
    n, m = len(ref_words), len(hyp_words)

    if n == 0:
        return WerMetrics(wer=math.inf if m > 0 else 0.0, subs=0, ins=m, dels=0)

    ops = _edit_operations(ref_words, hyp_words)

    subs = ins = dels = 0
    i, j = n, m
    while i > 0 or j > 0:
        op = ops[i][j]
        if op == OP_SUB:
            subs += 1
            i -= 1
            j -= 1
        elif op == OP_DEL:
            dels += 1
            i -= 1
        elif op == OP_INS:
            ins += 1
            j -= 1
        else:
            i -= 1
            j -= 1

    return WerMetrics(wer=(subs + ins + dels) / n, subs=subs, ins=ins, dels=dels)


__all__ = ["WerMetrics", "calculate_wer", "rate_to_json"]
