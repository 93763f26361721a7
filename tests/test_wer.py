import math
import unittest

from transcript_diff.wer import WerMetrics, calculate_wer


class CalculateWerTests(unittest.TestCase):
    def test_two_substitutions(self) -> None:
        metrics = calculate_wer("the cat sat", "a cat sits")
        self.assertEqual((metrics.subs, metrics.ins, metrics.dels), (2, 0, 0))
        self.assertAlmostEqual(metrics.wer, 2 / 3)

    def test_identical_text_scores_zero(self) -> None:
        text = "the quick brown fox jumps over the lazy dog"
        self.assertEqual(calculate_wer(text, text), WerMetrics(wer=0.0, subs=0, ins=0, dels=0))

    def test_empty_hypothesis_deletes_everything(self) -> None:
        metrics = calculate_wer("one two three", "")
        self.assertEqual((metrics.subs, metrics.ins, metrics.dels), (0, 0, 3))
        self.assertEqual(metrics.wer, 1.0)

    def test_empty_reference(self) -> None:
        metrics = calculate_wer("   ", "two words")
        self.assertTrue(math.isinf(metrics.wer))
        self.assertEqual((metrics.subs, metrics.ins, metrics.dels), (0, 2, 0))
        self.assertEqual(calculate_wer("", ""), WerMetrics(wer=0.0, subs=0, ins=0, dels=0))

    def test_single_insertion(self) -> None:
        metrics = calculate_wer("a b", "a x b")
        self.assertEqual((metrics.subs, metrics.ins, metrics.dels), (0, 1, 0))
        self.assertEqual(metrics.wer, 0.5)

    def test_substitution_preferred_on_ties(self) -> None:
        metrics = calculate_wer("a b", "b a")
        self.assertEqual((metrics.subs, metrics.ins, metrics.dels), (2, 0, 0))
        self.assertEqual(metrics.wer, 1.0)

    def test_whitespace_runs_are_ignored(self) -> None:
        metrics = calculate_wer("hello\n\n  world", " hello world ")
        self.assertEqual(metrics.errors, 0)

    def test_rate_matches_error_counts(self) -> None:
        metrics = calculate_wer("we will meet at noon today", "we meet at new noon")
        self.assertAlmostEqual(metrics.wer, metrics.errors / 6)

    def test_to_dict_labels_infinity(self) -> None:
        self.assertEqual(calculate_wer("", "extra").to_dict()["wer"], "inf")
        self.assertEqual(calculate_wer("a b", "a c").to_dict(), {"wer": 0.5, "subs": 1, "ins": 0, "dels": 0})


if __name__ == "__main__":
    unittest.main()
