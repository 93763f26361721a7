import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

import compare_transcripts
import manage_word_map


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, name: str, text: str) -> Path:
        path = self.root / name
        path.write_text(text, encoding="utf-8")
        return path

    def _run(self, module, argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = module.main([str(arg) for arg in argv])
        return code, stdout.getvalue()


class CompareTranscriptsCliTests(CliTestCase):
    def test_reports_metrics_and_json(self) -> None:
        reference = self._write("reference.txt", "[00:00:00] A: quick brown fox\n")
        hypothesis = self._write("asr.txt", "[00:00:00] A: quick brown wolf\n")
        report = self.root / "out" / "report.json"
        html_report = self.root / "out" / "report.html"

        code, output = self._run(
            compare_transcripts,
            [reference, hypothesis, "--json", report, "--html", html_report, "--show-diff"],
        )

        self.assertEqual(code, 0)
        self.assertIn("asr: WER 33.33% (S=1 I=0 D=0)", output)
        self.assertIn("[-fox-]{+wolf+}", output)
        self.assertIn("wolf -> fox", output)
        payload = json.loads(report.read_text(encoding="utf-8"))
        self.assertEqual(payload["ground_truth"], "reference")
        self.assertEqual(payload["suggestions"], [{"source": "wolf", "target": "fox"}])
        self.assertIn("diff-delete", html_report.read_text(encoding="utf-8"))

    def test_normalized_with_word_map(self) -> None:
        reference = self._write("reference.txt", "Quick brown fox.")
        hypothesis = self._write("asr.txt", "quick brown WOLF")
        word_map = self._write("map.json", json.dumps({"fox": ["wolf"]}))

        code, output = self._run(compare_transcripts, [reference, hypothesis, "--normalized", "--word-map", word_map])

        self.assertEqual(code, 0)
        self.assertIn("asr: WER 0.00%", output)
        self.assertNotIn("Suggested word map entries", output)

    def test_missing_transcript_exits(self) -> None:
        reference = self._write("reference.txt", "a b c")
        with self.assertRaises(SystemExit):
            self._run(compare_transcripts, [reference, self.root / "absent.txt"])

    def test_ground_truth_out_of_range_exits(self) -> None:
        reference = self._write("reference.txt", "a b c")
        hypothesis = self._write("asr.txt", "a b d")
        with self.assertRaises(SystemExit):
            self._run(compare_transcripts, [reference, hypothesis, "--ground-truth", "5"])


class ManageWordMapCliTests(CliTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.map_path = self.root / "map.json"

    def _manage(self, *argv):
        return self._run(manage_word_map, ["--word-map", self.map_path, *argv])

    def _stored(self):
        return json.loads(self.map_path.read_text(encoding="utf-8"))

    def test_add_list_and_remove(self) -> None:
        _, output = self._manage("list")
        self.assertIn("No word mappings defined.", output)

        self._manage("add", "Behaviour", "behavior")
        self._manage("add", "behavier", "behavior")
        self.assertEqual(self._stored(), {"behavior": ["behavier", "behaviour"]})

        _, output = self._manage("list")
        self.assertIn("behavior: behavier, behaviour", output)

        self._manage("remove", "behavier", "behavior")
        self.assertEqual(self._stored(), {"behavior": ["behaviour"]})
        self._manage("remove-target", "behavior")
        self.assertEqual(self._stored(), {})

    def test_invalid_import_leaves_map_unchanged(self) -> None:
        self._manage("add", "wolf", "fox")
        payload = self._write("bad.json", json.dumps({"a": ["x"], "b": ["x"]}))
        with self.assertRaises(SystemExit):
            self._manage("import", payload)
        self.assertEqual(self._stored(), {"fox": ["wolf"]})

        good = self._write("good.json", json.dumps({"Dog": ["Hound"]}))
        self._manage("import", good)
        self.assertEqual(self._stored(), {"dog": ["hound"]})

    def test_export_and_merge(self) -> None:
        self._manage("add", "wolf", "fox")
        exported = self.root / "exported.json"
        self._manage("export", exported)
        self.assertEqual(json.loads(exported.read_text(encoding="utf-8")), {"fox": ["wolf"]})

        other = self._write("other.json", json.dumps({"dog": ["wolf", "hound"]}))
        merged = self.root / "merged.json"
        self._run(manage_word_map, ["merge", merged, exported, other])
        self.assertEqual(json.loads(merged.read_text(encoding="utf-8")), {"dog": ["hound"], "fox": ["wolf"]})

    def test_suggest_accept(self) -> None:
        reference = self._write("reference.txt", "[00:00:00] A: quick brown fox")
        hypothesis = self._write("asr.txt", "[00:00:00] A: quick brown wolf")

        _, output = self._manage("suggest", reference, hypothesis)
        self.assertIn("wolf -> fox", output)
        self.assertFalse(self.map_path.exists())

        self._manage("suggest", reference, hypothesis, "--accept")
        self.assertEqual(self._stored(), {"fox": ["wolf"]})

        _, output = self._manage("suggest", reference, hypothesis)
        self.assertIn("No new substitutions found.", output)

    def test_suggest_reject_drops_pair(self) -> None:
        reference = self._write("reference.txt", "quick brown fox jumps over")
        hypothesis = self._write("asr.txt", "quick red fox jumps under")

        _, output = self._manage("suggest", reference, hypothesis, "--reject", "Red=brown", "--accept")

        self.assertNotIn("red -> brown", output)
        self.assertIn("under -> over", output)
        self.assertEqual(self._stored(), {"over": ["under"]})

    def test_suggest_reject_needs_pair(self) -> None:
        reference = self._write("reference.txt", "a b")
        with self.assertRaises(SystemExit):
            self._manage("suggest", reference, reference, "--reject", "nonsense")

    def test_merge_with_bad_input_exits_cleanly(self) -> None:
        good = self._write("good.json", json.dumps({"fox": ["wolf"]}))
        broken = self._write("broken.json", "{not json")
        merged = self.root / "merged.json"
        with self.assertRaises(SystemExit) as raised:
            self._run(manage_word_map, ["merge", merged, good, broken])
        self.assertIn("[error]", str(raised.exception.code))
        self.assertFalse(merged.exists())


if __name__ == "__main__":
    unittest.main()
