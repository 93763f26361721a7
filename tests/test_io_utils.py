import json
import tempfile
import unittest
from pathlib import Path

from transcript_diff.io_utils import extract_voice_line, read_transcript, vtt_to_tagged_lines, write_json

VTT_SAMPLE = """WEBVTT

00:00:00.000 --> 00:00:02.000
<v Alice>Hello there.</v>

00:00:02.500 --> 00:00:04.000
<v Bob>General Kenobi.

00:00:04.000 --> 00:00:05.000
Carol: Hi all.
"""


class IoUtilsTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_write_json_creates_parents(self) -> None:
        path = self.root / "a" / "b" / "report.json"
        write_json(path, {"wer": 0.5, "name": "café"})
        self.assertEqual(json.loads(path.read_text(encoding="utf-8")), {"wer": 0.5, "name": "café"})

    def test_read_plain_transcript(self) -> None:
        path = self.root / "ref.txt"
        path.write_text("[00:00:01] A: hi\n", encoding="utf-8")
        self.assertEqual(read_transcript(path), "[00:00:01] A: hi\n")

    def test_vtt_cues_become_tagged_lines(self) -> None:
        path = self.root / "call.vtt"
        path.write_text(VTT_SAMPLE, encoding="utf-8")
        expected = [
            "[00:00:00.000] Alice: Hello there.",
            "[00:00:02.500] Bob: General Kenobi.",
            "[00:00:04.000] Carol: Hi all.",
        ]
        self.assertEqual(vtt_to_tagged_lines(path), expected)
        self.assertEqual(read_transcript(path), "\n".join(expected))

    def test_extract_voice_line(self) -> None:
        self.assertEqual(extract_voice_line("<v.loud Dan>Hey</v>", None), ("Dan", "Hey"))
        self.assertEqual(extract_voice_line("Eve: hi", None), ("Eve", "hi"))
        self.assertEqual(extract_voice_line("Eve: hi", "Dan"), (None, "Eve: hi"))


if __name__ == "__main__":
    unittest.main()
