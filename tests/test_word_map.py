import json
import tempfile
import unittest
from pathlib import Path

from transcript_diff.word_map import (
    WordMap,
    WordMapError,
    apply_word_map,
    load_word_map,
    merge_word_maps,
    migrate_legacy_map,
    save_word_map,
    validate_word_map,
)


class ApplyWordMapTests(unittest.TestCase):
    def test_replaces_aliases_and_is_idempotent(self) -> None:
        mapping = {"behavior": ["behaviour", "behavier"]}
        once = apply_word_map("His behaviour was odd", mapping)
        self.assertEqual(once, "His behavior was odd")
        self.assertEqual(apply_word_map(once, mapping), once)

    def test_case_insensitive_match_uses_stored_target(self) -> None:
        self.assertEqual(apply_word_map("BEHAVIOUR matters", {"behavior": ["behaviour"]}), "behavior matters")

    def test_longer_alias_wins(self) -> None:
        mapping = {"nyc": ["new york"], "novel": ["new"]}
        self.assertEqual(apply_word_map("New York is new", mapping), "nyc is novel")

    def test_only_whole_words_are_replaced(self) -> None:
        self.assertEqual(apply_word_map("cab ca scan", {"cat": ["ca"]}), "cab cat scan")

    def test_empty_inputs_pass_through(self) -> None:
        self.assertEqual(apply_word_map("", {"a": ["b"]}), "")
        self.assertEqual(apply_word_map("text", {}), "text")


class ValidateWordMapTests(unittest.TestCase):
    def test_canonical_form(self) -> None:
        payload = {
            "Behavior": ["Behaviour", "behaviour", "behavier", "", "behavior"],
            "empty": [],
        }
        self.assertEqual(validate_word_map(payload), {"behavior": ["behavier", "behaviour"]})

    def test_rejects_bad_shapes(self) -> None:
        for payload in (["a"], {"a": "b"}, {"a": [1]}, {"a": ["x"], "b": ["x"]}):
            with self.subTest(payload=payload):
                with self.assertRaises(WordMapError):
                    validate_word_map(payload)

    def test_migrate_legacy_layout(self) -> None:
        migrated = migrate_legacy_map({"wolf": "fox", "Wulf": "fox", "same": "same"})
        self.assertEqual(migrated, {"fox": ["wolf", "wulf"]})


class WordMapTests(unittest.TestCase):
    def test_add_alias_creates_target(self) -> None:
        word_map = WordMap()
        self.assertTrue(word_map.add_alias("Wolf", "Fox"))
        self.assertEqual(word_map.to_dict(), {"fox": ["wolf"]})
        self.assertFalse(word_map.add_alias("wolf", "fox"))
        self.assertFalse(word_map.add_alias("fox", "fox"))
        self.assertIn("FOX", word_map)

    def test_add_alias_moves_existing_alias(self) -> None:
        word_map = WordMap({"fox": ["wolf"], "dog": ["hound"]})
        with self.assertLogs("transcript_diff.word_map", level="INFO"):
            self.assertTrue(word_map.add_alias("wolf", "dog"))
        self.assertEqual(word_map.to_dict(), {"dog": ["hound", "wolf"]})
        self.assertEqual(word_map.target_for("WOLF"), "dog")

    def test_remove_alias_drops_empty_target(self) -> None:
        word_map = WordMap({"fox": ["wolf"], "dog": ["hound", "pup"]})
        self.assertTrue(word_map.remove_alias("wolf", "fox"))
        self.assertNotIn("fox", word_map)
        self.assertTrue(word_map.remove_alias("pup", "dog"))
        self.assertEqual(word_map.aliases_for("dog"), ["hound"])
        self.assertFalse(word_map.remove_alias("missing", "dog"))

    def test_remove_target(self) -> None:
        word_map = WordMap({"fox": ["wolf"]})
        self.assertTrue(word_map.remove_target("Fox"))
        self.assertEqual(len(word_map), 0)
        self.assertFalse(word_map.remove_target("fox"))

    def test_invalid_replace_keeps_current_map(self) -> None:
        word_map = WordMap({"fox": ["wolf"]})
        with self.assertRaises(WordMapError):
            word_map.replace({"a": ["x"], "b": ["x"]})
        self.assertEqual(word_map.to_dict(), {"fox": ["wolf"]})

    def test_every_alias_has_one_target(self) -> None:
        word_map = WordMap()
        for source, target in (("a", "x"), ("b", "x"), ("a", "y"), ("c", "y"), ("b", "z")):
            word_map.add_alias(source, target)
        lookup = word_map.lookup()
        seen = [alias for target in word_map for alias in word_map.aliases_for(target)]
        self.assertEqual(len(seen), len(set(seen)))
        self.assertEqual(lookup, {"a": "y", "b": "z", "c": "y"})
        self.assertEqual(list(word_map), ["y", "z"])


class WordMapFileTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, name: str, payload) -> Path:
        path = self.root / name
        path.write_text(json.dumps(payload) if not isinstance(payload, str) else payload, encoding="utf-8")
        return path

    def test_missing_file_is_empty_map(self) -> None:
        with self.assertLogs("transcript_diff.word_map", level="WARNING"):
            word_map = load_word_map(self.root / "absent.json")
        self.assertEqual(len(word_map), 0)

    def test_save_and_load(self) -> None:
        path = self.root / "nested" / "map.json"
        save_word_map(path, WordMap({"fox": ["wolf"]}))
        self.assertEqual(json.loads(path.read_text(encoding="utf-8")), {"fox": ["wolf"]})
        self.assertEqual(load_word_map(path), WordMap({"fox": ["wolf"]}))

    def test_legacy_file_is_migrated(self) -> None:
        path = self._write("legacy.json", {"wolf": "fox"})
        self.assertEqual(load_word_map(path).to_dict(), {"fox": ["wolf"]})

    def test_bad_files_raise(self) -> None:
        for name, payload in (("broken.json", "{not json"), ("mixed.json", {"a": "b", "c": ["d"]})):
            with self.subTest(name=name):
                with self.assertRaises(WordMapError):
                    load_word_map(self._write(name, payload))

    def test_merge_keeps_earlier_file_on_conflict(self) -> None:
        first = self._write("first.json", {"fox": ["wolf"]})
        second = self._write("second.json", {"dog": ["wolf"], "cat": ["kitty"]})
        with self.assertLogs("transcript_diff.word_map", level="WARNING") as captured:
            merged = merge_word_maps([first, second])
        self.assertEqual(merged.to_dict(), {"cat": ["kitty"], "fox": ["wolf"]})
        self.assertTrue(any("wolf" in line for line in captured.output))


if __name__ == "__main__":
    unittest.main()
