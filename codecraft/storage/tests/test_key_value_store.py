import json
import tempfile
import unittest
from pathlib import Path
from codecraft.storage.key_value_store import InMemoryKeyValueStore, JsonFileKeyValueStore

class TestInMemoryKeyValueStore(unittest.TestCase):
    def test_set_get_delete(self):
        store = InMemoryKeyValueStore()
        store.set("a", "1")
        self.assertEqual(store.get("a"), "1")
        self.assertEqual(store.keys(), ["a"])
        self.assertTrue(store.delete("a"))
        self.assertFalse(store.delete("a"))
        self.assertIsNone(store.get("a"))

    def test_value_must_be_text(self):
        with self.assertRaises(ValueError):
            InMemoryKeyValueStore().set("a", 1)

class TestJsonFileKeyValueStore(unittest.TestCase):
    def test_persists_between_instances(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            # Arrange
            path = Path(temp_dir) / "nested" / "projects.json"
            JsonFileKeyValueStore(path).set("greeting", "hello")

            # Act
            store = JsonFileKeyValueStore(path)

            # Assert
            self.assertEqual(store.get("greeting"), "hello")
            self.assertEqual(json.loads(path.read_text(encoding="utf-8")), {"greeting": "hello"})
            self.assertEqual(sorted(p.name for p in path.parent.iterdir()), ["projects.json"])

    def test_missing_file_is_empty(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            store = JsonFileKeyValueStore(Path(temp_dir) / "missing.json")
            self.assertEqual(store.keys(), [])
            self.assertIsNone(store.get("x"))
            self.assertFalse(store.delete("x"))

    def test_delete(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            store = JsonFileKeyValueStore(Path(temp_dir) / "store.json")
            store.set("a", "1")
            store.set("b", "2")
            self.assertTrue(store.delete("a"))
            self.assertEqual(store.keys(), ["b"])

    def test_rejects_non_object_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "store.json"
            path.write_text("[1, 2]", encoding="utf-8")
            with self.assertRaises(ValueError):
                JsonFileKeyValueStore(path).keys()
