import json
import unittest
from datetime import datetime

from review_store.documents import DocumentStore
from review_store.errors import StoreFailure, ValidationError
from review_store.progress import ProgressTable
from review_store.records import ProgressKey
from review_store.storage import InMemoryStorageClient


class ProgressTableTests(unittest.TestCase):
    def setUp(self):
        self.storage = InMemoryStorageClient()
        self.table = ProgressTable(DocumentStore(self.storage))

    def _stored(self):
        return json.loads(self.storage.get_object("progress.json").body)

    def test_empty_store_has_no_progress(self):
        self.assertIsNone(self.table.get_progress("alice", "math"))

    def test_last_write_wins(self):
        self.table.save_progress("alice", "math", 3)
        self.table.save_progress("alice", "math", 1)
        progress = self.table.get_progress("alice", "math")
        self.assertEqual(progress.questionIndex, 1)

    def test_composite_key_layout(self):
        self.table.save_progress("bob", "science", 5)

        stored = self._stored()
        self.assertEqual(list(stored), ["bob__science"])
        self.assertEqual(stored["bob__science"]["questionIndex"], 5)
        self.assertEqual(stored["bob__science"]["reviewerName"], "bob")
        self.assertEqual(self.table.get_progress("bob", "science").questionIndex, 5)

    def test_keys_are_independent(self):
        self.table.save_progress("bob", "science", 5)
        self.table.save_progress("bob", "history", 2)
        self.table.save_progress("carol", "science", 9)

        self.assertEqual(self.table.get_progress("bob", "science").questionIndex, 5)
        self.assertEqual(self.table.get_progress("bob", "history").questionIndex, 2)
        self.assertEqual(self.table.get_progress("carol", "science").questionIndex, 9)
        self.assertEqual(len(self._stored()), 3)

    def test_zero_index_is_accepted(self):
        record = self.table.save_progress("alice", "math", 0)
        self.assertEqual(record.questionIndex, 0)
        self.assertEqual(self.table.get_progress("alice", "math").questionIndex, 0)

    def test_timestamp_is_assigned_at_write(self):
        record = self.table.save_progress("alice", "math", 2)
        self.assertTrue(record.timestamp.endswith("Z"))
        datetime.fromisoformat(record.timestamp.replace("Z", "+00:00"))
        self.assertEqual(self._stored()["alice__math"]["timestamp"], record.timestamp)

    def test_missing_parameters_are_rejected_without_writes(self):
        cases = [
            (None, "math", 1, "reviewerName"),
            ("alice", None, 1, "category"),
            ("alice", "", 1, "category"),
            ("alice", "math", None, "questionIndex"),
        ]
        for reviewer, category, index, field in cases:
            with self.subTest(field=field):
                with self.assertRaises(ValidationError) as ctx:
                    self.table.save_progress(reviewer, category, index)
                self.assertEqual(ctx.exception.field, field)
        self.assertEqual(self.storage.stored_objects, {})

    def test_get_requires_both_parameters(self):
        with self.assertRaises(ValidationError):
            self.table.get_progress("alice", None)
        with self.assertRaises(ValidationError):
            self.table.get_progress(None, "math")

    def test_separator_in_names_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.table.save_progress("a__b", "c", 1)
        with self.assertRaises(ValidationError):
            self.table.save_progress("a", "b__c", 1)
        with self.assertRaises(ValidationError):
            self.table.get_progress("a__b", "c")

    def test_non_string_names_are_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            self.table.save_progress("alice", 5, 1)
        self.assertEqual(ctx.exception.field, "category")
        with self.assertRaises(ValidationError) as ctx:
            self.table.get_progress(["alice"], "math")
        self.assertEqual(ctx.exception.field, "reviewerName")
        self.assertEqual(self.storage.stored_objects, {})

    def test_save_leaves_other_entries_untouched(self):
        untouched = {
            "legacy-key": {
                "reviewerName": "dave",
                "category": "art",
                "questionIndex": 4,
                "timestamp": "2025-01-01T00:00:00.000Z",
                "note": "kept",
            },
            "zed__art": {"reviewerName": "zed", "questionIndex": 2},
            "broken__entry": None,
        }
        self.storage.put_object(
            "progress.json", json.dumps(untouched).encode("utf-8")
        )

        self.table.save_progress("erin", "art", 1)

        stored = self._stored()
        self.assertEqual(
            sorted(stored), ["broken__entry", "erin__art", "legacy-key", "zed__art"]
        )
        for key, value in untouched.items():
            self.assertEqual(stored[key], value)
        self.assertEqual(stored["erin__art"]["questionIndex"], 1)

    def test_malformed_entry_does_not_affect_other_keys(self):
        self.storage.put_object(
            "progress.json",
            json.dumps({"zed__art": {"reviewerName": "zed"}}).encode("utf-8"),
        )
        self.assertIsNone(self.table.get_progress("alice", "math"))
        self.table.save_progress("alice", "math", 1)
        self.assertEqual(self.table.get_progress("alice", "math").questionIndex, 1)

    def test_malformed_entry_is_store_failure(self):
        self.storage.put_object(
            "progress.json", json.dumps({"x__y": {"reviewerName": "x"}}).encode("utf-8")
        )
        with self.assertRaises(StoreFailure):
            self.table.get_progress("x", "y")

    def test_progress_key_encoding(self):
        key = ProgressKey.build("bob", "science")
        self.assertEqual(key, ("bob", "science"))
        self.assertEqual(key.encode(), "bob__science")


if __name__ == "__main__":
    unittest.main()
