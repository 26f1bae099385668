from datetime import date
from pathlib import Path
import json
import os
import tempfile
import unittest

from worklog.errors import StorageFailure
from worklog.models import WorkSession
from worklog.parsing import combine_date_and_time
from worklog.storage import JsonFileStore, MemoryStore, deserialize_sessions, resolve_store, serialize_sessions


def at(hhmm: str, day: date = date(2025, 3, 5)):
    return combine_date_and_time(day, hhmm)


class SerializationTests(unittest.TestCase):
    def test_round_trip_keeps_every_field(self):
        sessions = [
            WorkSession(id=1, start_time=at("09:00"), end_time=at("12:00"), description="Review", tag="#dev"),
            WorkSession(id=2, start_time=at("13:00")),
            WorkSession(id=7, start_time=at("14:00"), end_time=at("15:15"), description=""),
        ]
        self.assertEqual(deserialize_sessions(serialize_sessions(sessions)), sessions)

    def test_optional_fields_are_omitted(self):
        payload = json.loads(serialize_sessions([WorkSession(id=1, start_time=at("09:00"))]))
        self.assertEqual(set(payload[0]), {"id", "start_time"})

    def test_malformed_content_reads_as_empty(self):
        for text in (
            "not json",
            "{}",
            '[{"id": 1}]',
            '[{"id": "x", "start_time": "2025-03-05T09:00:00"}]',
            "[[1, 2]]",
            '["x"]',
            '[{"id": 1, "start_time": 5}]',
            '[{"id": 1, "start_time": "2025-03-05T09:00:00", "end_time": 7}]',
        ):
            with self.assertLogs("worklog.storage", level="WARNING"):
                self.assertEqual(deserialize_sessions(text, "2025-03-05"), [])

    def test_blank_content_reads_as_empty(self):
        self.assertEqual(deserialize_sessions(""), [])
        self.assertEqual(deserialize_sessions(None), [])

    def test_reads_legacy_records(self):
        text = '[{"id": 1, "start_time": "2025-03-05T08:00:00.000Z", "end_time": "2025-03-05T09:30:00.000Z"}]'
        sessions = deserialize_sessions(text)
        self.assertEqual(len(sessions), 1)
        self.assertEqual(sessions[0].hours, 1.5)


class MemoryStoreTests(unittest.TestCase):
    def test_absent_key_is_empty(self):
        self.assertEqual(MemoryStore().get("2025-03-05"), [])

    def test_set_get_list_and_clear(self):
        store = MemoryStore()
        sessions = [WorkSession(id=1, start_time=at("09:00"))]
        store.set("2025-03-05", sessions)
        store.set("2025-03-06", [])
        self.assertEqual(store.get("2025-03-05"), sessions)
        self.assertEqual(store.get("2025-03-06"), [])
        self.assertEqual(sorted(store.list_keys()), ["2025-03-05", "2025-03-06"])

        store.clear()
        self.assertEqual(store.list_keys(), [])

    def test_get_returns_a_copy(self):
        store = MemoryStore()
        store.set("2025-03-05", [WorkSession(id=1, start_time=at("09:00"))])
        store.get("2025-03-05").append(WorkSession(id=2, start_time=at("10:00")))
        self.assertEqual(len(store.get("2025-03-05")), 1)

    def test_corrupted_partition_does_not_hide_others(self):
        store = MemoryStore({"2025-03-05": "{broken", "2025-03-06": serialize_sessions([WorkSession(id=1, start_time=at("09:00"))])})
        with self.assertLogs("worklog.storage", level="WARNING"):
            self.assertEqual(store.get("2025-03-05"), [])
        self.assertEqual(len(store.get("2025-03-06")), 1)


class JsonFileStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "nested" / "data.json"

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_missing_file_is_empty_store(self):
        store = JsonFileStore(self.path)
        self.assertEqual(store.list_keys(), [])
        self.assertEqual(store.get("2025-03-05"), [])

    def test_persists_partitions_as_text_blobs(self):
        sessions = [WorkSession(id=1, start_time=at("09:00"), end_time=at("10:00"), tag="#ops")]
        JsonFileStore(self.path).set("2025-03-05", sessions)

        with self.path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
        self.assertIsInstance(payload["2025-03-05"], str)
        self.assertEqual(JsonFileStore(self.path).get("2025-03-05"), sessions)

    def test_clear_removes_every_partition(self):
        store = JsonFileStore(self.path)
        store.set("2025-03-05", [WorkSession(id=1, start_time=at("09:00"))])
        store.clear()
        self.assertEqual(store.list_keys(), [])

    def test_unreadable_document_is_storage_failure(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(StorageFailure) as ctx:
            JsonFileStore(self.path).list_keys()
        self.assertIn(str(self.path), str(ctx.exception))

    def test_resolve_store_uses_environment(self):
        os.environ["WORKLOG_DATA_FILE"] = str(self.path)
        try:
            self.assertEqual(resolve_store().path, self.path)
        finally:
            os.environ.pop("WORKLOG_DATA_FILE", None)


if __name__ == "__main__":
    unittest.main()
