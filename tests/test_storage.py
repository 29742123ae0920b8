"""
Tests for the JSON document store and the notification outbox.
"""

import json

import pytest

from lifecare.storage import DocumentStore, OutboxStore


@pytest.fixture
def store(tmp_path) -> DocumentStore:
    return DocumentStore("things", str(tmp_path))


class TestDocumentStore:
    """Tests for DocumentStore."""

    def test_insert_assigns_id_and_timestamps(self, store: DocumentStore) -> None:
        doc = store.insert({"name": "first"})

        assert len(doc["id"]) == 32
        assert doc["created_at"]
        assert doc["updated_at"] == doc["created_at"]
        assert store.get(doc["id"])["name"] == "first"

    def test_insert_does_not_mutate_input(self, store: DocumentStore) -> None:
        fields = {"name": "first"}
        store.insert(fields)
        assert fields == {"name": "first"}

    def test_get_missing(self, store: DocumentStore) -> None:
        assert store.get("nope") is None

    def test_returned_documents_are_copies(self, store: DocumentStore) -> None:
        doc = store.insert({"name": "first"})
        doc["name"] = "changed"

        fetched = store.get(doc["id"])
        fetched["name"] = "changed again"

        assert store.get(doc["id"])["name"] == "first"

    def test_update(self, store: DocumentStore) -> None:
        doc = store.insert({"name": "first", "status": "new"})
        updated = store.update(doc["id"], status="done")

        assert updated["status"] == "done"
        assert updated["name"] == "first"
        assert updated["updated_at"] >= doc["updated_at"]

    def test_update_missing(self, store: DocumentStore) -> None:
        assert store.update("nope", status="done") is None

    def test_delete(self, store: DocumentStore) -> None:
        doc = store.insert({"name": "first"})

        assert store.delete(doc["id"]) is True
        assert store.get(doc["id"]) is None
        assert store.delete(doc["id"]) is False

    def test_persists_across_instances(self, tmp_path) -> None:
        doc = DocumentStore("things", str(tmp_path)).insert({"name": "kept"})

        reopened = DocumentStore("things", str(tmp_path))
        assert reopened.get(doc["id"])["name"] == "kept"

        with open(tmp_path / "things.json", encoding="utf-8") as f:
            payload = json.load(f)
        assert payload["collection"] == "things"
        assert len(payload["documents"]) == 1

    def test_find_newest_first(self, store: DocumentStore) -> None:
        for i in range(5):
            store.insert({"n": i})

        assert [d["n"] for d in store.find()] == [4, 3, 2, 1, 0]

    def test_find_oldest_first(self, store: DocumentStore) -> None:
        for i in range(3):
            store.insert({"n": i})

        assert [d["n"] for d in store.find(descending=False)] == [0, 1, 2]

    def test_find_with_predicate_and_pagination(self, store: DocumentStore) -> None:
        for i in range(10):
            store.insert({"n": i, "even": i % 2 == 0})

        evens = store.find(lambda d: d["even"])
        assert [d["n"] for d in evens] == [8, 6, 4, 2, 0]

        page = store.find(lambda d: d["even"], skip=2, limit=2)
        assert [d["n"] for d in page] == [4, 2]

        assert store.count(lambda d: d["even"]) == 5
        assert store.count() == 10

    def test_find_one(self, store: DocumentStore) -> None:
        store.insert({"email": "a@gmail.com"})

        assert store.find_one(lambda d: d["email"] == "a@gmail.com") is not None
        assert store.find_one(lambda d: d["email"] == "b@gmail.com") is None

    def test_corrupt_file_raises(self, tmp_path) -> None:
        (tmp_path / "things.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(json.JSONDecodeError):
            DocumentStore("things", str(tmp_path)).count()

    def test_is_writable(self, tmp_path) -> None:
        store = DocumentStore("things", str(tmp_path / "nested" / "data"))
        assert store.is_writable() is True

    def test_not_writable_when_data_dir_is_a_file(self, tmp_path) -> None:
        blocker = tmp_path / "data"
        blocker.write_text("", encoding="utf-8")

        assert DocumentStore("things", str(blocker)).is_writable() is False


class TestOutboxStore:
    """Tests for OutboxStore."""

    def test_append_and_read(self, tmp_path) -> None:
        outbox = OutboxStore(str(tmp_path / "mail" / "outbox.jsonl"))
        outbox.append({"to": "a@gmail.com", "n": 1})
        outbox.append({"to": "b@gmail.com", "n": 2})

        assert [m["n"] for m in outbox.read_all()] == [1, 2]

    def test_read_missing_file(self, tmp_path) -> None:
        assert OutboxStore(str(tmp_path / "outbox.jsonl")).read_all() == []

    def test_skips_malformed_lines(self, tmp_path) -> None:
        path = tmp_path / "outbox.jsonl"
        path.write_text('{"n": 1}\nnot json\n\n{"n": 2}\n', encoding="utf-8")

        assert [m["n"] for m in OutboxStore(str(path)).read_all()] == [1, 2]
