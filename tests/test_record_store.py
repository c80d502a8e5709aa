"""
Tests for the JSON flat-file record store.
"""
import json
import logging
import os

import pytest

from invoicepro.core.exceptions import RecordNotFoundError
from invoicepro.repositories.record_store import JSONFileStore


@pytest.fixture
def store(tmp_path):
    return JSONFileStore("customers", str(tmp_path))


def read_file(store):
    with open(store.path, encoding="utf-8") as fh:
        return json.load(fh)


def test_new_store_creates_empty_file(store):
    assert os.path.exists(store.path)
    assert read_file(store) == []
    assert store.list() == []


def test_create_assigns_id_and_timestamp(store):
    record = store.create({"name": "Acme", "email": "a@acme.example"})
    assert record["id"]
    assert record["createdAt"]
    assert record["name"] == "Acme"
    assert store.get(record["id"]) == record
    assert read_file(store) == [record]


def test_create_ignores_caller_supplied_id(store):
    record = store.create({"id": "mine", "name": "Acme"})
    assert record["id"] != "mine"


def test_records_keep_insertion_order(store):
    ids = [store.create({"name": f"c{i}"})["id"] for i in range(3)]
    assert [r["id"] for r in store.list()] == ids


def test_persists_across_instances(store, tmp_path):
    record = store.create({"name": "Acme"})
    reopened = JSONFileStore("customers", str(tmp_path))
    assert reopened.get(record["id"]) == record


def test_update_merges_fields(store):
    record = store.create({"name": "Acme", "email": "a@acme.example"})
    updated = store.update(record["id"], {"email": "new@acme.example"})
    assert updated["name"] == "Acme"
    assert updated["email"] == "new@acme.example"
    assert updated["createdAt"] == record["createdAt"]
    assert store.get(record["id"])["email"] == "new@acme.example"


def test_update_cannot_change_id(store):
    record = store.create({"name": "Acme"})
    updated = store.update(record["id"], {"id": "other"})
    assert updated["id"] == record["id"]


def test_update_missing_raises(store):
    with pytest.raises(RecordNotFoundError):
        store.update("missing", {"name": "x"})


def test_delete(store):
    record = store.create({"name": "Acme"})
    assert store.delete(record["id"]) is True
    assert store.get(record["id"]) is None
    assert store.list() == []


def test_delete_missing_returns_false_without_mutation(store):
    store.create({"name": "Acme"})
    before = read_file(store)
    assert store.delete("missing") is False
    assert read_file(store) == before


def test_find_one(store):
    store.create({"name": "Acme", "email": "a@acme.example"})
    assert store.find_one("email", "a@acme.example")["name"] == "Acme"
    assert store.find_one("email", "nobody@example.com") is None


def test_search_is_case_insensitive(store):
    store.create({"name": "Acme Corp", "email": "billing@acme.example"})
    store.create({"name": "Globex", "email": "ap@globex.example"})
    assert [r["name"] for r in store.search("ACME", ["name", "email"])] == ["Acme Corp"]
    assert [r["name"] for r in store.search("globex.EX", ["name", "email"])] == ["Globex"]


def test_search_without_match_is_empty(store):
    store.create({"name": "Acme Corp", "email": "billing@acme.example"})
    assert store.search("zzz", ["name", "email"]) == []


def test_search_skips_missing_fields(store):
    store.create({"name": "Acme", "phone": None})
    assert store.search("555", ["phone"]) == []


def test_count(store):
    store.create({"name": "a", "active": True})
    store.create({"name": "b", "active": False})
    assert store.count() == 2
    assert store.count(lambda r: r["active"]) == 1


def test_corrupt_file_is_moved_aside_and_reported(store, tmp_path, caplog):
    with open(store.path, "w", encoding="utf-8") as fh:
        fh.write("{not json")

    with caplog.at_level(logging.ERROR):
        assert store.list() == []

    assert any("corrupt" in r.getMessage() for r in caplog.records)
    quarantined = [name for name in os.listdir(tmp_path) if name.startswith("customers.json.corrupt-")]
    assert len(quarantined) == 1
    with open(tmp_path / quarantined[0], encoding="utf-8") as fh:
        assert fh.read() == "{not json"


def test_non_array_file_is_treated_as_corrupt(store, caplog):
    with open(store.path, "w", encoding="utf-8") as fh:
        json.dump({"name": "Acme"}, fh)

    with caplog.at_level(logging.ERROR):
        assert store.list() == []
    assert any("expected a JSON array" in r.getMessage() for r in caplog.records)


def test_missing_file_is_empty_without_error(store, caplog):
    os.remove(store.path)
    with caplog.at_level(logging.ERROR):
        assert store.list() == []
    assert not caplog.records


def test_writes_after_corruption_start_fresh(store):
    with open(store.path, "w", encoding="utf-8") as fh:
        fh.write("garbage")
    record = store.create({"name": "Acme"})
    assert read_file(store) == [record]
