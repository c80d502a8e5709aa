"""
Tests for the SQLAlchemy-backed record store (SQLite file per test).
"""
import pytest

from invoicepro.core.database import SessionLocal, init_engine
from invoicepro.core.exceptions import RecordNotFoundError
from invoicepro.models.customer import CustomerCreate
from invoicepro.models.record import Record
from invoicepro.repositories.registry import build_repositories
from invoicepro.repositories.sql_record_store import SQLRecordStore


@pytest.fixture
def store(tmp_path):
    init_engine(f"sqlite:///{tmp_path / 'records.db'}")
    return SQLRecordStore("customers", SessionLocal)


def test_create_get_roundtrip(store):
    record = store.create({"name": "Acme", "email": "a@acme.example"})
    assert record["id"]
    assert record["createdAt"]
    assert store.get(record["id"]) == record


def test_rows_are_stamped_and_listed_in_creation_order(store):
    names = ["Acme", "Globex", "Initech"]
    ids = [store.create({"name": name})["id"] for name in names]
    assert [r["name"] for r in store.list()] == names

    db = SessionLocal()
    try:
        rows = db.query(Record).filter(Record.id.in_(ids)).all()
    finally:
        db.close()
    assert len(rows) == 3
    assert all(row.created_at is not None for row in rows)


def test_collections_are_isolated(store):
    products = SQLRecordStore("products", SessionLocal)
    store.create({"name": "Acme"})
    assert products.list() == []
    assert len(store.list()) == 1


def test_update_merges_and_missing_raises(store):
    record = store.create({"name": "Acme", "email": "a@acme.example"})
    updated = store.update(record["id"], {"email": "b@acme.example"})
    assert updated["name"] == "Acme"
    assert store.get(record["id"])["email"] == "b@acme.example"
    with pytest.raises(RecordNotFoundError):
        store.update("missing", {"name": "x"})


def test_delete(store):
    record = store.create({"name": "Acme"})
    assert store.delete("missing") is False
    assert store.delete(record["id"]) is True
    assert store.list() == []


def test_search(store):
    store.create({"name": "Acme Corp", "email": "billing@acme.example"})
    store.create({"name": "Globex", "email": "ap@globex.example"})
    assert [r["name"] for r in store.search("acme", ["name", "email"])] == ["Acme Corp"]
    assert store.search("nothing", ["name"]) == []


def test_sql_backend_repositories(tmp_path):
    repos = build_repositories("sql", database_url=f"sqlite:///{tmp_path / 'nested' / 'app.db'}")
    assert repos.backend == "sql"
    customer = repos.customers.create(CustomerCreate(name="Acme", email="a@acme.example"))
    assert repos.customers.get(customer.id) == customer


def test_unknown_backend_rejected(tmp_path):
    with pytest.raises(ValueError):
        build_repositories("mongo", data_dir=str(tmp_path))
