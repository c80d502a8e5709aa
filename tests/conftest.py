from datetime import date, timedelta

import bcrypt
import pytest
from fastapi.testclient import TestClient

from invoicepro.main import create_app
from invoicepro.models.customer import CustomerCreate
from invoicepro.models.product import ProductCreate
from invoicepro.repositories.registry import build_repositories


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Cheap work factor so hashing the bootstrap admin does not dominate test time."""
    real_gensalt = bcrypt.gensalt
    monkeypatch.setattr(bcrypt, "gensalt", lambda rounds=4, prefix=b"2b": real_gensalt(4, prefix))


@pytest.fixture
def repos(tmp_path):
    return build_repositories("json", data_dir=str(tmp_path / "data"))


@pytest.fixture
def client(repos):
    return TestClient(create_app(repos))


@pytest.fixture
def customer(repos):
    return repos.customers.create(CustomerCreate(
        name="Acme Corporation",
        email="billing@acme.example",
        phone="555-0100",
        address="12 Industrial Way",
        gstId="27AAECG1234F1Z5",
    ))


@pytest.fixture
def product(repos):
    return repos.products.create(ProductCreate(name="Widget", sku="WID-001", price="100.00", taxRate="18"))


@pytest.fixture
def due_date():
    return date.today() + timedelta(days=30)
