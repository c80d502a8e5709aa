import logging
import os
from dataclasses import dataclass

from sqlalchemy.engine import make_url

from invoicepro.core.config import settings
from invoicepro.core.database import SessionLocal, init_engine
from invoicepro.repositories.customer_repository import CustomerRepository
from invoicepro.repositories.invoice_repository import InvoiceRepository
from invoicepro.repositories.product_repository import ProductRepository
from invoicepro.repositories.record_store import JSONFileStore
from invoicepro.repositories.sql_record_store import SQLRecordStore
from invoicepro.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

COLLECTIONS = ("users", "customers", "products", "invoices")


@dataclass
class Repositories:
    users: UserRepository
    customers: CustomerRepository
    products: ProductRepository
    invoices: InvoiceRepository
    backend: str


def _ensure_sqlite_dir(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        directory = os.path.dirname(os.path.abspath(url.database))
        os.makedirs(directory, exist_ok=True)


def build_repositories(backend: str = None, data_dir: str = None, database_url: str = None) -> Repositories:
    backend = (backend or settings.STORAGE_BACKEND).lower()

    if backend == "json":
        data_dir = data_dir or settings.DATA_DIR
        stores = {name: JSONFileStore(name, data_dir) for name in COLLECTIONS}
        logger.info(f"Using JSON file storage in {os.path.abspath(data_dir)}")
    elif backend == "sql":
        database_url = database_url or settings.DATABASE_URL
        _ensure_sqlite_dir(database_url)
        init_engine(database_url)
        stores = {name: SQLRecordStore(name, SessionLocal) for name in COLLECTIONS}
        logger.info(f"Using SQL storage at {make_url(database_url).render_as_string(hide_password=True)}")
    else:
        raise ValueError(f"Unknown STORAGE_BACKEND '{backend}', expected 'json' or 'sql'")

    return Repositories(
        users=UserRepository(stores["users"]),
        customers=CustomerRepository(stores["customers"]),
        products=ProductRepository(stores["products"]),
        invoices=InvoiceRepository(stores["invoices"]),
        backend=backend,
    )
