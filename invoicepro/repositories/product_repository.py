from typing import List, Optional

from invoicepro.core.exceptions import RecordNotFoundError
from invoicepro.models.product import Product, ProductCreate, ProductUpdate
from invoicepro.repositories.record_store import RecordStore

SEARCH_FIELDS = ("name", "sku", "description")


class ProductRepository:
    def __init__(self, store: RecordStore):
        self.store = store

    def list(self) -> List[Product]:
        return [Product.model_validate(r) for r in self.store.list()]

    def get(self, product_id: str) -> Optional[Product]:
        record = self.store.get(product_id)
        return Product.model_validate(record) if record else None

    def get_by_sku(self, sku: str) -> Optional[Product]:
        record = self.store.find_one("sku", sku)
        return Product.model_validate(record) if record else None

    def create(self, product: ProductCreate) -> Product:
        return Product.model_validate(self.store.create(product.model_dump()))

    def update(self, product_id: str, changes: ProductUpdate) -> Product:
        current = self.store.get(product_id)
        if current is None:
            raise RecordNotFoundError("products", product_id)
        data = changes.model_dump(exclude_unset=True)
        Product.model_validate({**current, **data})
        return Product.model_validate(self.store.update(product_id, data))

    def delete(self, product_id: str) -> bool:
        return self.store.delete(product_id)

    def search(self, term: str) -> List[Product]:
        return [Product.model_validate(r) for r in self.store.search(term, SEARCH_FIELDS)]

    def count_active(self) -> int:
        return self.store.count(lambda r: bool(r.get("isActive")))
