from typing import List, Optional

from invoicepro.core.exceptions import RecordNotFoundError
from invoicepro.models.customer import Customer, CustomerCreate, CustomerUpdate
from invoicepro.repositories.record_store import RecordStore

SEARCH_FIELDS = ("name", "email", "phone")


class CustomerRepository:
    def __init__(self, store: RecordStore):
        self.store = store

    def list(self) -> List[Customer]:
        return [Customer.model_validate(r) for r in self.store.list()]

    def get(self, customer_id: str) -> Optional[Customer]:
        record = self.store.get(customer_id)
        return Customer.model_validate(record) if record else None

    def get_by_email(self, email: str) -> Optional[Customer]:
        record = self.store.find_one("email", email)
        return Customer.model_validate(record) if record else None

    def create(self, customer: CustomerCreate) -> Customer:
        return Customer.model_validate(self.store.create(customer.model_dump()))

    def update(self, customer_id: str, changes: CustomerUpdate) -> Customer:
        """Merge ``changes`` into the customer. The merged record must still be a valid Customer."""
        current = self.store.get(customer_id)
        if current is None:
            raise RecordNotFoundError("customers", customer_id)
        data = changes.model_dump(exclude_unset=True)
        Customer.model_validate({**current, **data})
        return Customer.model_validate(self.store.update(customer_id, data))

    def delete(self, customer_id: str) -> bool:
        return self.store.delete(customer_id)

    def search(self, term: str) -> List[Customer]:
        return [Customer.model_validate(r) for r in self.store.search(term, SEARCH_FIELDS)]
