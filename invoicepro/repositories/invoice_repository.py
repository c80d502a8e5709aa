from typing import Any, Dict, List, Optional

from invoicepro.core.exceptions import RecordNotFoundError
from invoicepro.models.invoice import Invoice
from invoicepro.repositories.record_store import Record, RecordStore, matches, utc_now


class InvoiceRepository:
    def __init__(self, store: RecordStore):
        self.store = store

    def list(self) -> List[Invoice]:
        return [Invoice.model_validate(r) for r in self.store.list()]

    def get(self, invoice_id: str) -> Optional[Invoice]:
        record = self.store.get(invoice_id)
        return Invoice.model_validate(record) if record else None

    def get_by_number(self, invoice_number: str) -> Optional[Invoice]:
        record = self.store.find_one("invoiceNumber", invoice_number)
        return Invoice.model_validate(record) if record else None

    def list_by_customer(self, customer_id: str) -> List[Invoice]:
        return [Invoice.model_validate(r) for r in self.store.filter(lambda r: r.get("customerId") == customer_id)]

    def count_numbers_containing(self, tag: str) -> int:
        return self.store.count(lambda r: tag in str(r.get("invoiceNumber", "")))

    def create(self, data: Dict[str, Any]) -> Invoice:
        record = self.store.create({**data, "updatedAt": utc_now()})
        return Invoice.model_validate(record)

    def update(self, invoice_id: str, changes: Dict[str, Any]) -> Invoice:
        current = self.store.get(invoice_id)
        if current is None:
            raise RecordNotFoundError("invoices", invoice_id)
        data = {**changes, "updatedAt": utc_now()}
        # Reject before writing so a bad field never reaches the file
        Invoice.model_validate({**current, **data})
        return Invoice.model_validate(self.store.update(invoice_id, data))

    def delete(self, invoice_id: str) -> bool:
        return self.store.delete(invoice_id)

    def search(self, term: str, customer_names: Dict[str, str]) -> List[Invoice]:
        """
        Match on invoice number, customer name, any line item's product name or
        SKU, or the creation date (YYYY-MM-DD).
        """
        needle = term.lower()

        def hit(record: Record) -> bool:
            if matches(record, needle, ("invoiceNumber",)):
                return True
            name = customer_names.get(record.get("customerId"))
            if name and needle in name.lower():
                return True
            if any(matches(item, needle, ("productName", "sku")) for item in record.get("items") or []):
                return True
            return needle in str(record.get("createdAt", ""))[:10]

        return [Invoice.model_validate(r) for r in self.store.filter(hit)]
