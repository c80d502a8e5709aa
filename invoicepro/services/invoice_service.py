import logging
import threading
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from invoicepro.core.exceptions import CustomerNotFoundError, RecordNotFoundError
from invoicepro.models.customer import Customer
from invoicepro.models.invoice import Invoice, InvoiceCreate, InvoiceDetail, InvoiceListItem, InvoiceUpdate
from invoicepro.repositories.registry import Repositories
from invoicepro.services.invoice_calculator import price_items

logger = logging.getLogger(__name__)

# Serializes number assignment and insert for invoices created in this process
_create_lock = threading.Lock()


def current_year() -> int:
    """Year on the UTC clock that also stamps createdAt."""
    return datetime.now(timezone.utc).year


def format_invoice_number(year: int, seq: int) -> str:
    return f"INV-{year}-{seq:03d}"


class InvoiceService:
    def __init__(self, repos: Repositories):
        self.repos = repos

    def generate_invoice_number(self, year: Optional[int] = None) -> str:
        """
        Next candidate number for ``year`` (default: current year).

        Derived from the count of invoices already numbered in that year and
        reserves nothing: calling it twice without creating an invoice in
        between returns the same value.
        """
        year = year or current_year()
        count = self.repos.invoices.count_numbers_containing(f"INV-{year}")
        return format_invoice_number(year, count + 1)

    def _assign_number(self, year: int) -> str:
        count = self.repos.invoices.count_numbers_containing(f"INV-{year}")
        seq = count + 1
        candidate = format_invoice_number(year, seq)
        # Gaps left by deletions can make the count collide with an existing number
        while self.repos.invoices.get_by_number(candidate) is not None:
            seq += 1
            candidate = format_invoice_number(year, seq)
        return candidate

    def create_invoice(self, payload: InvoiceCreate, year: Optional[int] = None) -> Invoice:
        if self.repos.customers.get(payload.customerId) is None:
            raise CustomerNotFoundError(payload.customerId)

        products = {}
        for line in payload.items:
            if line.productId not in products:
                product = self.repos.products.get(line.productId)
                if product is not None:
                    products[line.productId] = product

        priced = price_items(payload.items, products)

        with _create_lock:
            invoice_number = self._assign_number(year or current_year())
            invoice = self.repos.invoices.create({
                "invoiceNumber": invoice_number,
                "customerId": payload.customerId,
                "items": [item.model_dump() for item in priced.items],
                **priced.amounts(),
                "status": "pending",
                "paymentStatus": "unpaid",
                "dueDate": payload.dueDate.isoformat(),
            })

        logger.info(f"Created invoice {invoice.invoiceNumber} for customer {payload.customerId} (total {invoice.total})")
        return invoice

    def update_invoice(self, invoice_id: str, changes: InvoiceUpdate) -> Invoice:
        return self.repos.invoices.update(invoice_id, changes.model_dump(mode="json", exclude_unset=True))

    def list_invoices(self, search: Optional[str] = None) -> List[InvoiceListItem]:
        customers = {c.id: c for c in self.repos.customers.list()}
        if search:
            invoices = self.repos.invoices.search(search, {cid: c.name for cid, c in customers.items()})
        else:
            invoices = self.repos.invoices.list()
        return [self._enrich(invoice, customers.get(invoice.customerId)) for invoice in invoices]

    def list_for_customer(self, customer_id: str) -> List[InvoiceListItem]:
        customer = self.repos.customers.get(customer_id)
        if customer is None:
            raise CustomerNotFoundError(customer_id)
        return [self._enrich(invoice, customer) for invoice in self.repos.invoices.list_by_customer(customer_id)]

    @staticmethod
    def _enrich(invoice: Invoice, customer: Optional[Customer]) -> InvoiceListItem:
        return InvoiceListItem(
            **invoice.model_dump(),
            customerName=customer.name if customer else "Unknown Customer",
            customerEmail=customer.email if customer else "",
        )

    def get_detail(self, invoice_id: str) -> Optional[InvoiceDetail]:
        invoice = self.repos.invoices.get(invoice_id)
        if invoice is None:
            return None
        customer = self.repos.customers.get(invoice.customerId)
        return InvoiceDetail(**invoice.model_dump(), customer=customer)

    def get_with_customer(self, invoice_id: str) -> Tuple[Invoice, Customer]:
        """Invoice plus its customer, as needed for documents. Both must exist."""
        invoice = self.repos.invoices.get(invoice_id)
        if invoice is None:
            raise RecordNotFoundError("invoices", invoice_id)
        customer = self.repos.customers.get(invoice.customerId)
        if customer is None:
            raise CustomerNotFoundError(invoice.customerId)
        return invoice, customer
