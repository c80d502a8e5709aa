"""Domain errors raised by repositories and services.

Endpoints translate these into HTTP responses; nothing below the API layer
knows about status codes.
"""


class InvoiceProError(Exception):
    pass


class RecordNotFoundError(InvoiceProError):
    def __init__(self, collection: str, record_id: str):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"{collection} record {record_id} not found")


class DuplicateRecordError(InvoiceProError):
    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"{field} '{value}' already exists")


class ProductNotFoundError(InvoiceProError):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class CustomerNotFoundError(InvoiceProError):
    def __init__(self, customer_id: str):
        self.customer_id = customer_id
        super().__init__(f"Customer {customer_id} not found")
