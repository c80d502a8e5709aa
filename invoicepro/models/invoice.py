from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from invoicepro.models.customer import Customer

PaymentStatus = Literal["unpaid", "partial", "paid"]


class InvoiceItem(BaseModel):
    """Line item snapshot. Product fields are copied at creation and never refreshed."""
    productId: str
    productName: str
    sku: str
    quantity: int
    price: float
    discount: float = 0
    total: float


class InvoiceItemInput(BaseModel):
    productId: str
    quantity: int = Field(..., ge=1)
    discount: float = Field(0, ge=0, le=100)


class InvoiceCreate(BaseModel):
    customerId: str
    dueDate: date
    items: List[InvoiceItemInput] = Field(..., min_length=1)


class InvoiceUpdate(BaseModel):
    """Shallow update. Totals are taken as given and not recomputed."""
    customerId: Optional[str] = None
    items: Optional[List[InvoiceItem]] = None
    subtotal: Optional[str] = None
    taxAmount: Optional[str] = None
    discountAmount: Optional[str] = None
    total: Optional[str] = None
    status: Optional[str] = None
    paymentStatus: Optional[PaymentStatus] = None
    dueDate: Optional[date] = None


class Invoice(BaseModel):
    id: str
    invoiceNumber: str
    customerId: str
    items: List[InvoiceItem]
    subtotal: str
    taxAmount: str
    discountAmount: str = "0"
    total: str
    status: str = "pending"
    paymentStatus: str = "unpaid"
    dueDate: str
    createdAt: str
    updatedAt: Optional[str] = None


class InvoiceListItem(Invoice):
    customerName: str
    customerEmail: str


class InvoiceDetail(Invoice):
    customer: Optional[Customer] = None


class NextInvoiceNumber(BaseModel):
    invoiceNumber: str


class MessageResponse(BaseModel):
    message: str

