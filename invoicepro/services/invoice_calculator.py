"""
Invoice pricing.

Amounts are accumulated in float and formatted once, when written to the
record, as two-decimal strings rounded half-up. Formatting goes through
``repr`` so that e.g. ``32.400000000000006`` becomes ``"32.40"`` rather than
picking up binary noise.
"""
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Mapping, Sequence

from invoicepro.core.exceptions import ProductNotFoundError
from invoicepro.models.invoice import InvoiceItem, InvoiceItemInput
from invoicepro.models.product import Product

CENT = Decimal("0.01")


def money(value: float) -> str:
    return str(Decimal(repr(float(value))).quantize(CENT, rounding=ROUND_HALF_UP))


def round_money(value: float) -> float:
    return float(money(value))


@dataclass
class PricedInvoice:
    items: List[InvoiceItem] = field(default_factory=list)
    subtotal: float = 0.0
    discount_amount: float = 0.0
    tax_amount: float = 0.0

    @property
    def total(self) -> float:
        return self.subtotal - self.discount_amount + self.tax_amount

    def amounts(self) -> Dict[str, str]:
        return {
            "subtotal": money(self.subtotal),
            "discountAmount": money(self.discount_amount),
            "taxAmount": money(self.tax_amount),
            "total": money(self.total),
        }


def price_items(lines: Sequence[InvoiceItemInput], products: Mapping[str, Product]) -> PricedInvoice:
    """
    Price each line against its product and aggregate the invoice totals.

    Tax is charged per line on the discounted amount at that product's rate.
    Line totals are pre-tax. Raises ProductNotFoundError for the first line
    whose product is not in ``products``.
    """
    priced = PricedInvoice()
    for line in lines:
        product = products.get(line.productId)
        if product is None:
            raise ProductNotFoundError(line.productId)

        price = float(product.price)
        item_subtotal = line.quantity * price
        item_discount = item_subtotal * line.discount / 100
        item_total = item_subtotal - item_discount
        item_tax = item_total * float(product.taxRate) / 100

        priced.items.append(InvoiceItem(
            productId=product.id,
            productName=product.name,
            sku=product.sku,
            quantity=line.quantity,
            price=round_money(price),
            discount=line.discount,
            total=round_money(item_total),
        ))
        priced.subtotal += item_subtotal
        priced.discount_amount += item_discount
        priced.tax_amount += item_tax

    return priced
