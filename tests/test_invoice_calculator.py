"""
Tests for invoice line pricing and totals.
"""
import pytest

from invoicepro.core.exceptions import ProductNotFoundError
from invoicepro.models.invoice import InvoiceItemInput
from invoicepro.models.product import Product
from invoicepro.services.invoice_calculator import money, price_items


def make_product(pid, price, tax_rate="18", name=None, sku=None):
    return Product(
        id=pid,
        name=name or f"Product {pid}",
        sku=sku or f"SKU-{pid}",
        price=price,
        taxRate=tax_rate,
        createdAt="2025-01-01T00:00:00+00:00",
    )


def test_single_item_reference_values():
    products = {"p1": make_product("p1", "100.00", "18")}
    priced = price_items([InvoiceItemInput(productId="p1", quantity=2, discount=10)], products)

    item = priced.items[0]
    assert item.total == 180.00
    assert item.price == 100.00
    assert item.discount == 10

    amounts = priced.amounts()
    assert amounts == {
        "subtotal": "200.00",
        "discountAmount": "20.00",
        "taxAmount": "32.40",
        "total": "212.40",
    }


def test_tax_uses_each_products_rate():
    products = {
        "a": make_product("a", "50.00", "5"),
        "b": make_product("b", "10.00", "28"),
    }
    priced = price_items(
        [InvoiceItemInput(productId="a", quantity=1), InvoiceItemInput(productId="b", quantity=3, discount=50)],
        products,
    )
    # a: 50 -> tax 2.50; b: 30 - 15 = 15 -> tax 4.20
    assert priced.amounts()["taxAmount"] == "6.70"
    assert priced.amounts()["subtotal"] == "80.00"
    assert priced.amounts()["discountAmount"] == "15.00"
    assert priced.amounts()["total"] == "71.70"


def test_total_identity_holds_for_many_lines():
    products = {str(i): make_product(str(i), f"{i * 3.33:.2f}", str(i % 4 * 6)) for i in range(1, 8)}
    lines = [InvoiceItemInput(productId=str(i), quantity=i, discount=i * 2.5) for i in range(1, 8)]
    amounts = price_items(lines, products).amounts()
    subtotal, discount, tax, total = (float(amounts[k]) for k in ("subtotal", "discountAmount", "taxAmount", "total"))
    assert total == pytest.approx(subtotal - discount + tax, abs=0.02)
    assert amounts["total"].count(".") == 1 and len(amounts["total"].split(".")[1]) == 2


def test_snapshot_copies_product_fields():
    products = {"p1": make_product("p1", "12.50", name="Mug", sku="MUG-1")}
    item = price_items([InvoiceItemInput(productId="p1", quantity=4)], products).items[0]
    assert (item.productId, item.productName, item.sku, item.price, item.total) == ("p1", "Mug", "MUG-1", 12.5, 50.0)


def test_missing_product_fails_whole_operation():
    products = {"p1": make_product("p1", "10")}
    with pytest.raises(ProductNotFoundError) as err:
        price_items([InvoiceItemInput(productId="p1", quantity=1), InvoiceItemInput(productId="ghost", quantity=1)], products)
    assert "ghost" in str(err.value)


def test_money_rounds_half_up():
    assert money(0.125) == "0.13"
    assert money(2.675) == "2.68"
    assert money(32.400000000000006) == "32.40"
    assert money(0) == "0.00"
