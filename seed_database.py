#!/usr/bin/env python3
"""
Script to seed the configured store with demo customers, products and invoices.
Run with: python3 seed_database.py [--clear]
"""
import argparse
from datetime import date, timedelta

from invoicepro.models.customer import CustomerCreate
from invoicepro.models.invoice import InvoiceCreate, InvoiceItemInput, InvoiceUpdate
from invoicepro.models.product import ProductCreate
from invoicepro.repositories.registry import build_repositories
from invoicepro.services.auth_service import AuthService
from invoicepro.services.invoice_service import InvoiceService

CUSTOMERS = [
    ("Acme Corporation", "billing@acme.example", "+1 555 0100", "12 Industrial Way", None),
    ("TechStart Inc", "accounts@techstart.example", "+1 555 0101", None, None),
    ("Global Enterprises", "ap@global.example", None, "88 Harbour Road", "27AAECG1234F1Z5"),
    ("Innovation Labs", "finance@innolabs.example", "+1 555 0103", None, None),
    ("Design Studio", "hello@designstudio.example", None, None, "06BZAHM6385P6Z2"),
]

PRODUCTS = [
    ("Website Design", "SRV-WEB", "1200.00", "18", "Five page responsive website"),
    ("Logo Package", "SRV-LOGO", "350.00", "18", "Logo with three revisions"),
    ("Business Cards (500)", "PRN-BC500", "45.50", "12", None),
    ("Hosting (12 months)", "SRV-HOST12", "120.00", "18", None),
    ("Consulting Hour", "SRV-CONS", "85.00", "5", "Billed per hour"),
]


def clear_store(repos):
    """Delete all customers, products and invoices (users are kept)"""
    print("Clearing existing data...")
    for repo in (repos.invoices, repos.products, repos.customers):
        for record in repo.store.list():
            repo.store.delete(record["id"])
    print("Store cleared.")


def seed_customers(repos):
    """Create the demo customers, reusing any already present (matched on email)"""
    print("Seeding customers...")
    customers = []
    for name, email, phone, address, gst in CUSTOMERS:
        existing = repos.customers.get_by_email(email)
        if existing is None:
            existing = repos.customers.create(CustomerCreate(name=name, email=email, phone=phone, address=address, gstId=gst))
        customers.append(existing)
    return customers


def seed_products(repos):
    print("Seeding products...")
    products = []
    for name, sku, price, tax, desc in PRODUCTS:
        existing = repos.products.get_by_sku(sku)
        if existing is None:
            existing = repos.products.create(ProductCreate(name=name, sku=sku, price=price, taxRate=tax, description=desc))
        products.append(existing)
    return products


def seed_invoices(repos, customers, products, count=12):
    print("Seeding invoices...")
    service = InvoiceService(repos)
    statuses = ["paid", "unpaid", "partial", "paid"]
    for i in range(count):
        lines = [
            InvoiceItemInput(productId=products[i % len(products)].id, quantity=1 + i % 3, discount=[0, 5, 10][i % 3]),
            InvoiceItemInput(productId=products[(i + 2) % len(products)].id, quantity=2),
        ]
        invoice = service.create_invoice(InvoiceCreate(
            customerId=customers[i % len(customers)].id,
            dueDate=date.today() + timedelta(days=30 - i * 3),
            items=lines,
        ))
        status = statuses[i % len(statuses)]
        if status != "unpaid":
            service.update_invoice(invoice.id, InvoiceUpdate(
                paymentStatus=status,
                status="completed" if status == "paid" else "pending",
            ))
        print(f"  {invoice.invoiceNumber}: {invoice.total} ({status})")


def main():
    parser = argparse.ArgumentParser(description="Seed InvoicePro with demo data")
    parser.add_argument("--clear", action="store_true", help="remove existing customers, products and invoices first")
    args = parser.parse_args()

    repos = build_repositories()
    AuthService(repos).ensure_default_admin()
    if args.clear:
        clear_store(repos)
    customers = seed_customers(repos)
    products = seed_products(repos)
    seed_invoices(repos, customers, products)
    print("Seeding complete.")


if __name__ == "__main__":
    main()
