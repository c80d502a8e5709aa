"""
Tests for period reports and CSV export.
"""
import csv
import io
from datetime import date

import pandas as pd
import pytest

from invoicepro.services.report_service import ReportService, period_bounds

NOW = pd.Timestamp("2025-03-15T12:00:00", tz="UTC")


def add_invoice(repos, number, payment_status, total, created_at, customer_id="c1"):
    record = repos.invoices.store.create({
        "invoiceNumber": number,
        "customerId": customer_id,
        "items": [],
        "subtotal": total,
        "taxAmount": "0",
        "discountAmount": "0",
        "total": total,
        "status": "pending",
        "paymentStatus": payment_status,
        "dueDate": "2025-04-01",
    })
    repos.invoices.store.update(record["id"], {"createdAt": created_at})


@pytest.fixture
def populated(repos, customer):
    add_invoice(repos, "INV-2024-001", "paid", "1000.00", "2024-01-10T09:00:00+00:00", customer.id)
    add_invoice(repos, "INV-2025-001", "paid", "100.00", "2025-03-01T09:00:00+00:00", customer.id)
    add_invoice(repos, "INV-2025-002", "unpaid", "50.00", "2025-03-10T09:00:00+00:00", customer.id)
    add_invoice(repos, "INV-2025-003", "partial", "25.00", "2025-03-15T08:00:00+00:00", "gone")


def test_period_bounds():
    assert period_bounds("all", NOW) == (None, None)
    lower, upper = period_bounds("daily", NOW)
    assert lower == pd.Timestamp("2025-03-15", tz="UTC")
    assert upper == pd.Timestamp("2025-03-16", tz="UTC")
    assert period_bounds("monthly", NOW)[0] == pd.Timestamp("2025-02-15T12:00:00", tz="UTC")
    lower, upper = period_bounds("custom", NOW, date(2025, 3, 1), date(2025, 3, 10))
    assert upper == pd.Timestamp("2025-03-11", tz="UTC")
    with pytest.raises(ValueError):
        period_bounds("hourly", NOW)


def test_monthly_summary(repos, populated):
    summary = ReportService(repos).summary("monthly", now=NOW)
    assert summary.totalInvoices == 3
    assert summary.totalRevenue == pytest.approx(175.0)
    assert summary.paidRevenue == pytest.approx(100.0)
    assert summary.pendingRevenue == pytest.approx(75.0)
    assert summary.paidInvoices == 1
    assert summary.averageInvoiceValue == pytest.approx(175.0 / 3)


def test_daily_and_all_summary(repos, populated):
    service = ReportService(repos)
    assert service.summary("daily", now=NOW).totalInvoices == 1
    assert service.summary("all", now=NOW).totalInvoices == 4


def test_custom_range_is_inclusive(repos, populated):
    summary = ReportService(repos).summary("custom", date(2025, 3, 1), date(2025, 3, 10), now=NOW)
    assert summary.totalInvoices == 2


def test_empty_summary(repos):
    summary = ReportService(repos).summary("yearly", now=NOW)
    assert summary.totalInvoices == 0
    assert summary.averageInvoiceValue == 0.0


def test_invoices_csv(repos, populated):
    rows = list(csv.reader(io.StringIO(ReportService(repos).invoices_csv())))
    assert rows[0] == ["Invoice Number", "Customer", "Amount", "Status", "Date"]
    assert rows[1] == ["INV-2024-001", "Acme Corporation", "1000.00", "paid", "2024-01-10"]
    assert rows[4] == ["INV-2025-003", "Unknown", "25.00", "partial", "2025-03-15"]


def test_invoices_csv_empty(repos):
    rows = list(csv.reader(io.StringIO(ReportService(repos).invoices_csv())))
    assert rows == [["Invoice Number", "Customer", "Amount", "Status", "Date"]]
