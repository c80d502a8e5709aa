import logging
from typing import List

import pandas as pd

from invoicepro.models.invoice import Invoice
from invoicepro.repositories.registry import Repositories
from invoicepro.schemas.dashboard import DashboardMetrics, TopProduct

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5
TOP_PRODUCTS_LIMIT = 5

INVOICE_COLUMNS = ["id", "invoiceNumber", "customerId", "total", "paymentStatus", "createdAt"]


def invoices_frame(invoices: List[Invoice]) -> pd.DataFrame:
    """One row per invoice with numeric ``total`` and parsed ``createdAt``."""
    rows = [
        {
            "id": inv.id,
            "invoiceNumber": inv.invoiceNumber,
            "customerId": inv.customerId,
            "total": inv.total,
            "paymentStatus": inv.paymentStatus,
            "createdAt": inv.createdAt,
        }
        for inv in invoices
    ]
    df = pd.DataFrame(rows, columns=INVOICE_COLUMNS)
    df["total"] = pd.to_numeric(df["total"], errors="coerce").fillna(0.0)
    df["createdAt"] = pd.to_datetime(df["createdAt"], utc=True, errors="coerce", format="ISO8601")
    return df


def items_frame(invoices: List[Invoice]) -> pd.DataFrame:
    rows = [
        {
            "productId": item.productId,
            "productName": item.productName,
            "sku": item.sku,
            "quantity": item.quantity,
            "total": item.total,
        }
        for inv in invoices
        for item in inv.items
    ]
    return pd.DataFrame(rows, columns=["productId", "productName", "sku", "quantity", "total"])


def top_products(invoices: List[Invoice], limit: int = TOP_PRODUCTS_LIMIT) -> List[TopProduct]:
    """
    Revenue per product across all line items, highest first.
    Ties on revenue are ordered by product id.
    """
    df = items_frame(invoices)
    if df.empty:
        return []
    grouped = (
        df.groupby("productId", sort=False)
        .agg(name=("productName", "first"), sku=("sku", "first"), sales=("quantity", "sum"), revenue=("total", "sum"))
        .reset_index()
        .sort_values(["revenue", "productId"], ascending=[False, True])
        .head(limit)
    )
    return [
        TopProduct(
            productId=row.productId,
            name=row.name,
            sku=row.sku,
            sales=int(row.sales),
            revenue=float(row.revenue),
        )
        for row in grouped.itertuples(index=False)
    ]


class DashboardService:
    def __init__(self, repos: Repositories):
        self.repos = repos

    def get_metrics(self) -> DashboardMetrics:
        invoices = self.repos.invoices.list()
        df = invoices_frame(invoices)

        total_sales = float(df.loc[df["paymentStatus"] == "paid", "total"].sum())
        pending = float(df.loc[df["paymentStatus"].isin(["unpaid", "partial"]), "total"].sum())

        by_id = {inv.id: inv for inv in invoices}
        recent_ids = df.sort_values("createdAt", ascending=False)["id"].head(RECENT_LIMIT).tolist()

        metrics = DashboardMetrics(
            totalSales=total_sales,
            totalInvoices=len(invoices),
            pendingPayments=pending,
            activeProducts=self.repos.products.count_active(),
            recentInvoices=[by_id[i] for i in recent_ids],
            topProducts=top_products(invoices),
        )
        logger.info(f"Dashboard computed over {len(invoices)} invoices: sales={total_sales}, pending={pending}")
        return metrics
