import logging
from datetime import date
from typing import Optional, Tuple

import pandas as pd

from invoicepro.repositories.registry import Repositories
from invoicepro.schemas.dashboard import ReportSummary
from invoicepro.services.dashboard_service import invoices_frame

logger = logging.getLogger(__name__)

PERIODS = ("daily", "weekly", "monthly", "yearly", "all", "custom")

CSV_COLUMNS = ["Invoice Number", "Customer", "Amount", "Status", "Date"]


def period_bounds(
    period: str,
    now: pd.Timestamp,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Tuple[Optional[pd.Timestamp], Optional[pd.Timestamp]]:
    """Inclusive lower and exclusive upper bound (UTC) for a reporting period."""
    if period == "all":
        return None, None
    if period == "daily":
        day = now.normalize()
        return day, day + pd.Timedelta(days=1)
    if period == "weekly":
        return now - pd.Timedelta(days=7), None
    if period == "monthly":
        return now - pd.DateOffset(months=1), None
    if period == "yearly":
        return now - pd.DateOffset(years=1), None
    if period == "custom":
        lower = pd.Timestamp(start, tz="UTC") if start else None
        upper = pd.Timestamp(end, tz="UTC") + pd.Timedelta(days=1) if end else None
        return lower, upper
    raise ValueError(f"Unknown report period '{period}', expected one of {', '.join(PERIODS)}")


class ReportService:
    def __init__(self, repos: Repositories):
        self.repos = repos

    def summary(
        self,
        period: str = "monthly",
        start: Optional[date] = None,
        end: Optional[date] = None,
        now: Optional[pd.Timestamp] = None,
    ) -> ReportSummary:
        now = now if now is not None else pd.Timestamp.now(tz="UTC")
        lower, upper = period_bounds(period, now, start, end)

        df = invoices_frame(self.repos.invoices.list())
        if lower is not None:
            df = df[df["createdAt"] >= lower]
        if upper is not None:
            df = df[df["createdAt"] < upper]

        paid = df[df["paymentStatus"] == "paid"]
        pending = df[df["paymentStatus"].isin(["unpaid", "partial"])]
        total_revenue = float(df["total"].sum())
        count = len(df)

        return ReportSummary(
            period=period,
            start=lower.isoformat() if lower is not None else None,
            end=upper.isoformat() if upper is not None else None,
            totalInvoices=count,
            totalRevenue=total_revenue,
            paidRevenue=float(paid["total"].sum()),
            pendingRevenue=float(pending["total"].sum()),
            paidInvoices=len(paid),
            averageInvoiceValue=total_revenue / count if count else 0.0,
        )

    def invoices_csv(self) -> str:
        """All invoices as CSV, one row per invoice, in storage order."""
        customers = {c.id: c.name for c in self.repos.customers.list()}
        df = invoices_frame(self.repos.invoices.list())
        export = pd.DataFrame({
            "Invoice Number": df["invoiceNumber"],
            "Customer": df["customerId"].map(lambda cid: customers.get(cid, "Unknown")),
            "Amount": df["total"].map(lambda v: f"{v:.2f}"),
            "Status": df["paymentStatus"],
            "Date": df["createdAt"].dt.strftime("%Y-%m-%d"),
        }, columns=CSV_COLUMNS)
        logger.info(f"Exported {len(export)} invoices to CSV")
        return export.to_csv(index=False)
