from typing import List, Optional

from pydantic import BaseModel

from invoicepro.models.invoice import Invoice


class TopProduct(BaseModel):
    productId: str
    name: str
    sku: str
    sales: int
    revenue: float


class DashboardMetrics(BaseModel):
    totalSales: float
    totalInvoices: int
    pendingPayments: float
    activeProducts: int
    recentInvoices: List[Invoice]
    topProducts: List[TopProduct]


class ReportSummary(BaseModel):
    period: str
    start: Optional[str] = None
    end: Optional[str] = None
    totalInvoices: int
    totalRevenue: float
    paidRevenue: float
    pendingRevenue: float
    paidInvoices: int
    averageInvoiceValue: float
