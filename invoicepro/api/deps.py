from fastapi import Depends, Request

from invoicepro.repositories.registry import Repositories
from invoicepro.services.auth_service import AuthService
from invoicepro.services.dashboard_service import DashboardService
from invoicepro.services.email_service import EmailService
from invoicepro.services.invoice_service import InvoiceService
from invoicepro.services.report_service import ReportService


def get_repos(request: Request) -> Repositories:
    return request.app.state.repos


def get_auth_service(repos: Repositories = Depends(get_repos)) -> AuthService:
    return AuthService(repos)


def get_invoice_service(repos: Repositories = Depends(get_repos)) -> InvoiceService:
    return InvoiceService(repos)


def get_dashboard_service(repos: Repositories = Depends(get_repos)) -> DashboardService:
    return DashboardService(repos)


def get_report_service(repos: Repositories = Depends(get_repos)) -> ReportService:
    return ReportService(repos)


def get_email_service() -> EmailService:
    return EmailService()
