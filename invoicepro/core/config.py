from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Storage
    DATA_DIR: str = "./data"
    STORAGE_BACKEND: str = "json"  # 'json' or 'sql'
    DATABASE_URL: str = "sqlite:///./data/invoicepro.db"

    # Bootstrap admin account, created when the users collection is empty
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"
    DEFAULT_ADMIN_EMAIL: str = "admin@invoicepro.com"

    # Email (SendGrid)
    SENDGRID_API_KEY: str = ""
    SENDGRID_API_URL: str = "https://api.sendgrid.com/v3/mail/send"
    EMAIL_FROM: str = "noreply@invoicepro.com"
    EMAIL_TIMEOUT_SECONDS: float = 10.0

    # Company details printed on invoices
    COMPANY_NAME: str = "InvoicePro"
    COMPANY_ADDRESS_LINES: List[str] = ["123 Business Street", "City, State 12345"]
    COMPANY_EMAIL: str = "contact@invoicepro.com"
    COMPANY_PHONE: str = "+1 (555) 123-4567"
    CURRENCY_SYMBOL: str = "$"
    PAYMENT_TERMS: str = "Payment is due within 30 days of invoice date."

    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
