import base64
import logging
from typing import Any, Dict, List, Optional

import httpx

from invoicepro.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """
    Sends mail through the SendGrid v3 HTTP API.

    Every failure is reported as ``False``: an unset API key (logged as a
    warning) and a provider or network error (logged as an error) look the
    same to the caller.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        sender: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = settings.SENDGRID_API_KEY if api_key is None else api_key
        self.api_url = api_url or settings.SENDGRID_API_URL
        self.sender = sender or settings.EMAIL_FROM
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @staticmethod
    def build_payload(
        to: str,
        sender: str,
        subject: str,
        html: Optional[str] = None,
        text: Optional[str] = None,
        attachments: Optional[List[Dict[str, str]]] = None,
    ) -> Dict[str, Any]:
        content = []
        if text:
            content.append({"type": "text/plain", "value": text})
        if html:
            content.append({"type": "text/html", "value": html})
        payload: Dict[str, Any] = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": sender},
            "subject": subject,
            "content": content,
        }
        if attachments:
            payload["attachments"] = attachments
        return payload

    async def send_email(
        self,
        to: str,
        subject: str,
        html: Optional[str] = None,
        text: Optional[str] = None,
        attachments: Optional[List[Dict[str, str]]] = None,
    ) -> bool:
        if not self.configured:
            logger.warning("SendGrid API key not configured, email not sent")
            return False

        payload = self.build_payload(to, self.sender, subject, html, text, attachments)
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=settings.EMAIL_TIMEOUT_SECONDS) as client:
                response = await client.post(
                    self.api_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
            response.raise_for_status()
            logger.info(f"Email '{subject}' sent to {to}")
            return True
        except httpx.HTTPStatusError as e:
            logger.error(f"SendGrid rejected email to {to}: {e.response.status_code} {e.response.text[:200]}")
            return False
        except httpx.HTTPError as e:
            logger.error(f"SendGrid email error: {e}")
            return False

    async def send_invoice_email(
        self,
        customer_email: str,
        invoice_number: str,
        html: str,
        pdf: bytes,
    ) -> bool:
        return await self.send_email(
            to=customer_email,
            subject=f"Invoice {invoice_number} from {settings.COMPANY_NAME}",
            html=html,
            attachments=[{
                "content": base64.b64encode(pdf).decode(),
                "filename": f"invoice-{invoice_number}.pdf",
                "type": "application/pdf",
                "disposition": "attachment",
            }],
        )
