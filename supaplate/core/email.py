import asyncio
import logging
from typing import Any, Dict, List, Optional

import resend
from jinja2 import Template

from supaplate.config import settings

logger = logging.getLogger(__name__)


class EmailSendError(Exception):
    """Raised when the email provider rejects a message."""


class ResendMailer:
    """Transactional email through the Resend API."""

    def __init__(self, api_key: Optional[str] = None, from_address: Optional[str] = None):
        resend.api_key = api_key or settings.resend_api_key
        self.from_address = from_address or settings.mail_from

    @staticmethod
    def render(template: str, **data: Any) -> str:
        return Template(template, autoescape=True).render(**data)

    async def send(self, to: List[str], subject: str, html: str) -> Dict[str, Any]:
        """Send one email; returns the provider response (contains the message id)."""
        params = {
            "from": self.from_address,
            "to": to,
            "subject": subject,
            "html": html,
        }
        try:
            response = await asyncio.to_thread(resend.Emails.send, params)
        except Exception as e:
            logger.error(f"Failed to send email '{subject}': {str(e)}")
            raise EmailSendError(str(e)) from e
        logger.info(f"Email '{subject}' sent, id={response.get('id')}")
        return response
