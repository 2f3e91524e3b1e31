import logging
from fastapi import HTTPException

from supaplate.config import settings
from supaplate.core.email import EmailSendError, ResendMailer
from supaplate.core.email_templates import CONTACT_TEMPLATE
from supaplate.core.forms import FormValidationError
from supaplate.modules.contact.captcha import CaptchaVerifier
from supaplate.modules.contact.schemas import ContactRequest

logger = logging.getLogger(__name__)

INVALID_CAPTCHA = "Invalid captcha, please try again"
NO_ADMIN_EMAIL = "Contact email is not configured"


class ContactService:
    def __init__(self, captcha: CaptchaVerifier, mailer: ResendMailer):
        self.captcha = captcha
        self.mailer = mailer

    async def submit(self, contact_data: ContactRequest) -> None:
        """Verify both CAPTCHA tokens, then forward the message to the admin inbox"""
        results = await self.captcha.verify(contact_data.turnstile, contact_data.hcaptcha)
        failed = {field: [INVALID_CAPTCHA] for field, ok in results.items() if not ok}
        if failed:
            logger.info(f"Contact form rejected, captcha failed: {', '.join(failed)}")
            raise FormValidationError(failed)

        if not settings.admin_email:
            logger.error("ADMIN_EMAIL is not set; cannot deliver contact form")
            raise HTTPException(status_code=500, detail=NO_ADMIN_EMAIL)

        html = self.mailer.render(
            CONTACT_TEMPLATE,
            name=contact_data.name,
            email=contact_data.email,
            message=contact_data.message,
        )
        try:
            await self.mailer.send(
                [settings.admin_email],
                f"New contact form submission from {contact_data.name}",
                html,
            )
        except EmailSendError as e:
            raise HTTPException(status_code=500, detail=str(e))
