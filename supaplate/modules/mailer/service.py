import json
import logging
from supabase import Client
from pydantic import ValidationError
from typing import Optional

from supaplate.core.email import EmailSendError, ResendMailer
from supaplate.core.email_templates import WELCOME_TEMPLATE
from supaplate.modules.mailer.schemas import MailerMessage

logger = logging.getLogger(__name__)

QUEUE_NAME = "mailer"


class MailerService:
    def __init__(self, admin: Client, mailer: ResendMailer):
        self.admin = admin
        self.mailer = mailer

    def pop_message(self) -> Optional[MailerMessage]:
        """Take one message off the queue; None when empty or unreadable"""
        try:
            result = self.admin.schema("pgmq_public")\
                .rpc("pop", {"queue_name": QUEUE_NAME})\
                .execute()
        except Exception as e:
            logger.error(f"Failed to pop from {QUEUE_NAME} queue: {str(e)}")
            return None

        if not result.data:
            return None
        try:
            return MailerMessage.model_validate(result.data[0]["message"])
        except (ValidationError, KeyError, TypeError) as e:
            logger.error(f"Discarding malformed {QUEUE_NAME} message: {str(e)}")
            return None

    async def process_next(self) -> None:
        """Pop and deliver one queued email; failures are logged, never raised"""
        try:
            await self._deliver_next()
        except Exception as e:
            logger.error(f"Error in {QUEUE_NAME} job: {str(e)}")

    async def _deliver_next(self) -> None:
        message = self.pop_message()
        if message is None:
            return

        if message.template != "welcome":
            logger.warning(f"Unknown email template '{message.template}', message dropped")
            return

        html = self.mailer.render(WELCOME_TEMPLATE, profile=json.dumps(message.data, indent=2))
        try:
            await self.mailer.send([message.to], "Welcome to Supaplate!", html)
        except EmailSendError:
            logger.error(f"Welcome email to {message.to} was not delivered")
