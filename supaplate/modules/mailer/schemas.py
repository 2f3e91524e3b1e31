from pydantic import BaseModel
from typing import Any, Dict


class MailerMessage(BaseModel):
    to: str
    template: str
    data: Dict[str, Any] = {}
