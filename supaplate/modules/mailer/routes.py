from fastapi import APIRouter, Depends, Header, HTTPException, status
from supabase import Client
from typing import Optional

from supaplate.config import settings
from supaplate.core.dependencies import get_admin_client, get_mailer
from supaplate.core.email import ResendMailer
from supaplate.modules.mailer.service import MailerService

router = APIRouter(prefix="/api/cron", tags=["cron"])


def get_mailer_service(
    admin: Client = Depends(get_admin_client),
    mailer: ResendMailer = Depends(get_mailer)
) -> MailerService:
    return MailerService(admin, mailer)


def verify_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    if not settings.cron_secret or authorization != settings.cron_secret:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


@router.post("/mailer", dependencies=[Depends(verify_cron_secret)])
async def run_mailer(service: MailerService = Depends(get_mailer_service)):
    """Scheduled job: deliver one queued email"""
    await service.process_next()
    return {"success": True}
