from fastapi import APIRouter, Depends, Request
import httpx

from supaplate.core.dependencies import get_http_client, get_mailer
from supaplate.core.email import ResendMailer
from supaplate.core.forms import form_to_dict, validate_form
from supaplate.modules.contact.captcha import CaptchaVerifier
from supaplate.modules.contact.schemas import ContactRequest
from supaplate.modules.contact.service import ContactService

router = APIRouter(prefix="/contact", tags=["contact"])


def get_captcha_verifier(http: httpx.AsyncClient = Depends(get_http_client)) -> CaptchaVerifier:
    return CaptchaVerifier(http)


def get_contact_service(
    captcha: CaptchaVerifier = Depends(get_captcha_verifier),
    mailer: ResendMailer = Depends(get_mailer)
) -> ContactService:
    return ContactService(captcha, mailer)


@router.post("")
async def submit_contact(request: Request, service: ContactService = Depends(get_contact_service)):
    """Public contact form, guarded by Turnstile and hCaptcha"""
    contact_data = validate_form(ContactRequest, form_to_dict(await request.form()))
    await service.submit(contact_data)
    return {"success": True}
