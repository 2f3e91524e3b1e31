from fastapi import APIRouter, Depends, HTTPException, Request
from urllib.parse import urlencode
from pydantic import ValidationError

from supaplate.core.dependencies import get_server_client
from supaplate.core.forms import FormValidationError, form_to_dict, validate_form
from supaplate.core.responses import redirect
from supaplate.database.supabase_client import ServerClient
from supaplate.modules.auth.schemas import (
    JoinRequest, LoginRequest, EmailRequest, PasswordUpdateRequest,
    OtpCompleteRequest, ConfirmParams, SocialProviderParams,
    SocialCompleteParams, SocialErrorParams
)
from supaplate.modules.auth.service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(server: ServerClient = Depends(get_server_client)) -> AuthService:
    return AuthService(server.client)


async def _email_or_400(request: Request, message: str) -> str:
    form = form_to_dict(await request.form())
    try:
        return validate_form(EmailRequest, form).email
    except FormValidationError:
        raise HTTPException(status_code=400, detail=message)


@router.post("/join")
async def join(request: Request, service: AuthService = Depends(get_auth_service)):
    """Register a new user; a verification email is sent by the provider"""
    join_data = validate_form(JoinRequest, form_to_dict(await request.form()))
    service.register(join_data)
    return {"success": True}


@router.post("/login")
async def login(
    request: Request,
    server: ServerClient = Depends(get_server_client),
    service: AuthService = Depends(get_auth_service)
):
    """Password sign-in; redirects home with session cookies"""
    login_data = validate_form(LoginRequest, form_to_dict(await request.form()))
    service.login(login_data)
    return redirect("/", server)


@router.get("/logout")
async def logout(
    server: ServerClient = Depends(get_server_client),
    service: AuthService = Depends(get_auth_service)
):
    service.logout()
    return redirect("/", server)


@router.post("/api/resend")
async def resend_verification(request: Request, service: AuthService = Depends(get_auth_service)):
    """Resend the sign-up verification email"""
    email = await _email_or_400(request, "Invalid email address")
    service.resend_signup_email(email)
    return {"success": True}


@router.get("/confirm")
async def confirm(
    request: Request,
    server: ServerClient = Depends(get_server_client),
    service: AuthService = Depends(get_auth_service)
):
    """Landing point for emailed confirmation, recovery and email-change links"""
    try:
        params = ConfirmParams.model_validate(dict(request.query_params))
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid confirmation code")
    return redirect(service.verify_token_hash(params), server)


@router.post("/forgot-password")
async def forgot_password(request: Request, service: AuthService = Depends(get_auth_service)):
    email = validate_form(EmailRequest, form_to_dict(await request.form())).email
    service.send_password_reset(email)
    return {"success": True}


@router.post("/forgot-password/reset")
async def reset_password(
    request: Request,
    server: ServerClient = Depends(get_server_client),
    service: AuthService = Depends(get_auth_service)
):
    """Set a new password for the session opened by a recovery link"""
    if not server.get_user():
        return redirect("/auth/forgot-password")
    password_data = validate_form(PasswordUpdateRequest, form_to_dict(await request.form()))
    service.update_password(password_data.password)
    return {"success": True}


@router.post("/magic-link")
async def magic_link(request: Request, service: AuthService = Depends(get_auth_service)):
    email = await _email_or_400(request, "Invalid email")
    service.send_sign_in_code(email, otp_disabled_message="Create an account before signing in.")
    return {"success": True}


@router.post("/otp/start")
async def otp_start(request: Request, service: AuthService = Depends(get_auth_service)):
    email = await _email_or_400(request, "Invalid email")
    service.send_sign_in_code(email)
    return redirect(f"/auth/otp/complete?{urlencode({'email': email})}")


@router.get("/otp/complete")
async def otp_complete_page(request: Request):
    try:
        params = EmailRequest.model_validate(dict(request.query_params))
    except ValidationError:
        return redirect("/auth/otp/start")
    return {"email": params.email}


@router.post("/otp/complete")
async def otp_complete(
    request: Request,
    server: ServerClient = Depends(get_server_client),
    service: AuthService = Depends(get_auth_service)
):
    try:
        otp_data = validate_form(OtpCompleteRequest, form_to_dict(await request.form()))
    except FormValidationError:
        raise HTTPException(status_code=400, detail="Could not verify code. Please try again.")
    service.verify_code(otp_data.email, otp_data.code)
    return redirect("/", server)


@router.get("/social/start/{provider}")
async def social_start(
    provider: str,
    server: ServerClient = Depends(get_server_client),
    service: AuthService = Depends(get_auth_service)
):
    """Redirect to the OAuth provider; the PKCE verifier travels in a cookie"""
    try:
        params = SocialProviderParams(provider=provider)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid provider")
    return redirect(service.start_oauth(params.provider), server)


@router.get("/social/complete/{provider}")
async def social_complete(
    provider: str,
    request: Request,
    server: ServerClient = Depends(get_server_client),
    service: AuthService = Depends(get_auth_service)
):
    """OAuth callback: exchange the code for a session, or report the provider's error"""
    query = dict(request.query_params)
    try:
        params = SocialCompleteParams.model_validate(query)
    except ValidationError:
        try:
            error_data = SocialErrorParams.model_validate(query)
        except ValidationError:
            raise HTTPException(status_code=400, detail="Invalid code")
        raise HTTPException(status_code=400, detail=error_data.error_description)
    service.complete_oauth(params.code)
    return redirect("/", server)
