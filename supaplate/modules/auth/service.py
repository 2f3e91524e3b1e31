import logging
from urllib.parse import quote
from supabase import AuthError, Client
from fastapi import HTTPException
from pydantic import ValidationError
from typing import Any, Optional

from supaplate.config import settings
from supaplate.database.postgres import does_user_exist
from supaplate.modules.auth.schemas import JoinRequest, LoginRequest, ConfirmParams

logger = logging.getLogger(__name__)

ACCOUNT_EXISTS = "There is an account with this email already."
EMAIL_UPDATED = "Your email has been updated"


def provider_error(e: AuthError, status_code: int = 400) -> HTTPException:
    """Surface the identity provider's message unchanged."""
    message = getattr(e, "message", None) or str(e)
    logger.info(f"Auth provider rejected request: {message}")
    return HTTPException(status_code=status_code, detail=message)


def _provider_msg(e: ValidationError) -> Optional[str]:
    """The `msg` of the raw reply the SDK could not parse into a User."""
    for error in e.errors():
        body: Any = error.get("input")
        if isinstance(body, dict) and body.get("msg"):
            return str(body["msg"])
    return None


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def register(self, join_data: JoinRequest) -> None:
        """Register a new user with email and password"""
        if not join_data.terms:
            raise HTTPException(status_code=400, detail="You must agree to the terms of service")

        if does_user_exist(join_data.email):
            raise HTTPException(status_code=400, detail=ACCOUNT_EXISTS)

        try:
            self.supabase.auth.sign_up({
                "email": join_data.email,
                "password": join_data.password,
                "options": {
                    "data": {
                        "name": join_data.name,
                        "display_name": join_data.name,
                        "marketing_consent": join_data.marketing,
                    }
                }
            })
        except AuthError as e:
            raise provider_error(e)

    def login(self, login_data: LoginRequest) -> None:
        """Sign in with password; the session is written to the cookie storage"""
        try:
            self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password,
            })
        except AuthError as e:
            raise provider_error(e)

    def logout(self) -> None:
        try:
            self.supabase.auth.sign_out()
        except AuthError as e:
            # local session is cleared either way
            logger.warning(f"Sign out failed at provider: {e}")

    def resend_signup_email(self, email: str) -> None:
        try:
            self.supabase.auth.resend({
                "type": "signup",
                "email": email,
                "options": {"email_redirect_to": f"{settings.site_url}/auth/verify"},
            })
        except AuthError as e:
            raise provider_error(e)

    def verify_token_hash(self, params: ConfirmParams) -> str:
        """Verify an emailed token hash and return where to send the user next."""
        try:
            self.supabase.auth.verify_otp({
                "token_hash": params.token_hash,
                "type": params.type,
            })
        except AuthError as e:
            raise provider_error(e)
        except ValidationError as e:
            # first of the two email-change links: the provider answers with
            # {"msg": ...} only and the SDK fails to build a User from it
            if params.type != "email_change":
                raise
            message = _provider_msg(e) or EMAIL_UPDATED
            logger.info(f"Email change step accepted: {message}")
            return f"{params.next}?message={quote(message)}"
        if params.type == "email_change":
            return f"{params.next}?message={quote(EMAIL_UPDATED)}"
        return params.next

    def send_password_reset(self, email: str) -> None:
        try:
            self.supabase.auth.reset_password_for_email(email)
        except AuthError as e:
            raise provider_error(e)

    def update_password(self, password: str) -> None:
        try:
            self.supabase.auth.update_user({"password": password})
        except AuthError as e:
            raise provider_error(e)

    def send_sign_in_code(self, email: str, otp_disabled_message: Optional[str] = None) -> None:
        """Email a magic link / one-time code to an existing user"""
        try:
            self.supabase.auth.sign_in_with_otp({
                "email": email,
                "options": {"should_create_user": False},
            })
        except AuthError as e:
            if otp_disabled_message and getattr(e, "code", None) == "otp_disabled":
                raise HTTPException(status_code=400, detail=otp_disabled_message)
            raise provider_error(e)

    def verify_code(self, email: str, code: str) -> None:
        try:
            self.supabase.auth.verify_otp({
                "email": email,
                "token": code,
                "type": "email",
            })
        except AuthError as e:
            raise provider_error(e)

    def start_oauth(self, provider: str) -> str:
        """Begin the OAuth dance; returns the provider URL to redirect to"""
        try:
            response = self.supabase.auth.sign_in_with_oauth({
                "provider": provider,
                "options": {
                    "redirect_to": f"{settings.site_url}/auth/social/complete/{provider}",
                },
            })
        except AuthError as e:
            raise provider_error(e)
        return response.url

    def complete_oauth(self, code: str) -> None:
        try:
            self.supabase.auth.exchange_code_for_session({"auth_code": code})
        except AuthError as e:
            raise provider_error(e)
