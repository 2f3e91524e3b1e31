from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError
from supabase import Client
from typing import Dict

from supaplate.core.dependencies import get_admin_client, get_current_user, get_server_client
from supaplate.core.forms import FormValidationError, form_to_dict, validate_form
from supaplate.core.responses import redirect
from supaplate.database.supabase_client import ServerClient
from supaplate.modules.auth.schemas import EmailRequest, PasswordUpdateRequest
from supaplate.modules.auth.service import AuthService
from supaplate.modules.users.schemas import AccountResponse, EditProfileRequest, ProviderRequest
from supaplate.modules.users.service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(server: ServerClient = Depends(get_server_client)) -> UserService:
    return UserService(server.client)


def _provider_or_400(provider: str) -> str:
    try:
        return ProviderRequest(provider=provider).provider
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid provider")


@router.get("/me")
async def get_me(user: Dict = Depends(get_current_user)):
    """Get the signed-in user"""
    return user


@router.get("/account", response_model=AccountResponse)
async def get_account(
    user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Account page data: user, linked identities and profile"""
    return await service.get_account(user)


@router.post("/api/edit-profile")
async def edit_profile(
    request: Request,
    user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    profile_data = validate_form(EditProfileRequest, form_to_dict(await request.form()))
    await service.edit_profile(user["id"], profile_data)
    return {"success": True}


@router.post("/api/change-email")
async def change_email(
    request: Request,
    user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    try:
        email_data = validate_form(EmailRequest, form_to_dict(await request.form()))
    except FormValidationError:
        raise HTTPException(status_code=400, detail="Invalid email")
    service.change_email(email_data.email)
    return {"success": True}


@router.post("/api/change-password")
async def change_password(
    request: Request,
    user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    password_data = validate_form(PasswordUpdateRequest, form_to_dict(await request.form()))
    service.change_password(password_data.password)
    return {"success": True}


@router.post("/api/connect-provider")
async def connect_provider(
    request: Request,
    user: Dict = Depends(get_current_user),
    server: ServerClient = Depends(get_server_client),
    service: UserService = Depends(get_user_service)
):
    """Redirect to the provider to link another sign-in method"""
    form = form_to_dict(await request.form())
    provider = _provider_or_400(form.get("provider", ""))
    return redirect(service.connect_provider(provider), server)


@router.delete("/api/disconnect-provider/{provider}")
async def disconnect_provider(
    provider: str,
    user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    service.disconnect_provider(_provider_or_400(provider))
    return {"success": True}


@router.delete("/api/delete-account")
async def delete_account(
    user: Dict = Depends(get_current_user),
    server: ServerClient = Depends(get_server_client),
    service: UserService = Depends(get_user_service),
    admin: Client = Depends(get_admin_client)
):
    """Delete the account and everything that cascades from it"""
    service.delete_account(user["id"], admin)
    AuthService(server.client).logout()
    return redirect("/", server)
