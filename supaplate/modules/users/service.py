import asyncio
import logging
from supabase import AuthError, Client, PostgrestAPIError
from fastapi import HTTPException, UploadFile
from typing import Any, Dict, List, Optional

from supaplate.config import settings
from supaplate.modules.auth.service import provider_error
from supaplate.modules.users.avatar_storage import get_avatar_storage, is_acceptable_avatar
from supaplate.modules.users.schemas import EditProfileRequest

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get the user's profile row, or None if the trigger has not created it"""
        result = self.supabase.table("profiles")\
            .select("*")\
            .eq("profile_id", user_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def get_identities(self) -> List[Dict[str, Any]]:
        try:
            response = self.supabase.auth.get_user_identities()
        except AuthError as e:
            raise provider_error(e)
        return [identity.model_dump(mode="json") for identity in response.identities]

    async def get_account(self, user: Dict[str, Any]) -> Dict[str, Any]:
        """User, linked identities and profile; the two lookups run concurrently"""
        identities, profile = await asyncio.gather(
            asyncio.to_thread(self.get_identities),
            asyncio.to_thread(self.get_profile, user["id"]),
        )
        return {"user": user, "identities": identities, "profile": profile}

    async def edit_profile(self, user_id: str, profile_data: EditProfileRequest) -> None:
        """Update name, marketing consent and (when acceptable) the avatar"""
        avatar: UploadFile = profile_data.avatar
        avatar_url = None
        if is_acceptable_avatar(avatar.size or 0, avatar.content_type):
            content = await avatar.read()
            storage = get_avatar_storage(self.supabase)
            avatar_url = storage.upload(user_id, content, avatar.content_type)
        else:
            logger.info(f"Keeping existing avatar for {user_id}")

        profile_update = {
            "name": profile_data.name,
            "marketing_consent": profile_data.marketing_consent,
        }
        metadata = {
            "name": profile_data.name,
            "display_name": profile_data.name,
            "marketing_consent": profile_data.marketing_consent,
        }
        if avatar_url:
            profile_update["avatar_url"] = avatar_url
            metadata["avatar_url"] = avatar_url

        auth_error = None
        try:
            self.supabase.auth.update_user({"data": metadata})
        except AuthError as e:
            auth_error = e

        profile_error = None
        try:
            self.supabase.table("profiles")\
                .update(profile_update)\
                .eq("profile_id", user_id)\
                .execute()
        except PostgrestAPIError as e:
            profile_error = e

        if auth_error:
            raise provider_error(auth_error)
        if profile_error:
            logger.error(f"Failed to update profile {user_id}: {profile_error.message}")
            raise HTTPException(status_code=400, detail=profile_error.message)

    def change_email(self, email: str) -> None:
        """Start the provider's dual (old and new address) email verification"""
        try:
            self.supabase.auth.update_user({"email": email})
        except AuthError as e:
            raise provider_error(e)

    def change_password(self, password: str) -> None:
        try:
            self.supabase.auth.update_user({"password": password})
        except AuthError as e:
            raise provider_error(e)

    def connect_provider(self, provider: str) -> str:
        """Link an OAuth identity to the current user; returns the provider URL"""
        try:
            response = self.supabase.auth.link_identity({
                "provider": provider,
                "options": {"redirect_to": f"{settings.site_url}/auth/connect"},
            })
        except AuthError as e:
            raise provider_error(e)
        return response.url

    def disconnect_provider(self, provider: str) -> None:
        try:
            response = self.supabase.auth.get_user_identities()
        except AuthError as e:
            raise provider_error(e)

        identity = next((i for i in response.identities if i.provider == provider), None)
        if identity is None:
            raise HTTPException(status_code=400, detail="Identity not found")

        try:
            self.supabase.auth.unlink_identity(identity)
        except AuthError as e:
            raise provider_error(e)

    def delete_account(self, user_id: str, admin: Client) -> None:
        """Delete the auth user (profile cascades), then best-effort avatar cleanup"""
        try:
            admin.auth.admin.delete_user(user_id)
        except AuthError as e:
            raise provider_error(e, status_code=500)

        if not get_avatar_storage(admin).delete(user_id):
            logger.warning(f"Avatar for deleted user {user_id} was not removed")
