from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime
from starlette.datastructures import UploadFile

from supaplate.modules.auth.schemas import SocialProvider


class ProfileResponse(BaseModel):
    profile_id: str
    name: str
    avatar_url: Optional[str] = None
    marketing_consent: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AccountResponse(BaseModel):
    user: Dict[str, Any]
    identities: List[Dict[str, Any]]
    profile: Optional[ProfileResponse] = None


class EditProfileRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    name: str = Field(min_length=1)
    avatar: Any
    marketing_consent: bool = Field(default=False, alias="marketingConsent")

    @field_validator("avatar")
    @classmethod
    def avatar_is_file(cls, v: Any) -> UploadFile:
        if not isinstance(v, UploadFile):
            raise ValueError("Input not instance of File")
        return v


class ProviderRequest(BaseModel):
    provider: SocialProvider
