from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from typing import Literal

SocialProvider = Literal["github", "kakao"]
ConfirmType = Literal["email", "recovery", "email_change"]

PASSWORD_TOO_SHORT = "Password must be at least 8 characters long"


def _valid_email(value: str) -> str:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Invalid email address")
    return value


def _long_enough(value: str) -> str:
    if len(value) < 8:
        raise ValueError(PASSWORD_TOO_SHORT)
    return value


class JoinRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    password: str
    confirm_password: str = Field(alias="confirmPassword")
    marketing: bool = False
    terms: bool = False

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("email")
    @classmethod
    def email_valid(cls, v: str) -> str:
        return _valid_email(v)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _long_enough(v)

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        _long_enough(v)
        if "password" in info.data and v != info.data["password"]:
            raise ValueError("Passwords must match")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def email_valid(cls, v: str) -> str:
        return _valid_email(v)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _long_enough(v)


class EmailRequest(BaseModel):
    email: EmailStr


class PasswordUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    password: str = Field(min_length=8)
    confirm_password: str = Field(alias="confirmPassword", min_length=8)

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        if "password" in info.data and v != info.data["password"]:
            raise ValueError("Passwords must match")
        return v


class OtpCompleteRequest(BaseModel):
    email: EmailStr
    code: str = Field(min_length=6, max_length=6)


class ConfirmParams(BaseModel):
    token_hash: str
    type: ConfirmType
    next: str = "/"


class SocialProviderParams(BaseModel):
    provider: SocialProvider


class SocialCompleteParams(BaseModel):
    code: str


class SocialErrorParams(BaseModel):
    error: str
    error_code: str
    error_description: str
