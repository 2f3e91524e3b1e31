from pydantic import BaseModel, EmailStr, Field


class ContactRequest(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    message: str = Field(min_length=1)
    hcaptcha: str = Field(min_length=1)
    turnstile: str = Field(min_length=1)
