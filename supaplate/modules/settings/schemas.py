from pydantic import BaseModel
from typing import Literal, Optional

Theme = Literal["light", "dark"]


class ThemeRequest(BaseModel):
    theme: Optional[Theme] = None


class PreferencesResponse(BaseModel):
    locale: str
    theme: Theme
