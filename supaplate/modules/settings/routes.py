from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from typing import Optional

from supaplate.modules.settings.schemas import PreferencesResponse, ThemeRequest
from supaplate.modules.settings.service import (
    LOCALE_COOKIE, THEME_COOKIE, is_supported_locale, resolve_locale,
    resolve_theme, set_locale_cookie, set_theme_cookie
)

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.post("/locale")
async def set_locale(locale: Optional[str] = None):
    """Persist the interface language in a cookie"""
    if not is_supported_locale(locale):
        raise HTTPException(status_code=400, detail="Invalid locale")
    return set_locale_cookie(JSONResponse({"success": True}), locale)


@router.post("/theme")
async def set_theme(request: Request):
    """Persist the colour theme in a cookie; null clears it"""
    try:
        theme_data = ThemeRequest.model_validate(await request.json())
    except (ValidationError, ValueError):
        raise HTTPException(status_code=400, detail="Invalid theme")
    return set_theme_cookie(JSONResponse({"success": True}), theme_data.theme)


@router.get("", response_model=PreferencesResponse)
async def get_preferences(request: Request):
    return PreferencesResponse(
        locale=resolve_locale(
            request.cookies.get(LOCALE_COOKIE),
            request.headers.get("accept-language"),
        ),
        theme=resolve_theme(request.cookies.get(THEME_COOKIE)),
    )
