"""
User interface preferences kept in cookies: language and colour theme.

Nothing is stored server side. The locale cookie picks the translation
bundle; the theme cookie is readable by scripts so the page can apply it
before first paint.
"""
from fastapi import Response
from typing import Optional

from supaplate.config import settings

LOCALE_COOKIE = "locale"
THEME_COOKIE = "theme"
PREFERENCE_MAX_AGE = 365 * 24 * 60 * 60


def is_supported_locale(locale: Optional[str]) -> bool:
    return bool(locale) and locale in settings.get_supported_locales()


def locale_from_accept_language(header: Optional[str]) -> Optional[str]:
    """First supported language in an Accept-Language header, by quality."""
    if not header:
        return None
    candidates = []
    for position, part in enumerate(header.split(",")):
        pieces = part.strip().split(";")
        tag = pieces[0].strip().lower()
        quality = 1.0
        for param in pieces[1:]:
            name, _, value = param.strip().partition("=")
            if name == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        if tag and quality > 0:
            candidates.append((-quality, position, tag))
    for _, _, tag in sorted(candidates):
        language = tag.split("-")[0]
        if is_supported_locale(language):
            return language
    return None


def resolve_locale(cookie_value: Optional[str], accept_language: Optional[str]) -> str:
    if is_supported_locale(cookie_value):
        return cookie_value
    return locale_from_accept_language(accept_language) or settings.fallback_locale


def resolve_theme(cookie_value: Optional[str]) -> str:
    if cookie_value in ("light", "dark"):
        return cookie_value
    return settings.default_theme


def set_locale_cookie(response: Response, locale: str) -> Response:
    response.set_cookie(
        LOCALE_COOKIE,
        locale,
        max_age=PREFERENCE_MAX_AGE,
        path="/",
        samesite="lax",
        secure=settings.is_production,
    )
    return response


def set_theme_cookie(response: Response, theme: Optional[str]) -> Response:
    if theme is None:
        response.delete_cookie(THEME_COOKIE, path="/")
        return response
    response.set_cookie(
        THEME_COOKIE,
        theme,
        max_age=PREFERENCE_MAX_AGE,
        path="/",
        httponly=False,
        samesite="lax",
        secure=settings.is_production,
    )
    return response
