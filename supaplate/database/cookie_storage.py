"""
Cookie-backed auth storage for the Supabase client.

The Supabase auth client persists its session (and the PKCE code verifier used
by the OAuth flow) through a storage object with get_item/set_item/remove_item.
On the server that storage is the request's cookies: reads come from the
incoming Cookie header, writes are collected and copied onto the outgoing
response as Set-Cookie headers.

Values are base64url encoded and split into numbered chunks (`name.0`,
`name.1`, ...) when they do not fit in a single cookie.
"""
import base64
import logging
from typing import Dict, List, Optional, Tuple

from fastapi import Response

from supaplate.config import settings

logger = logging.getLogger(__name__)

MAX_CHUNK_SIZE = 3180
BASE64_PREFIX = "base64-"
COOKIE_MAX_AGE = 400 * 24 * 60 * 60


def cookie_name_for(key: str) -> str:
    """Storage keys contain dots, which collide with the chunk suffix."""
    return key.replace(".", "-")


def encode_value(value: str) -> str:
    encoded = base64.urlsafe_b64encode(value.encode("utf-8")).decode("ascii").rstrip("=")
    return BASE64_PREFIX + encoded


def decode_value(value: str) -> str:
    if not value.startswith(BASE64_PREFIX):
        return value
    raw = value[len(BASE64_PREFIX):]
    padding = "=" * (-len(raw) % 4)
    return base64.urlsafe_b64decode(raw + padding).decode("utf-8")


def chunk_value(value: str, size: int = MAX_CHUNK_SIZE) -> List[str]:
    return [value[i:i + size] for i in range(0, len(value), size)] or [""]


class CookieStorage:
    """Auth storage that reads request cookies and records cookie writes."""

    def __init__(self, request_cookies: Dict[str, str]):
        self._cookies: Dict[str, str] = dict(request_cookies)
        self._pending: Dict[str, Optional[str]] = {}

    # --- storage protocol used by the Supabase auth client ---

    def get_item(self, key: str) -> Optional[str]:
        name = cookie_name_for(key)
        if name in self._cookies:
            return self._decode(self._cookies[name])
        chunks = []
        index = 0
        while f"{name}.{index}" in self._cookies:
            chunks.append(self._cookies[f"{name}.{index}"])
            index += 1
        if not chunks:
            return None
        return self._decode("".join(chunks))

    def set_item(self, key: str, value: str) -> None:
        name = cookie_name_for(key)
        stale = set(self._names_for(name))
        chunks = chunk_value(encode_value(value))
        if len(chunks) == 1:
            self._write(name, chunks[0])
            stale.discard(name)
        else:
            for index, chunk in enumerate(chunks):
                chunk_name = f"{name}.{index}"
                self._write(chunk_name, chunk)
                stale.discard(chunk_name)
        for old in stale:
            self._delete(old)

    def remove_item(self, key: str) -> None:
        for name in self._names_for(cookie_name_for(key)):
            self._delete(name)

    # --- response side ---

    @property
    def pending(self) -> List[Tuple[str, Optional[str]]]:
        """Cookie writes in order; a value of None is a deletion."""
        return list(self._pending.items())

    def apply(self, response: Response) -> Response:
        for name, value in self._pending.items():
            if value is None:
                response.delete_cookie(name, path="/")
            else:
                response.set_cookie(
                    name,
                    value,
                    max_age=COOKIE_MAX_AGE,
                    path="/",
                    httponly=True,
                    secure=settings.is_production,
                    samesite="lax",
                )
        return response

    # --- helpers ---

    def _names_for(self, name: str) -> List[str]:
        return [c for c in self._cookies if c == name or c.startswith(f"{name}.")]

    def _write(self, name: str, value: str) -> None:
        self._cookies[name] = value
        self._pending[name] = value

    def _delete(self, name: str) -> None:
        self._cookies.pop(name, None)
        self._pending[name] = None

    @staticmethod
    def _decode(value: str) -> Optional[str]:
        try:
            return decode_value(value)
        except (ValueError, UnicodeDecodeError):
            logger.warning("Discarding undecodable auth cookie")
            return None
