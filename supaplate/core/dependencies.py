"""
Core dependencies for route protection and provider clients
"""

from fastapi import Depends, HTTPException, Request, status
from supabase import Client
from typing import Any, AsyncIterator, Dict
import httpx
import logging

from supaplate.config import settings
from supaplate.core.email import ResendMailer
from supaplate.database.supabase_client import (
    ServerClient,
    get_service_supabase,
    make_server_client,
)

logger = logging.getLogger(__name__)


def get_server_client(request: Request) -> ServerClient:
    """Supabase client bound to the request's session cookies."""
    return make_server_client(request)


def serialize_user(user) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "user_metadata": user.user_metadata or {},
        "app_metadata": user.app_metadata or {},
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def get_current_user(server: ServerClient = Depends(get_server_client)) -> Dict[str, Any]:
    """Require an authenticated session; 401 otherwise."""
    user = server.get_user()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return serialize_user(user)


def get_admin_client() -> Client:
    return get_service_supabase()


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
        yield client


def get_mailer() -> ResendMailer:
    return ResendMailer()
