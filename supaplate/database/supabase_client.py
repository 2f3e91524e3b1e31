import logging
from typing import Optional

from fastapi import Request, Response
from supabase import AuthError, Client, ClientOptions, create_client

from supaplate.config import settings
from supaplate.database.cookie_storage import CookieStorage

logger = logging.getLogger(__name__)


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_anon_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Use for admin calls and the mail queue."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()


class ServerClient:
    """A request-scoped Supabase client whose auth session lives in cookies."""

    def __init__(self, client: Client, cookies: CookieStorage):
        self.client = client
        self.cookies = cookies

    def get_user(self):
        """Return the session's user, or None when there is no valid session."""
        try:
            response = self.client.auth.get_user()
        except AuthError as e:
            logger.debug("No authenticated user: %s", e)
            return None
        if not response:
            return None
        return response.user

    def apply_cookies(self, response: Response) -> Response:
        return self.cookies.apply(response)


def make_server_client(request: Request) -> ServerClient:
    cookies = CookieStorage(request.cookies)
    client = create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
        options=ClientOptions(
            storage=cookies,
            flow_type="pkce",
            auto_refresh_token=False,
            persist_session=True,
        ),
    )
    return ServerClient(client, cookies)


def get_service_supabase() -> Optional[Client]:
    return SupabaseClient.get_service_client()
