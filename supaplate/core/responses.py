from typing import Optional

from fastapi.responses import RedirectResponse

from supaplate.database.supabase_client import ServerClient


def redirect(url: str, server: Optional[ServerClient] = None, status_code: int = 303) -> RedirectResponse:
    """Redirect, carrying any auth cookies the provider asked us to set."""
    response = RedirectResponse(url=url, status_code=status_code)
    if server is not None:
        server.apply_cookies(response)
    return response
