"""
CAPTCHA token verification (Cloudflare Turnstile and hCaptcha).

Both providers answer with a JSON object whose `success` flag tells whether the
token is valid. A call that fails outright (network error, bad response) is
treated as an invalid token.
"""
import asyncio
import logging
from typing import Dict, Optional

import httpx

from supaplate.config import settings

logger = logging.getLogger(__name__)

TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"
HCAPTCHA_VERIFY_URL = "https://api.hcaptcha.com/siteverify"


class CaptchaVerifier:
    def __init__(
        self,
        http: httpx.AsyncClient,
        turnstile_secret: Optional[str] = None,
        hcaptcha_secret: Optional[str] = None,
    ) -> None:
        self.http = http
        self.turnstile_secret = turnstile_secret or settings.turnstile_secret_key or ""
        self.hcaptcha_secret = hcaptcha_secret or settings.hcaptcha_secret_key or ""

    async def verify_turnstile(self, token: str) -> bool:
        try:
            response = await self.http.post(
                TURNSTILE_VERIFY_URL,
                json={"secret": self.turnstile_secret, "response": token},
            )
            return bool(response.json().get("success"))
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Turnstile verification failed: {str(e)}")
            return False

    async def verify_hcaptcha(self, token: str) -> bool:
        try:
            response = await self.http.post(
                HCAPTCHA_VERIFY_URL,
                data={"secret": self.hcaptcha_secret, "response": token},
            )
            return bool(response.json().get("success"))
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"hCaptcha verification failed: {str(e)}")
            return False

    async def verify(self, turnstile_token: str, hcaptcha_token: str) -> Dict[str, bool]:
        """Check both tokens concurrently; keys are the form field names"""
        turnstile_ok, hcaptcha_ok = await asyncio.gather(
            self.verify_turnstile(turnstile_token),
            self.verify_hcaptcha(hcaptcha_token),
        )
        return {"turnstile": turnstile_ok, "hcaptcha": hcaptcha_ok}
