import asyncio
import json
import logging
from typing import Any, Optional

from google import genai

from supaplate.config import settings

logger = logging.getLogger(__name__)


class PhraseGenerationError(Exception):
    """The model call failed or did not return parseable JSON."""


class GeminiClient:
    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key or settings.gemini_api_key
        self.model = model or settings.gemini_model
        self._client = None

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise PhraseGenerationError("GEMINI_API_KEY is not configured")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def _generate(self, prompt: str) -> str:
        response = self.client.models.generate_content(
            model=self.model,
            contents=prompt,
            config={"response_mime_type": "application/json"},
        )
        return response.text or ""

    async def generate_json(self, prompt: str) -> Any:
        """One JSON-mode completion; the parsed JSON is returned as is"""
        try:
            text = await asyncio.to_thread(self._generate, prompt)
        except PhraseGenerationError:
            raise
        except Exception as e:
            logger.error(f"Gemini request failed: {str(e)}")
            raise PhraseGenerationError(str(e)) from e

        logger.debug(f"Gemini raw response: {text}")
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Gemini returned invalid JSON: {str(e)}")
            raise PhraseGenerationError("Invalid JSON from model") from e
