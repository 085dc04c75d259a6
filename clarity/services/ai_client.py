# services/ai_client.py
import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict

from clarity.core.config import settings

logger = logging.getLogger(__name__)


class AiTextResult(BaseModel):
    """Outcome of one text-generation call. `text` is only meaningful when `ok`."""
    model_config = ConfigDict(frozen=True)

    ok: bool
    text: str = ""
    error: Optional[str] = None

    @classmethod
    def success(cls, text: str) -> "AiTextResult":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, error: str) -> "AiTextResult":
        return cls(ok=False, error=error)


class GeminiClient:
    """
    Text generation through the Gemini `generateContent` REST endpoint.

    Every failure (missing key, network, HTTP status, API error object,
    empty answer) is returned as a failed `AiTextResult`; nothing raises.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.model_name = model_name.removeprefix("models/")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model_name}:generateContent"

    def generate_text(self, prompt: str) -> AiTextResult:
        if not self.api_key:
            return AiTextResult.failure("Gemini API key is not configured")

        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.post(
                    self.endpoint,
                    headers={"Content-Type": "application/json", "x-goog-api-key": self.api_key},
                    json=payload,
                )
        except httpx.HTTPError as exc:
            return AiTextResult.failure(f"Request failed: {exc.__class__.__name__}")

        try:
            data = resp.json()
        except ValueError:
            return AiTextResult.failure(f"Invalid response body (HTTP {resp.status_code})")

        if not isinstance(data, dict):
            return AiTextResult.failure("Unexpected response shape")

        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            return AiTextResult.failure(f"Coach error: {message or 'Unknown error'}")

        if resp.status_code != 200:
            return AiTextResult.failure(f"HTTP {resp.status_code}")

        text = self._first_candidate_text(data)
        if not text:
            return AiTextResult.failure("Empty response from model")
        return AiTextResult.success(text.strip())

    @staticmethod
    def _first_candidate_text(data: dict) -> Optional[str]:
        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None

    def generate_text_or_fallback(self, prompt: str, fallback: str) -> AiTextResult:
        """
        Generate text, substituting `fallback` on failure.

        The returned result keeps `ok=False` and the error when the fallback
        was used, so callers can flag the message.
        """
        result = self.generate_text(prompt)
        if result.ok:
            return result
        logger.warning("AI text generation failed, using fallback: %s", result.error)
        return AiTextResult(ok=False, text=fallback, error=result.error)


def get_ai_client() -> GeminiClient:
    """Client configured from settings (FastAPI dependency)."""
    return GeminiClient(
        api_key=settings.GEMINI_API_KEY,
        model_name=settings.GEMINI_MODEL_NAME,
        base_url=settings.GEMINI_BASE_URL,
        timeout=settings.AI_TIMEOUT_SECONDS,
    )
