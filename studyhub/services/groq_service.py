"""
Async client for Groq chat completions (OpenAI-compatible API).

Course outlines and quizzes are requested in JSON mode; module notes and the
teacher-mode student replies are plain text.
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from studyhub.config import settings

logger = logging.getLogger(__name__)

GROQ_CHAT_URL = "https://api.groq.com/openai/v1/chat/completions"

# Extra context appended to HTTP error messages
_STATUS_HINTS = {
    401: "invalid API key",
    429: "rate limit exceeded",
}

_groq_service_instance = None


def get_groq_service() -> 'GroqService':
    """Shared GroqService, created on first use."""
    global _groq_service_instance

    if _groq_service_instance is None:
        _groq_service_instance = GroqService()
        logger.info(f"🤖 GroqService ready (model: {_groq_service_instance.model})")

    return _groq_service_instance


class GroqAPIError(ValueError):
    """Groq request failed. ``code`` carries Groq's error code when present."""

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


def _error_from_response(response: httpx.Response) -> GroqAPIError:
    status = response.status_code
    hint = _STATUS_HINTS.get(status) or ("server error" if status >= 500 else None)
    message = f"Groq API HTTP {status}" + (f" ({hint})" if hint else "")

    code = None
    try:
        error = response.json().get("error") or {}
        code = error.get("code")
        message += f": {error.get('message', '')}"
    except (ValueError, AttributeError):
        message += f": {response.text[:200]}"

    return GroqAPIError(message, status_code=status, code=code)


class GroqService:
    def __init__(self):
        if not settings.groq_api_key:
            raise ValueError("GROQ_API_KEY is not configured. Please set it in your .env file.")

        self.api_key = settings.groq_api_key
        self.model = settings.groq_model
        self.timeout = settings.groq_timeout

    async def generate_text(
        self,
        prompt: str,
        system_prompt: str = "",
        temperature: float = 0.7,
        max_tokens: int = 2000,
        history: Optional[List[Dict[str, str]]] = None,
    ) -> str:
        """
        Plain-text completion.

        ``history`` holds earlier ``{"role", "content"}`` turns; they are sent
        between the system prompt and ``prompt``.

        Raises:
            GroqAPIError: If the request fails or returns no choices
        """
        return await self._complete({
            "model": self.model,
            "messages": self._build_messages(prompt, system_prompt, history),
            "temperature": temperature,
            "max_tokens": max_tokens,
        })

    async def generate_json(
        self,
        prompt: str,
        system_prompt: str = "",
        temperature: float = 0.2,
        max_tokens: int = 4000,
    ) -> Dict[str, Any]:
        """
        JSON-mode completion, decoded into a dict.

        Groq validates JSON-mode output itself; a generation that is not valid
        JSON comes back as HTTP 400 with code ``json_validate_failed``.

        Raises:
            GroqAPIError: If the request fails or the body is not a JSON object
        """
        content = await self._complete({
            "model": self.model,
            "messages": self._build_messages(prompt, system_prompt),
            "temperature": temperature,
            "max_tokens": max_tokens,
            "response_format": {"type": "json_object"},
        })

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            raise GroqAPIError(f"Groq returned invalid JSON: {e}", code="json_decode_failed") from e

        if not isinstance(parsed, dict):
            raise GroqAPIError("Groq returned JSON that is not an object", code="json_decode_failed")
        return parsed

    @staticmethod
    def _build_messages(
        prompt: str,
        system_prompt: str,
        history: Optional[List[Dict[str, str]]] = None,
    ) -> List[Dict[str, str]]:
        system = [{"role": "system", "content": system_prompt}] if system_prompt else []
        turns = [{"role": m["role"], "content": m["content"]} for m in history or []]
        return system + turns + [{"role": "user", "content": prompt}]

    async def _complete(self, payload: Dict[str, Any]) -> str:
        request_start = time.time()
        logger.info(f"🤖 Groq request ({self.model}, max_tokens={payload['max_tokens']})")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    GROQ_CHAT_URL,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as e:
            error = _error_from_response(e.response)
            logger.error(f"❌ {error}")
            raise error from e
        except httpx.TimeoutException as e:
            logger.error(f"❌ Groq request timed out after {self.timeout}s")
            raise GroqAPIError(f"Groq API request timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            logger.error(f"❌ Groq request failed: {e}")
            raise GroqAPIError(f"Groq API request failed: {e}") from e

        choices = body.get("choices") or []
        if not choices:
            raise GroqAPIError("No choices returned from Groq API")

        content = choices[0]["message"]["content"]
        usage = body.get("usage") or {}
        logger.info(
            f"✅ Groq response: {len(content)} chars, {usage.get('total_tokens', '?')} tokens "
            f"in {time.time() - request_start:.2f}s"
        )
        return content
