"""
Remote Generator
================
Thin async client for an OpenAI-compatible chat completion endpoint.

One request per call: a fixed system instruction plus the constructed
user prompt, a moderate sampling temperature, bearer auth. The client
returns the model's raw text and raises on anything else. It does not
retry and it does not fall back; that decision belongs to the
generation services.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from nebula.config import Settings, get_settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class GeneratorAPIError(Exception):
    """Non-2xx response, or a 2xx without usable content."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Generator API error {status_code}: {body}")


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class ChatCompletionClient:
    """Sends one system + user exchange and returns the reply text."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    async def complete(self, system_prompt: str, prompt: str) -> str:
        """POST the exchange and return ``choices[0].message.content``.

        Raises GeneratorAPIError on a non-2xx response or a body without
        content, and lets httpx transport errors (including timeouts)
        propagate unchanged. The whole request is bounded by
        openai_timeout_seconds; expiry raises asyncio.TimeoutError.
        """
        headers = {
            "Authorization": f"Bearer {self._settings.openai_api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self._settings.openai_model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": self._settings.openai_temperature,
        }

        async with httpx.AsyncClient(timeout=self._settings.openai_timeout_seconds) as client:
            response = await asyncio.wait_for(
                client.post(self._settings.openai_api_url, headers=headers, json=payload),
                timeout=self._settings.openai_timeout_seconds,
            )

        if response.status_code >= 400:
            raise GeneratorAPIError(response.status_code, response.text[:500])

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise GeneratorAPIError(response.status_code, response.text[:500]) from exc

        if not isinstance(content, str) or not content.strip():
            raise GeneratorAPIError(response.status_code, "empty completion content")

        logger.debug("Chat completion returned %d characters", len(content))
        return content
