"""Thin wrapper around the Mistral Python SDK.

One ``MistralService`` is built at startup and handed to every component
that talks to the chat API. Failures surface as ``BackendRequestError``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
import mistralai

from verboten.config import Settings
from verboten.errors import BackendRequestError, ConfigurationError

logger = logging.getLogger(__name__)


class MistralService:
    def __init__(
        self,
        api_key: str,
        *,
        default_model: str = "mistral-small-latest",
        timeout: float = 30.0,
        client: Any = None,
    ) -> None:
        if client is None and not api_key:
            raise ConfigurationError("MISTRAL_API_KEY is not set")
        self._client = client or mistralai.Mistral(api_key=api_key, timeout_ms=int(timeout * 1000))
        self.default_model = default_model

    @classmethod
    def from_settings(cls, settings: Settings) -> MistralService:
        return cls(
            settings.mistral_api_key,
            default_model=settings.mistral_small_model,
            timeout=settings.request_timeout,
        )

    async def chat_completion(
        self,
        messages: list[dict[str, str]],
        *,
        model: str | None = None,
        response_format: dict[str, Any] | None = None,
        temperature: float = 0.3,
        max_tokens: int = 1024,
    ) -> str:
        """Run a chat completion and return the assistant text."""
        kwargs: dict[str, Any] = {
            "model": model or self.default_model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format:
            kwargs["response_format"] = response_format

        try:
            response = await self._client.chat.complete_async(**kwargs)
        except mistralai.models.MistralError as e:
            logger.warning("Mistral chat completion failed: %s", e)
            raise BackendRequestError(f"chat completion failed: {e}") from e
        except httpx.RequestError as e:
            logger.warning("Mistral request error: %s", e)
            raise BackendRequestError(f"chat completion request error: {e}") from e

        if response is None or not response.choices:
            raise BackendRequestError("empty response from model")
        text = _text_of(response.choices[0].message.content)
        if not text:
            raise BackendRequestError("empty response from model")
        return text

    async def close(self) -> None:
        aexit = getattr(self._client, "__aexit__", None)
        if aexit is not None:
            await aexit(None, None, None)


def _text_of(content: Any) -> str:
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for chunk in content:
        if getattr(chunk, "type", None) == "text":
            parts.append(chunk.text)
    return "".join(parts)
