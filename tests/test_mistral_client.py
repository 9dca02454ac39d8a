from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from mistralai import models

from verboten.errors import BackendRequestError, ConfigurationError
from verboten.services.mistral_client import MistralService


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def client():
    client = MagicMock()
    client.chat.complete_async = AsyncMock(return_value=completion("Rope"))
    return client


@pytest.fixture
def service(client):
    return MistralService("", default_model="mistral-small-latest", client=client)


def test_missing_key_without_client():
    with pytest.raises(ConfigurationError, match="MISTRAL_API_KEY"):
        MistralService("")


@pytest.mark.asyncio
async def test_returns_assistant_text(service, client):
    text = await service.chat_completion([{"role": "user", "content": "hi"}], temperature=0.0, max_tokens=8)

    assert text == "Rope"
    kwargs = client.chat.complete_async.await_args.kwargs
    assert kwargs["model"] == "mistral-small-latest"
    assert kwargs["temperature"] == 0.0
    assert kwargs["max_tokens"] == 8
    assert "response_format" not in kwargs


@pytest.mark.asyncio
async def test_response_format_and_model_override(service, client):
    fmt = {"type": "json_object"}
    await service.chat_completion([], model="mistral-large-latest", response_format=fmt)

    kwargs = client.chat.complete_async.await_args.kwargs
    assert kwargs["model"] == "mistral-large-latest"
    assert kwargs["response_format"] == fmt


@pytest.mark.asyncio
async def test_text_chunks_are_joined(service, client):
    client.chat.complete_async.return_value = completion(
        [SimpleNamespace(type="text", text="Ro"), SimpleNamespace(type="image_url"), SimpleNamespace(type="text", text="pe")]
    )
    assert await service.chat_completion([]) == "Rope"


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [None, SimpleNamespace(choices=[]), completion(""), completion(None)])
async def test_empty_response(service, client, response):
    client.chat.complete_async.return_value = response
    with pytest.raises(BackendRequestError, match="empty response"):
        await service.chat_completion([])


@pytest.mark.asyncio
async def test_network_error_is_wrapped(service, client):
    client.chat.complete_async.side_effect = httpx.ConnectError("connection refused")
    with pytest.raises(BackendRequestError, match="connection refused"):
        await service.chat_completion([])


@pytest.mark.asyncio
async def test_sdk_error_is_wrapped(service, client):
    request = httpx.Request("POST", "https://api.mistral.ai/v1/chat/completions")
    response = httpx.Response(422, request=request, text='{"detail": "bad"}')
    client.chat.complete_async.side_effect = models.MistralError("unprocessable request", response)

    with pytest.raises(BackendRequestError, match="chat completion failed") as exc:
        await service.chat_completion([])
    assert isinstance(exc.value.__cause__, models.MistralError)
