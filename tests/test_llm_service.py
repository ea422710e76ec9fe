"""
Tests for the OpenAI wrapper (client mocked)
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from workflow_helper.errors import UpstreamServiceError
from workflow_helper.services.llm_service import LLMService

from tests.conftest import make_settings

OPENAI_URL = "https://api.openai.com/v1/chat/completions"


def completion(content, finish_reason="stop"):
    return SimpleNamespace(
        model="gpt-4.1-nano-2025-04-14",
        choices=[SimpleNamespace(message=SimpleNamespace(content=content), finish_reason=finish_reason)],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=30, total_tokens=42),
    )


def make_service(create):
    client = MagicMock()
    client.chat.completions.create = create
    return LLMService(make_settings(), client=client), client


@pytest.mark.asyncio
async def test_complete_returns_content_and_usage():
    service, client = make_service(AsyncMock(return_value=completion('["a", "b"]')))

    response = await service.complete("prompt text", temperature=0.5)

    assert response.content == '["a", "b"]'
    assert response.tokens_total == 42
    assert response.finish_reason == "stop"
    client.chat.completions.create.assert_awaited_once_with(
        model="gpt-4.1-nano-2025-04-14",
        messages=[{"role": "user", "content": "prompt text"}],
        temperature=0.5,
    )


@pytest.mark.asyncio
async def test_model_override():
    service, client = make_service(AsyncMock(return_value=completion("ok")))
    await service.complete("p", temperature=0.1, model="gpt-4o-mini")
    assert client.chat.completions.create.await_args.kwargs["model"] == "gpt-4o-mini"


@pytest.mark.asyncio
async def test_status_error_becomes_upstream_error():
    request = httpx.Request("POST", OPENAI_URL)
    response = httpx.Response(500, request=request, text="server exploded")
    error = openai.InternalServerError("server exploded", response=response, body=None)
    service, _ = make_service(AsyncMock(side_effect=error))

    with pytest.raises(UpstreamServiceError) as exc:
        await service.complete("p", temperature=0.5)

    assert "500" in exc.value.detail
    # The caller-facing message never carries the upstream body
    assert "exploded" not in exc.value.message


@pytest.mark.asyncio
async def test_connection_error_becomes_upstream_error():
    error = openai.APIConnectionError(request=httpx.Request("POST", OPENAI_URL))
    service, _ = make_service(AsyncMock(side_effect=error))

    with pytest.raises(UpstreamServiceError):
        await service.complete("p", temperature=0.5)


@pytest.mark.asyncio
async def test_timeout_becomes_upstream_error():
    error = openai.APITimeoutError(request=httpx.Request("POST", OPENAI_URL))
    service, _ = make_service(AsyncMock(side_effect=error))

    with pytest.raises(UpstreamServiceError) as exc:
        await service.complete("p", temperature=0.5)
    assert "timed out" in exc.value.detail


@pytest.mark.asyncio
async def test_empty_content_is_an_error():
    service, _ = make_service(AsyncMock(return_value=completion(None)))
    with pytest.raises(UpstreamServiceError, match="upstream service failed"):
        await service.complete("p", temperature=0.5)


@pytest.mark.asyncio
async def test_no_choices_is_an_error():
    empty = SimpleNamespace(model="m", choices=[], usage=None)
    service, _ = make_service(AsyncMock(return_value=empty))
    with pytest.raises(UpstreamServiceError):
        await service.complete("p", temperature=0.5)


def test_default_client_has_no_retries_and_a_timeout():
    service = LLMService(make_settings(http_timeout_seconds=12))
    assert service.client.max_retries == 0
    assert service.client.timeout == 12
