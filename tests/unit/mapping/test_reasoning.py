from __future__ import annotations

import asyncio

import httpx
import openai
import pytest

from formsense.exceptions import ServiceError
from formsense.mapping.reasoning import OpenAIReasoningClient
from formsense.settings import Settings


def _settings() -> Settings:
    return Settings(OPENAI_BASE_URL="https://llm.example.test/v1", OPENAI_API_KEY="sk-test", OPENAI_MODEL="m")


def _patch_completion(mocker, *, content: str | None = None, error: Exception | None = None):
    completion = mocker.Mock()
    completion.usage = mocker.Mock(prompt_tokens=12, completion_tokens=3)
    completion.choices = [mocker.Mock(message=mocker.Mock(content=content))]

    create = mocker.AsyncMock(return_value=completion, side_effect=error)
    client = mocker.Mock()
    client.chat.completions.create = create
    mocker.patch("formsense.mapping.reasoning.openai.AsyncOpenAI", return_value=client)
    return create


def test_complete_returns_message_content(mocker) -> None:
    create = _patch_completion(mocker, content='{"mappings": []}')

    answer = asyncio.run(OpenAIReasoningClient(_settings()).complete("prompt"))

    assert answer == '{"mappings": []}'
    payload = create.await_args.kwargs
    assert payload["model"] == "m"
    assert payload["messages"] == [{"role": "user", "content": "prompt"}]
    assert payload["response_format"]["json_schema"]["strict"] is True


def test_complete_without_structured_output(mocker) -> None:
    create = _patch_completion(mocker, content=None)

    answer = asyncio.run(OpenAIReasoningClient(_settings(), structured_output=False).complete("prompt"))

    assert answer == ""
    assert "response_format" not in create.await_args.kwargs


def test_complete_requires_endpoint() -> None:
    with pytest.raises(ServiceError, match="OPENAI_BASE_URL"):
        asyncio.run(OpenAIReasoningClient(Settings(OPENAI_API_KEY="sk-test")).complete("prompt"))


def test_complete_maps_timeout_to_service_error(mocker) -> None:
    request = httpx.Request("POST", "https://llm.example.test/v1/chat/completions")
    _patch_completion(mocker, error=openai.APITimeoutError(request=request))

    with pytest.raises(ServiceError, match="timed out"):
        asyncio.run(OpenAIReasoningClient(_settings()).complete("prompt"))


def test_complete_maps_status_error_to_service_error(mocker) -> None:
    request = httpx.Request("POST", "https://llm.example.test/v1/chat/completions")
    response = httpx.Response(503, request=request)
    _patch_completion(mocker, error=openai.APIStatusError("unavailable", response=response, body=None))

    with pytest.raises(ServiceError, match="503"):
        asyncio.run(OpenAIReasoningClient(_settings()).complete("prompt"))
