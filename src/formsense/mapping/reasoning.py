"""OpenAI-compatible reasoning client used for field mapping."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import openai

from formsense import logger
from formsense.exceptions import ServiceError
from formsense.mapping.prompts import mapping_response_format
from formsense.settings import build_httpx_client_kwargs
from formsense.typing.models import MappingResponse

if TYPE_CHECKING:
    from formsense.settings import Settings

_SERVICE_NAME = "openai-compatible"


class OpenAIReasoningClient:
    """Chat completion client returning the raw answer text."""

    def __init__(self, settings: Settings, *, structured_output: bool = True) -> None:
        """Initialize client.

        Args:
            settings (Settings): Runtime settings.
            structured_output (bool): Request a strict JSON schema response format.
        """
        self._settings = settings
        self._structured_output = structured_output

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        """Build one chat completion request payload.

        Args:
            prompt (str): Prompt text.

        Returns:
            dict[str, Any]: Request payload.
        """
        payload: dict[str, Any] = {
            "model": self._settings.openai_model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self._structured_output:
            payload["response_format"] = mapping_response_format(MappingResponse.model_json_schema())
        return payload

    async def complete(self, prompt: str) -> str:
        """Send the prompt and return the answer text.

        Args:
            prompt (str): Prompt text.

        Raises:
            ServiceError: If the endpoint is misconfigured, unreachable, times out or errors.

        Returns:
            str: Answer text, empty when the model returned no content.
        """
        if not self._settings.openai_base_url:
            raise ServiceError(message="OPENAI_BASE_URL is required for field mapping", service=_SERVICE_NAME)
        if not self._settings.openai_api_key:
            raise ServiceError(message="OPENAI_API_KEY is required for field mapping", service=_SERVICE_NAME)

        client_kwargs = build_httpx_client_kwargs(self._settings, target_url=self._settings.openai_base_url)
        limits = httpx.Limits(max_connections=self._settings.max_connections)

        async with httpx.AsyncClient(**client_kwargs, limits=limits) as http_client:
            openai_client = openai.AsyncOpenAI(
                api_key=self._settings.openai_api_key,
                base_url=self._settings.openai_base_url,
                http_client=http_client,
            )
            try:
                completion = await openai_client.chat.completions.create(**self._build_payload(prompt))
            except openai.APITimeoutError as exc:
                raise ServiceError(message="Chat completion request timed out", service=_SERVICE_NAME) from exc
            except openai.APIStatusError as exc:
                raise ServiceError(
                    message=f"Chat completion request failed with status {exc.status_code}",
                    service=_SERVICE_NAME,
                ) from exc
            except openai.APIError as exc:
                raise ServiceError(message=f"Chat completion request failed: {exc}", service=_SERVICE_NAME) from exc

        usage = completion.usage
        logger.info(
            "Reasoning call completed",
            extra={
                "model": self._settings.openai_model,
                "input_tokens": usage.prompt_tokens if usage else None,
                "output_tokens": usage.completion_tokens if usage else None,
            },
        )
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""
