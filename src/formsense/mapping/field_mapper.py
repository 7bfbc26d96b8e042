"""AI-assisted field mapping."""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from formsense.async_runner import run_async
from formsense.exceptions import ServiceError
from formsense.logging import get_logger
from formsense.mapping.prompts import PROMPT_OVERHEAD_CHARS, build_mapping_prompt, strip_code_fences
from formsense.mapping.reasoning import OpenAIReasoningClient
from formsense.mapping.review import DEFAULT_REVIEW_THRESHOLD, build_mapping
from formsense.typing.models import MappingResponse

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from formsense.settings import Settings
    from formsense.typing.models import Field, FieldMapping
    from formsense.typing.protocol import ReasoningClient

logger = get_logger(__name__)

DEFAULT_MAX_PROMPT_CHARS = 12_000
DEFAULT_REASONING_TIMEOUT = 60.0


def parse_mapping_response(text: str) -> MappingResponse | None:
    """Parse the reasoning service answer.

    Markdown code fences around the JSON are tolerated.

    Args:
        text (str): Raw answer text.

    Returns:
        MappingResponse | None: Parsed response, or None when the answer is unusable.
    """
    try:
        payload = json.loads(strip_code_fences(text))
        return MappingResponse.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Unparsable mapping response", extra={"error": str(exc)})
        return None


class FieldMapper:
    """Propose field values with a reasoning service."""

    def __init__(
        self,
        client: ReasoningClient,
        *,
        review_threshold: float = DEFAULT_REVIEW_THRESHOLD,
        max_prompt_chars: int = DEFAULT_MAX_PROMPT_CHARS,
        timeout: float = DEFAULT_REASONING_TIMEOUT,
    ) -> None:
        """Initialize mapper.

        Args:
            client (ReasoningClient): Reasoning service.
            review_threshold (float): Confidence below which review is forced.
            max_prompt_chars (int): Prompt length bound.
            timeout (float): Seconds to wait for the reasoning service.

        Raises:
            ValueError: If `max_prompt_chars` cannot hold the prompt instructions.
        """
        if max_prompt_chars < PROMPT_OVERHEAD_CHARS:
            msg = f"max_prompt_chars must be at least {PROMPT_OVERHEAD_CHARS}"
            raise ValueError(msg)
        self._client = client
        self._review_threshold = review_threshold
        self._max_prompt_chars = max_prompt_chars
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings, client: ReasoningClient | None = None) -> FieldMapper:
        """Build a mapper from settings, defaulting to the OpenAI-compatible client."""
        return cls(
            client or OpenAIReasoningClient(settings),
            review_threshold=settings.manual_review_threshold,
            max_prompt_chars=settings.max_prompt_chars,
            timeout=settings.reasoning_timeout,
        )

    async def amap_fields(
        self,
        fields: Sequence[Field],
        candidate_data: Mapping[str, Any],
    ) -> list[FieldMapping]:
        """Ask the reasoning service for field values.

        Suggestions for unknown field ids are dropped. An unparsable answer
        yields no mappings.

        Args:
            fields (Sequence[Field]): Fields to fill.
            candidate_data (Mapping[str, Any]): Candidate values.

        Raises:
            ServiceError: If the service times out, is unreachable or fails.

        Returns:
            list[FieldMapping]: Mappings in response order.
        """
        prompt = build_mapping_prompt(fields, candidate_data, max_chars=self._max_prompt_chars)
        try:
            answer = await asyncio.wait_for(self._client.complete(prompt), timeout=self._timeout)
        except TimeoutError as exc:
            raise ServiceError(message=f"Reasoning service timed out after {self._timeout}s") from exc
        except ServiceError:
            raise
        except Exception as exc:
            raise ServiceError(message=f"Reasoning service call failed: {exc}") from exc

        response = parse_mapping_response(answer)
        if response is None:
            return []

        by_id = {field.id: field for field in fields}
        mappings: list[FieldMapping] = []
        for suggestion in response.mappings:
            field = by_id.get(suggestion.field_id)
            if field is None:
                logger.debug("Dropping suggestion for unknown field", extra={"field_id": suggestion.field_id})
                continue
            mappings.append(
                build_mapping(
                    field_id=field.id,
                    field_name=field.name,
                    suggested_value=suggestion.suggested_value or "",
                    confidence=suggestion.confidence,
                    flagged=suggestion.requires_manual_review,
                    threshold=self._review_threshold,
                    source_document=suggestion.source_field,
                ),
            )
        logger.info("Fields mapped", extra={"fields": len(fields), "mappings": len(mappings)})
        return mappings

    def map_fields(self, fields: Sequence[Field], candidate_data: Mapping[str, Any]) -> list[FieldMapping]:
        """Sync wrapper for `amap_fields`."""
        return run_async(self.amap_fields(fields, candidate_data))
