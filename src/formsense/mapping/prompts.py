"""Prompt builders and response schema helpers for field mapping."""

from __future__ import annotations

import json
import re
from copy import deepcopy
from typing import TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from formsense.typing.models import Field

TRUNCATION_MARKER = "\n... (truncated)"

_CODE_FENCE = re.compile(r"```(?:json)?\s*\n?")

_PROMPT_TEMPLATE = """You are a form-filling assistant. Given the following form fields and candidate data, \
suggest the best value for each field.

FORM FIELDS:
{fields}

CANDIDATE DATA:
{candidates}

For each field, provide:
1. The field ID
2. Suggested value (or null if no good match)
3. Confidence score (0-1)
4. Whether manual review is required
5. Source of the value (if applicable)

Respond ONLY with valid JSON in this exact format:
{{
  "mappings": [
    {{
      "fieldId": "string",
      "suggestedValue": "string or null",
      "confidence": number,
      "requiresManualReview": boolean,
      "sourceField": "string or null"
    }}
  ]
}}"""

PROMPT_OVERHEAD_CHARS = len(_PROMPT_TEMPLATE.format(fields="", candidates=""))


def sanitize_json_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """Sanitize a JSON schema to maximize strict compatibility.

    Args:
        schema (dict[str, Any]): Raw JSON schema.

    Returns:
        dict[str, Any]: Sanitized JSON schema.
    """
    cleaned = deepcopy(schema)

    def _walk(node: object) -> None:
        if isinstance(node, dict):
            node_dict = cast("dict[str, Any]", node)
            if "properties" in node_dict:
                node_dict.setdefault("type", "object")
                props = node_dict["properties"]
                if isinstance(props, dict):
                    props_dict = cast("dict[str, Any]", props)
                    node_dict["required"] = sorted(str(key) for key in props_dict)
                    node_dict["additionalProperties"] = False
            for key in ("default", "minimum", "maximum"):
                node_dict.pop(key, None)
            for value in node_dict.values():
                _walk(value)
        elif isinstance(node, list):
            for item in node:
                _walk(item)

    _walk(cleaned)
    return cleaned


def mapping_response_format(schema: dict[str, Any]) -> dict[str, Any]:
    """Build the strict `response_format` payload for chat completions.

    Args:
        schema (dict[str, Any]): Raw JSON schema of the expected response.

    Returns:
        dict[str, Any]: Response format payload.
    """
    return {
        "type": "json_schema",
        "json_schema": {
            "name": "mapping_response",
            "schema": sanitize_json_schema(schema),
            "strict": True,
        },
    }


def build_mapping_prompt(
    fields: Sequence[Field],
    candidate_data: Mapping[str, Any],
    *,
    max_chars: int,
) -> str:
    """Build the field mapping prompt, bounded to `max_chars`.

    The field list gets the length budget first and candidate data is
    truncated to what remains. The instructions alone take
    `PROMPT_OVERHEAD_CHARS`, so smaller bounds are rejected.

    Args:
        fields (Sequence[Field]): Fields to fill.
        candidate_data (Mapping[str, Any]): Candidate values.
        max_chars (int): Maximum prompt length.

    Raises:
        ValueError: If `max_chars` cannot hold the instructions.

    Returns:
        str: Prompt text.
    """
    if max_chars < PROMPT_OVERHEAD_CHARS:
        msg = f"max_chars must be at least {PROMPT_OVERHEAD_CHARS} to hold the prompt instructions"
        raise ValueError(msg)

    fields_text = json.dumps(
        [
            {"id": field.id, "name": field.name, "type": field.type.value, "label": field.label}
            for field in fields
        ],
        indent=2,
        ensure_ascii=False,
    )
    candidates_text = json.dumps(dict(candidate_data), indent=2, default=str, ensure_ascii=False)
    budget = max_chars - PROMPT_OVERHEAD_CHARS

    fields_text = _truncate(fields_text, budget)
    candidates_text = _truncate(candidates_text, budget - len(fields_text))
    return _PROMPT_TEMPLATE.format(fields=fields_text, candidates=candidates_text)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences around a JSON answer."""
    return _CODE_FENCE.sub("", text).replace("```", "").strip()


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    if limit <= len(TRUNCATION_MARKER):
        return ""
    return text[: limit - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER
