from __future__ import annotations

import pytest

from formsense.mapping.prompts import (
    PROMPT_OVERHEAD_CHARS,
    TRUNCATION_MARKER,
    build_mapping_prompt,
    mapping_response_format,
    sanitize_json_schema,
    strip_code_fences,
)
from formsense.typing.enums import FieldType
from formsense.typing.models import BoundingBox, Field, MappingResponse

_BOX = BoundingBox(page=1, x=0, y=0, width=10, height=10)


def test_sanitize_json_schema_sets_required_and_forbids_additional_properties() -> None:
    raw = {
        "type": "object",
        "properties": {
            "foo": {"type": "string", "default": "x"},
            "bar": {"type": "number", "minimum": 0, "maximum": 1},
        },
    }

    cleaned = sanitize_json_schema(raw)

    assert cleaned["required"] == ["bar", "foo"]
    assert cleaned["additionalProperties"] is False
    assert "default" not in cleaned["properties"]["foo"]
    assert "minimum" not in cleaned["properties"]["bar"]
    assert raw["properties"]["foo"]["default"] == "x"


def test_mapping_response_format_is_strict() -> None:
    result = mapping_response_format(MappingResponse.model_json_schema())

    assert result["type"] == "json_schema"
    assert result["json_schema"]["strict"] is True
    assert result["json_schema"]["name"] == "mapping_response"


def test_prompt_lists_fields_and_candidates() -> None:
    fields = [Field(id="f1", name="company_name", type=FieldType.TEXT, label="Company", bounding_box=_BOX)]

    prompt = build_mapping_prompt(fields, {"company_name": "Acme"}, max_chars=10_000)

    assert '"id": "f1"' in prompt
    assert '"company_name": "Acme"' in prompt
    assert '"mappings"' in prompt


def test_prompt_is_bounded() -> None:
    fields = [Field(id=f"f{index}", name=f"field_{index}", bounding_box=_BOX) for index in range(50)]
    candidates = {f"key_{index}": "x" * 200 for index in range(50)}

    prompt = build_mapping_prompt(fields, candidates, max_chars=2_000)

    assert len(prompt) <= 2_000
    assert TRUNCATION_MARKER.strip() in prompt


def test_prompt_bound_at_overhead_keeps_only_instructions() -> None:
    fields = [Field(id="f1", name="company_name", bounding_box=_BOX)]

    prompt = build_mapping_prompt(fields, {"company_name": "Acme"}, max_chars=PROMPT_OVERHEAD_CHARS)

    assert len(prompt) == PROMPT_OVERHEAD_CHARS
    assert "company_name" not in prompt


def test_prompt_bound_below_overhead_is_rejected() -> None:
    with pytest.raises(ValueError, match="max_chars must be at least"):
        build_mapping_prompt([], {}, max_chars=PROMPT_OVERHEAD_CHARS - 1)


def test_strip_code_fences() -> None:
    assert strip_code_fences('```json\n{"mappings": []}\n```') == '{"mappings": []}'
    assert strip_code_fences('{"mappings": []}') == '{"mappings": []}'
