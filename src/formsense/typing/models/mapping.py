"""Field mapping models and the reasoning service contract."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field as PydanticField


class FieldMapping(BaseModel):
    """Proposed value for one field."""

    model_config = ConfigDict(extra="forbid")

    field_id: str
    field_name: str
    suggested_value: str
    source_document: str | None = None
    confidence: float = PydanticField(ge=0.0, le=1.0)
    requires_manual_review: bool
    accepted_by_user: bool | None = None
    final_value: str | None = None


class MappingSuggestion(BaseModel):
    """One entry of the reasoning service response."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    field_id: str = PydanticField(alias="fieldId")
    suggested_value: str | None = PydanticField(default=None, alias="suggestedValue")
    confidence: float = PydanticField(default=0.0, ge=0.0, le=1.0)
    requires_manual_review: bool = PydanticField(default=False, alias="requiresManualReview")
    source_field: str | None = PydanticField(default=None, alias="sourceField")


class MappingResponse(BaseModel):
    """Structured response expected from the reasoning service."""

    model_config = ConfigDict(extra="ignore")

    mappings: list[MappingSuggestion]
