"""Form template catalog models."""

from __future__ import annotations

import re
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field as PydanticField, field_validator

from formsense.typing.enums import (
    FieldGroupType,
    IdentifierType,
    Severity,
    TemplateCategory,
    TemplateRuleType,
)
from formsense.typing.models.field import Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class FormIdentifier(BaseModel):
    """Literal or regex marker used to recognize a template."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: IdentifierType
    value: str
    pattern: str | None = None
    required: bool = False

    @field_validator("pattern")
    @classmethod
    def _validate_pattern(cls, value: str | None) -> str | None:
        """Reject patterns that do not compile.

        Args:
            value (str | None): Raw regex pattern.

        Raises:
            ValueError: If the pattern is not a valid regular expression.

        Returns:
            str | None: The unchanged pattern.
        """
        if value is None:
            return value
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid identifier pattern {value!r}: {exc}") from exc
        return value


class FieldMappingHints(BaseModel):
    """Where values for a template field usually come from."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    common_sources: tuple[str, ...] = ()
    extraction_hints: tuple[str, ...] = ()


class TemplateField(Field):
    """Field definition inside a template."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    aliases: tuple[str, ...] = ()
    mapping: FieldMappingHints | None = None


class TemplateValidationRule(BaseModel):
    """Validation rule declared by a template."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    type: TemplateRuleType
    fields: tuple[str, ...]
    rule: str
    error_message: str
    severity: Severity = Severity.ERROR


class PageSize(BaseModel):
    """Page dimensions in PDF points."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: float
    height: float


class Section(BaseModel):
    """Logical region of a template page."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: str
    page: int
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    fields: tuple[str, ...] = ()


class FieldGroup(BaseModel):
    """Set of fields laid out together."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: str
    fields: tuple[str, ...]
    type: FieldGroupType = FieldGroupType.GROUP


class LayoutMetadata(BaseModel):
    """Page layout summary of a template."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    page_count: int = 1
    page_size: PageSize = PageSize(width=612.0, height=792.0)
    sections: tuple[Section, ...] = ()
    field_groups: tuple[FieldGroup, ...] = ()


class FormTemplate(BaseModel):
    """Reusable description of a known form."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: str
    version: str = "1.0"
    category: TemplateCategory = TemplateCategory.CUSTOM
    description: str | None = None
    form_identifiers: tuple[FormIdentifier, ...] = ()
    field_definitions: tuple[TemplateField, ...] = ()
    validation_rules: tuple[TemplateValidationRule, ...] = ()
    layout_metadata: LayoutMetadata = LayoutMetadata()
    usage_count: int = 0
    success_rate: float | None = PydanticField(default=None, ge=0.0, le=1.0)
    created_at: datetime = PydanticField(default_factory=_utcnow)
    updated_at: datetime = PydanticField(default_factory=_utcnow)


class TemplateMatchResult(BaseModel):
    """Score of a document against one template."""

    model_config = ConfigDict(extra="forbid")

    template_id: str
    confidence: float = PydanticField(ge=0.0, le=1.0)
    identifier_score: float = PydanticField(ge=0.0, le=1.0)
    field_match_score: float = PydanticField(ge=0.0, le=1.0)
    matched_identifiers: list[str] = PydanticField(default_factory=list)
    unmatched_identifiers: list[str] = PydanticField(default_factory=list)
