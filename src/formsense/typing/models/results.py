"""Pipeline operation results."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field as PydanticField, computed_field

from formsense.typing.enums import ErrorType, Severity
from formsense.typing.models.document import DocumentMetadata
from formsense.typing.models.field import DetectedField
from formsense.typing.models.mapping import FieldMapping


class ValidationIssue(BaseModel):
    """Problem found while validating one filled field."""

    model_config = ConfigDict(extra="forbid")

    field_id: str
    field_name: str
    error_type: ErrorType
    message: str
    severity: Severity = Severity.ERROR


class TemplateMatchSummary(BaseModel):
    """Best template match reported with detection results."""

    model_config = ConfigDict(extra="forbid")

    template_id: str
    confidence: float = PydanticField(ge=0.0, le=1.0)


class DetectionResult(BaseModel):
    """Fields, metadata and template match for one document."""

    model_config = ConfigDict(extra="forbid")

    fields: list[DetectedField]
    metadata: DocumentMetadata
    template_match: TemplateMatchSummary | None = None


class MappingResult(BaseModel):
    """Mappings split into auto-filled values and manual work."""

    model_config = ConfigDict(extra="forbid")

    mappings: list[FieldMapping]
    auto_filled: dict[str, str] = PydanticField(default_factory=dict)
    manual_required: list[FieldMapping] = PydanticField(default_factory=list)


class ValidationReport(BaseModel):
    """Validation issues and overall verdict."""

    model_config = ConfigDict(extra="forbid")

    errors: list[ValidationIssue]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        """Return whether no issue was found."""
        return not self.errors
