"""Core domain model exports."""

from formsense.typing.models.document import (
    CandidateData,
    DocumentMetadata,
    ExtractedEntities,
    LibraryDocument,
    Page,
    ParseResult,
)
from formsense.typing.models.field import (
    BoundingBox,
    DetectedField,
    Field,
    FieldValueType,
    FilledField,
    ValidationConstraint,
)
from formsense.typing.models.mapping import FieldMapping, MappingResponse, MappingSuggestion
from formsense.typing.models.results import (
    DetectionResult,
    MappingResult,
    TemplateMatchSummary,
    ValidationIssue,
    ValidationReport,
)
from formsense.typing.models.template import (
    FieldGroup,
    FieldMappingHints,
    FormIdentifier,
    FormTemplate,
    LayoutMetadata,
    PageSize,
    Section,
    TemplateField,
    TemplateMatchResult,
    TemplateValidationRule,
)

__all__ = [
    "BoundingBox",
    "CandidateData",
    "DetectedField",
    "DetectionResult",
    "DocumentMetadata",
    "ExtractedEntities",
    "Field",
    "FieldGroup",
    "FieldMapping",
    "FieldMappingHints",
    "FieldValueType",
    "FilledField",
    "FormIdentifier",
    "FormTemplate",
    "LayoutMetadata",
    "LibraryDocument",
    "MappingResponse",
    "MappingResult",
    "MappingSuggestion",
    "Page",
    "PageSize",
    "ParseResult",
    "Section",
    "TemplateField",
    "TemplateMatchResult",
    "TemplateMatchSummary",
    "TemplateValidationRule",
    "ValidationConstraint",
    "ValidationIssue",
    "ValidationReport",
]
