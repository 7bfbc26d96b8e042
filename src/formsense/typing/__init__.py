"""Typing-centric domain modules."""

from formsense.typing.enums import (
    DetectionMethod,
    ErrorType,
    FieldGroupType,
    FieldType,
    IdentifierType,
    Severity,
    TemplateCategory,
    TemplateRuleType,
)
from formsense.typing.protocol import DetectionHeuristic, DocumentLibrary, ReasoningClient

__all__ = [
    "DetectionHeuristic",
    "DetectionMethod",
    "DocumentLibrary",
    "ErrorType",
    "FieldGroupType",
    "FieldType",
    "IdentifierType",
    "ReasoningClient",
    "Severity",
    "TemplateCategory",
    "TemplateRuleType",
]
