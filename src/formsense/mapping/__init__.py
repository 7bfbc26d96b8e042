"""Field value mapping."""

from formsense.mapping.field_mapper import FieldMapper, parse_mapping_response
from formsense.mapping.reasoning import OpenAIReasoningClient
from formsense.mapping.review import build_mapping, partition_mappings
from formsense.mapping.rules_mapper import RulesMapper

__all__ = [
    "FieldMapper",
    "OpenAIReasoningClient",
    "RulesMapper",
    "build_mapping",
    "parse_mapping_response",
    "partition_mappings",
]
