"""Document parsing and field detection."""

from formsense.parsing.document_parser import DocumentParser
from formsense.parsing.field_detector import (
    BlankLineHeuristic,
    CheckboxHeuristic,
    FieldDetector,
    LabeledFieldHeuristic,
    TableHeuristic,
    default_heuristics,
)
from formsense.parsing.layout_analyzer import LayoutAnalyzer
from formsense.parsing.naming import sanitize_field_name
from formsense.parsing.ocr import OCRHandler
from formsense.parsing.text_extractor import TextExtractor

__all__ = [
    "BlankLineHeuristic",
    "CheckboxHeuristic",
    "DocumentParser",
    "FieldDetector",
    "LabeledFieldHeuristic",
    "LayoutAnalyzer",
    "OCRHandler",
    "TableHeuristic",
    "TextExtractor",
    "default_heuristics",
    "sanitize_field_name",
]
