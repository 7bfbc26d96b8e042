"""Text-based form field detection.

Each heuristic is an independent strategy with a ``detect(page)`` method.
`FieldDetector` runs them in a fixed order on every page and concatenates
their output. Overlapping detections from different heuristics are kept
as-is; nothing is merged.
"""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from formsense.logging import get_logger
from formsense.parsing.naming import (
    estimate_bounding_box,
    extract_label,
    generate_field_name,
    infer_field_type,
)
from formsense.typing.enums import DetectionMethod, FieldType
from formsense.typing.models import DetectedField

if TYPE_CHECKING:
    from collections.abc import Sequence

    from formsense.typing.models import Page
    from formsense.typing.protocol import DetectionHeuristic

logger = get_logger(__name__)

BLANK_LINE_CONFIDENCE = 0.7
COLON_FIELD_CONFIDENCE = 0.8
CHECKBOX_CONFIDENCE = 0.8
LABELED_FIELD_CONFIDENCE = 0.85

CHECKBOX_CONTEXT_CHARS = 50

COMMON_LABELS = (
    "First Name",
    "Last Name",
    "Name",
    "Email",
    "Phone",
    "Address",
    "City",
    "State",
    "ZIP",
    "Date",
    "Company",
    "Title",
)


class BlankLineHeuristic:
    """Underscore runs and trailing-colon labels."""

    _UNDERSCORES = re.compile(r"_{3,}")
    _COLON_LINE = re.compile(r"^([^:]+):\s*$")

    def detect(self, page: Page) -> list[DetectedField]:
        """Detect blank-line and colon fields on a page."""
        fields: list[DetectedField] = []
        for line_index, line in enumerate(page.text.split("\n")):
            for match_index, _ in enumerate(self._UNDERSCORES.finditer(line)):
                fields.append(
                    DetectedField(
                        id=f"blank_line_{page.number}_{line_index}_{match_index}",
                        name=generate_field_name(line, line_index),
                        type=FieldType.TEXT,
                        label=extract_label(line),
                        bounding_box=estimate_bounding_box(page, line_index),
                        detection_method=DetectionMethod.LAYOUT,
                        nearby_text=[line],
                        confidence=BLANK_LINE_CONFIDENCE,
                    ),
                )

            colon_match = self._COLON_LINE.match(line)
            if colon_match:
                label = colon_match.group(1)
                fields.append(
                    DetectedField(
                        id=f"colon_field_{page.number}_{line_index}",
                        name=generate_field_name(label, line_index),
                        type=FieldType.TEXT,
                        label=label.strip(),
                        bounding_box=estimate_bounding_box(page, line_index),
                        detection_method=DetectionMethod.LAYOUT,
                        nearby_text=[line],
                        confidence=COLON_FIELD_CONFIDENCE,
                    ),
                )
        return fields


class CheckboxHeuristic:
    """Bracket pairs and checkbox glyphs."""

    _PATTERNS = (
        re.compile(r"\[\s*\]"),
        re.compile("☐"),  # ballot box
        re.compile("□"),  # white square
    )

    def detect(self, page: Page) -> list[DetectedField]:
        """Detect checkbox fields on a page, labeled from surrounding text."""
        fields: list[DetectedField] = []
        text = page.text
        for pattern_index, pattern in enumerate(self._PATTERNS):
            for match_index, match in enumerate(pattern.finditer(text)):
                start = max(0, match.start() - CHECKBOX_CONTEXT_CHARS)
                context = text[start : match.start() + CHECKBOX_CONTEXT_CHARS]
                line_index = text.count("\n", 0, match.start())
                fields.append(
                    DetectedField(
                        id=f"checkbox_{page.number}_{pattern_index}_{match_index}",
                        name=generate_field_name(context, match_index),
                        type=FieldType.CHECKBOX,
                        label=context.strip(),
                        bounding_box=estimate_bounding_box(page, line_index),
                        detection_method=DetectionMethod.LAYOUT,
                        nearby_text=[context],
                        confidence=CHECKBOX_CONFIDENCE,
                    ),
                )
        return fields


class LabeledFieldHeuristic:
    """Lines starting with a common form label."""

    _LABEL_LINE = re.compile(
        r"^(" + "|".join(re.escape(label) for label in COMMON_LABELS) + r"):\s*(.*)$",
        re.IGNORECASE,
    )

    def detect(self, page: Page) -> list[DetectedField]:
        """Detect well-known labeled fields on a page."""
        fields: list[DetectedField] = []
        for line_index, line in enumerate(page.text.split("\n")):
            match = self._LABEL_LINE.match(line)
            if match is None:
                continue
            label = match.group(1).strip()
            fields.append(
                DetectedField(
                    id=f"labeled_{page.number}_{line_index}",
                    name=generate_field_name(label, line_index),
                    type=infer_field_type(label),
                    label=label,
                    bounding_box=estimate_bounding_box(page, line_index),
                    detection_method=DetectionMethod.LAYOUT,
                    nearby_text=[line],
                    confidence=LABELED_FIELD_CONFIDENCE,
                ),
            )
        return fields


class TableHeuristic:
    """Table cell detection extension point.

    Returns no fields until aligned-column analysis is implemented.
    """

    def detect(self, page: Page) -> list[DetectedField]:  # noqa: ARG002
        """Detect table cell fields on a page."""
        return []


def default_heuristics() -> tuple[DetectionHeuristic, ...]:
    """Return the built-in heuristics in pipeline order."""
    return (BlankLineHeuristic(), CheckboxHeuristic(), LabeledFieldHeuristic(), TableHeuristic())


class FieldDetector:
    """Run detection heuristics over document pages."""

    def __init__(
        self,
        heuristics: Sequence[DetectionHeuristic] | None = None,
        *,
        max_workers: int = 1,
    ) -> None:
        """Initialize detector.

        Args:
            heuristics (Sequence[DetectionHeuristic] | None): Strategies in run order.
            max_workers (int): Threads used to scan pages concurrently.
        """
        self._heuristics = tuple(heuristics) if heuristics is not None else default_heuristics()
        self._max_workers = max(max_workers, 1)

    def detect_fields(self, pages: Sequence[Page]) -> list[DetectedField]:
        """Detect fields on every page.

        Args:
            pages (Sequence[Page]): Pages in ascending order.

        Returns:
            list[DetectedField]: Fields grouped by page, then by heuristic.
        """
        ordered = sorted(pages, key=lambda page: page.number)
        if self._max_workers > 1 and len(ordered) > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                per_page = list(executor.map(self.detect_fields_on_page, ordered))
        else:
            per_page = [self.detect_fields_on_page(page) for page in ordered]

        fields = [field for page_fields in per_page for field in page_fields]
        logger.info("Fields detected", extra={"fields": len(fields), "pages": len(ordered)})
        return fields

    def detect_fields_on_page(self, page: Page) -> list[DetectedField]:
        """Apply every heuristic to one page, in order."""
        fields: list[DetectedField] = []
        for heuristic in self._heuristics:
            fields.extend(heuristic.detect(page))
        return fields


__all__ = [
    "BlankLineHeuristic",
    "CheckboxHeuristic",
    "FieldDetector",
    "LabeledFieldHeuristic",
    "TableHeuristic",
    "default_heuristics",
]
