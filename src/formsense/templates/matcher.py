"""Best-template selection across the registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

from formsense import logger
from formsense.templates.pattern_matcher import PatternMatcher
from formsense.typing.models import TemplateMatchResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from formsense.templates.registry import TemplateRegistry
    from formsense.typing.models import Field, FormTemplate

IDENTIFIER_WEIGHT = 0.7
FIELD_WEIGHT = 0.3
DEFAULT_CONFIDENCE_THRESHOLD = 0.8


class TemplateMatcher:
    """Find the registered template that best explains a document."""

    def __init__(
        self,
        registry: TemplateRegistry,
        *,
        pattern_matcher: PatternMatcher | None = None,
        threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
    ) -> None:
        """Initialize matcher.

        Args:
            registry (TemplateRegistry): Template catalog.
            pattern_matcher (PatternMatcher | None): Scoring component.
            threshold (float): Minimum confidence of a reported match.
        """
        self._registry = registry
        self._pattern_matcher = pattern_matcher or PatternMatcher()
        self._threshold = threshold

    def score_template(
        self,
        template: FormTemplate,
        text: str,
        detected_fields: Sequence[Field],
    ) -> TemplateMatchResult:
        """Score one template against a document.

        Args:
            template (FormTemplate): Template to score.
            text (str): Document text.
            detected_fields (Sequence[Field]): Fields detected in the document.

        Returns:
            TemplateMatchResult: Weighted score and identifier breakdown.
        """
        matched, unmatched = self._pattern_matcher.partition_identifiers(template.form_identifiers, text)
        identifier_score = self._pattern_matcher.match_identifiers(template.form_identifiers, text)
        field_score = self._pattern_matcher.match_fields(template.field_definitions, detected_fields)
        confidence = min(IDENTIFIER_WEIGHT * identifier_score + FIELD_WEIGHT * field_score, 1.0)

        return TemplateMatchResult(
            template_id=template.id,
            confidence=confidence,
            identifier_score=identifier_score,
            field_match_score=field_score,
            matched_identifiers=matched,
            unmatched_identifiers=unmatched,
        )

    def find_matching_template(
        self,
        text: str,
        detected_fields: Sequence[Field],
    ) -> TemplateMatchResult | None:
        """Return the best match when it reaches the confidence threshold.

        Ties keep the earliest registered template.

        Args:
            text (str): Document text.
            detected_fields (Sequence[Field]): Fields detected in the document.

        Returns:
            TemplateMatchResult | None: Best match, or None below threshold.
        """
        best: TemplateMatchResult | None = None
        highest = 0.0
        for template in self._registry.list_templates():
            result = self.score_template(template, text, detected_fields)
            if result.confidence > highest:
                highest = result.confidence
                best = result

        if best is not None and best.confidence >= self._threshold:
            logger.info(
                "Template matched",
                extra={"template_id": best.template_id, "confidence": round(best.confidence, 3)},
            )
            return best

        logger.info("No matching template found")
        return None
