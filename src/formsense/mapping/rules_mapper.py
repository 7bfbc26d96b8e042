"""Deterministic exact-name field mapping."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from formsense.mapping.review import DEFAULT_REVIEW_THRESHOLD, build_mapping

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from formsense.typing.models import Field, FieldMapping

RULES_CONFIDENCE = 0.6


def stringify_candidate(value: Any) -> str:
    """Render a candidate value as field text; sequences are comma-joined."""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value)


class RulesMapper:
    """Map fields to candidate values stored under the exact field name."""

    def __init__(self, *, review_threshold: float = DEFAULT_REVIEW_THRESHOLD) -> None:
        """Initialize mapper.

        Args:
            review_threshold (float): Manual review threshold.
        """
        self._review_threshold = review_threshold

    def map_by_rules(self, fields: Sequence[Field], candidate_data: Mapping[str, Any]) -> list[FieldMapping]:
        """Propose a value for every field whose name is a candidate key.

        Empty candidate values are skipped. Every mapping requires manual review.

        Args:
            fields (Sequence[Field]): Fields to fill.
            candidate_data (Mapping[str, Any]): Candidate values by key.

        Returns:
            list[FieldMapping]: Mappings in field order.
        """
        mappings: list[FieldMapping] = []
        for field in fields:
            value = candidate_data.get(field.name)
            if not value:
                continue
            mappings.append(
                build_mapping(
                    field_id=field.id,
                    field_name=field.name,
                    suggested_value=stringify_candidate(value),
                    confidence=RULES_CONFIDENCE,
                    flagged=True,
                    threshold=self._review_threshold,
                ),
            )
        return mappings
