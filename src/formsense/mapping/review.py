"""Manual-review rules shared by every mapping source."""

from __future__ import annotations

from typing import TYPE_CHECKING

from formsense.typing.models import FieldMapping, MappingResult

if TYPE_CHECKING:
    from collections.abc import Sequence

DEFAULT_REVIEW_THRESHOLD = 0.7


def build_mapping(
    *,
    field_id: str,
    field_name: str,
    suggested_value: str,
    confidence: float,
    flagged: bool,
    threshold: float,
    source_document: str | None = None,
) -> FieldMapping:
    """Create a mapping, forcing manual review below the confidence threshold.

    Args:
        field_id (str): Field identifier.
        field_name (str): Field name.
        suggested_value (str): Proposed value.
        confidence (float): Confidence of the proposal.
        flagged (bool): Review flag set by the mapping source.
        threshold (float): Manual review threshold.
        source_document (str | None): Where the value came from.

    Returns:
        FieldMapping: Mapping whose review flag honors the threshold.
    """
    return FieldMapping(
        field_id=field_id,
        field_name=field_name,
        suggested_value=suggested_value,
        source_document=source_document,
        confidence=confidence,
        requires_manual_review=flagged or confidence < threshold,
    )


def partition_mappings(
    mappings: Sequence[FieldMapping],
    *,
    threshold: float = DEFAULT_REVIEW_THRESHOLD,
) -> MappingResult:
    """Split mappings into auto-filled values and mappings needing review.

    Args:
        mappings (Sequence[FieldMapping]): Mappings to split.
        threshold (float): Manual review threshold.

    Returns:
        MappingResult: All mappings, auto-filled name/value pairs and manual ones.
    """
    auto_filled: dict[str, str] = {}
    manual_required: list[FieldMapping] = []
    for mapping in mappings:
        if mapping.requires_manual_review or mapping.confidence < threshold:
            manual_required.append(mapping)
        else:
            auto_filled[mapping.field_name] = mapping.suggested_value
    return MappingResult(mappings=list(mappings), auto_filled=auto_filled, manual_required=manual_required)
