"""Field naming, labeling and placement helpers shared by detection heuristics."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from formsense.typing.enums import FieldType
from formsense.typing.models import BoundingBox

if TYPE_CHECKING:
    from formsense.typing.models import Page

MAX_FIELD_NAME_LENGTH = 50
LINE_HEIGHT = 20.0
PAGE_MARGIN = 50.0

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")
_LABEL_PREFIX = re.compile(r"^([^_:]+)[_:]")

# First matching keyword wins.
_TYPE_KEYWORDS: tuple[tuple[tuple[str, ...], FieldType], ...] = (
    (("email",), FieldType.EMAIL),
    (("phone", "tel"), FieldType.PHONE),
    (("date",), FieldType.DATE),
    (("amount", "price", "cost"), FieldType.NUMBER),
    (("description", "comment"), FieldType.TEXTAREA),
)


def sanitize_field_name(text: str) -> str:
    """Turn free text into a machine field name.

    Lower-cases, collapses non-alphanumeric runs into single underscores,
    strips edge underscores and truncates to 50 characters. The result is a
    fixed point: sanitizing it again returns it unchanged.

    Args:
        text (str): Label or context text.

    Returns:
        str: Sanitized name, possibly empty.
    """
    collapsed = _NON_ALNUM_RUN.sub("_", text.lower()).strip("_")
    return collapsed[:MAX_FIELD_NAME_LENGTH].rstrip("_")


def generate_field_name(context: str, index: int) -> str:
    """Return a sanitized name, or a positional fallback when nothing is left.

    Args:
        context (str): Text the name is derived from.
        index (int): Position used by the fallback name.

    Returns:
        str: Field name.
    """
    return sanitize_field_name(context) or f"field_{index}"


def extract_label(line: str) -> str:
    """Return the text preceding the first underscore or colon of a line."""
    match = _LABEL_PREFIX.match(line)
    return match.group(1).strip() if match else ""


def infer_field_type(label: str) -> FieldType:
    """Guess a field type from keywords in its label.

    Args:
        label (str): Field label.

    Returns:
        FieldType: Inferred type, text when no keyword matches.
    """
    lower = label.lower()
    for keywords, field_type in _TYPE_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return field_type
    return FieldType.TEXT


def estimate_bounding_box(page: Page, line_index: int) -> BoundingBox:
    """Approximate a field box from its line index.

    This is a coarse placeholder: a fixed line height and page margin, with
    the vertical position taken from the line index only.

    Args:
        page (Page): Page holding the field.
        line_index (int): Zero-based line index in the page text.

    Returns:
        BoundingBox: Estimated box.
    """
    return BoundingBox(
        page=page.number,
        x=PAGE_MARGIN,
        y=line_index * LINE_HEIGHT,
        width=page.width - 2 * PAGE_MARGIN,
        height=LINE_HEIGHT,
    )
