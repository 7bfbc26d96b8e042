"""Page segmentation of extracted text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from formsense.parsing.text_extractor import PAGE_SEPARATOR
from formsense.typing.models import Page

if TYPE_CHECKING:
    from collections.abc import Sequence


class LayoutAnalyzer:
    """Combine page geometry with page-aligned text segments."""

    def analyze_layout(self, page_sizes: Sequence[tuple[float, float]], raw_text: str) -> list[Page]:
        """Build ordered page records.

        The raw text is split on form feeds. Pages without a matching segment
        get empty text, extra segments are ignored.

        Args:
            page_sizes (Sequence[tuple[float, float]]): (width, height) per page; its length is the page count.
            raw_text (str): Full document text.

        Returns:
            list[Page]: Pages numbered from 1.
        """
        segments = raw_text.split(PAGE_SEPARATOR)
        return [
            Page(
                number=index + 1,
                width=width,
                height=height,
                text=segments[index] if index < len(segments) else "",
            )
            for index, (width, height) in enumerate(page_sizes)
        ]
