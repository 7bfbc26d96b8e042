"""OCR handling for image-only documents.

OCR is not implemented: `OCRHandler.perform_ocr` is a stub that returns no
text. Only scanned-document detection is real.
"""

from __future__ import annotations

from formsense.logging import get_logger
from formsense.parsing.text_extractor import open_pdf

logger = get_logger(__name__)


class OCRHandler:
    """Scanned-page detection and OCR placeholder."""

    def perform_ocr(self, image: bytes) -> str:  # noqa: ARG002
        """Return recognized text for a page image.

        Stub: always returns an empty string.

        Args:
            image (bytes): Page image bytes.

        Returns:
            str: Recognized text (always empty).
        """
        logger.warning("OCR not implemented, returning empty text")
        return ""

    def is_scanned_document(self, data: bytes) -> bool:
        """Return whether no page carries a text layer but some page carries images.

        Args:
            data (bytes): Raw PDF bytes.

        Returns:
            bool: True for image-only documents.
        """
        with open_pdf(data, stage="scan_detection") as doc:
            has_text = any(page.get_text("text").strip() for page in doc)
            has_images = any(page.get_images(full=False) for page in doc)
        return has_images and not has_text
