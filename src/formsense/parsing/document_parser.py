"""Document parsing orchestration: bytes to pages, fields and metadata."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pymupdf

from formsense.exceptions import ParsingError
from formsense.logging import get_logger
from formsense.parsing.field_detector import FieldDetector
from formsense.parsing.layout_analyzer import LayoutAnalyzer
from formsense.parsing.ocr import OCRHandler
from formsense.parsing.text_extractor import TextExtractor, open_pdf
from formsense.typing.enums import FieldType
from formsense.typing.models import BoundingBox, Field, ParseResult

if TYPE_CHECKING:
    from formsense.settings import Settings

logger = get_logger(__name__)

_WIDGET_TYPES: dict[int, FieldType] = {
    pymupdf.PDF_WIDGET_TYPE_TEXT: FieldType.TEXT,
    pymupdf.PDF_WIDGET_TYPE_CHECKBOX: FieldType.CHECKBOX,
    pymupdf.PDF_WIDGET_TYPE_RADIOBUTTON: FieldType.RADIO,
    pymupdf.PDF_WIDGET_TYPE_COMBOBOX: FieldType.DROPDOWN,
    pymupdf.PDF_WIDGET_TYPE_LISTBOX: FieldType.DROPDOWN,
    pymupdf.PDF_WIDGET_TYPE_SIGNATURE: FieldType.SIGNATURE,
}


class DocumentParser:
    """Parse PDF bytes and detect form fields from their text."""

    def __init__(
        self,
        *,
        text_extractor: TextExtractor | None = None,
        layout_analyzer: LayoutAnalyzer | None = None,
        field_detector: FieldDetector | None = None,
        ocr_handler: OCRHandler | None = None,
        max_file_size_bytes: int | None = None,
    ) -> None:
        """Initialize parser.

        Args:
            text_extractor (TextExtractor | None): Text extraction component.
            layout_analyzer (LayoutAnalyzer | None): Page segmentation component.
            field_detector (FieldDetector | None): Field detection component.
            ocr_handler (OCRHandler | None): Scanned-document handler.
            max_file_size_bytes (int | None): Reject larger inputs when set.
        """
        self._text_extractor = text_extractor or TextExtractor()
        self._layout_analyzer = layout_analyzer or LayoutAnalyzer()
        self._field_detector = field_detector or FieldDetector()
        self._ocr_handler = ocr_handler or OCRHandler()
        self._max_file_size_bytes = max_file_size_bytes

    @classmethod
    def from_settings(cls, settings: Settings) -> DocumentParser:
        """Build a parser configured from runtime settings."""
        return cls(
            field_detector=FieldDetector(max_workers=settings.detection_workers),
            max_file_size_bytes=settings.max_file_size_bytes,
        )

    @property
    def text_extractor(self) -> TextExtractor:
        """Return the text extraction component."""
        return self._text_extractor

    def parse(self, data: bytes) -> ParseResult:
        """Extract text, split it into pages and detect fields.

        Args:
            data (bytes): Raw PDF bytes.

        Raises:
            ParsingError: If the input is empty, too large or not a readable PDF.

        Returns:
            ParseResult: Pages, detected fields, metadata and raw text.
        """
        self._check_input(data)

        metadata = self._text_extractor.extract_metadata(data)
        raw_text = self._text_extractor.extract_text(data)
        pages = self._layout_analyzer.analyze_layout(self._text_extractor.page_sizes(data), raw_text)

        if self._ocr_handler.is_scanned_document(data):
            logger.warning("Document has no text layer, OCR is not available")
            metadata = metadata.model_copy(update={"is_scanned": True})

        fields = self._field_detector.detect_fields(pages)
        logger.info("Document parsed", extra={"pages": len(pages), "fields": len(fields)})
        return ParseResult(pages=pages, fields=fields, metadata=metadata, raw_text=raw_text)

    def check_if_fillable(self, data: bytes) -> bool:
        """Return whether the PDF has interactive form widgets.

        Args:
            data (bytes): Raw PDF bytes.

        Returns:
            bool: True when at least one widget exists, False for unreadable input.
        """
        try:
            return bool(self.extract_fillable_fields(data))
        except ParsingError:
            return False

    def extract_fillable_fields(self, data: bytes) -> list[Field]:
        """Read interactive form widgets as fields.

        Args:
            data (bytes): Raw PDF bytes.

        Raises:
            ParsingError: If the input is not a readable PDF.

        Returns:
            list[Field]: One field per widget, with its real rectangle.
        """
        fields: list[Field] = []
        with open_pdf(data, stage="fillable_fields") as doc:
            for page in doc:
                for widget in page.widgets() or []:
                    rect = widget.rect
                    name = widget.field_name or f"fillable_{len(fields)}"
                    fields.append(
                        Field(
                            id=f"fillable_{len(fields)}",
                            name=name,
                            type=_WIDGET_TYPES.get(widget.field_type, FieldType.TEXT),
                            label=widget.field_label or name,
                            bounding_box=BoundingBox(
                                page=page.number + 1,
                                x=rect.x0,
                                y=rect.y0,
                                width=rect.width,
                                height=rect.height,
                            ),
                            required=False,
                            options=list(widget.choice_values) if widget.choice_values else None,
                            confidence=1.0,
                        ),
                    )
        return fields

    def _check_input(self, data: bytes) -> None:
        if not data:
            raise ParsingError(stage="input", message="Document is empty")
        if self._max_file_size_bytes is not None and len(data) > self._max_file_size_bytes:
            raise ParsingError(
                stage="input",
                message=f"Document is {len(data)} bytes, limit is {self._max_file_size_bytes}",
            )
