"""PDF text, geometry and entity extraction."""

from __future__ import annotations

import re
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import pymupdf

from formsense.exceptions import ParsingError
from formsense.logging import get_logger
from formsense.typing.models import DocumentMetadata, ExtractedEntities

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = get_logger(__name__)

PAGE_SEPARATOR = "\f"

_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_PHONE_RE = re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b")
_DATE_RE = re.compile(r"\b\d{1,2}[-/]\d{1,2}[-/]\d{2,4}\b")
_ADDRESS_RE = re.compile(
    r"\d+\s+[\w\s]+?(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd)[.,]?\s+[\w\s]+?,\s+[A-Z]{2}\s+\d{5}",
    re.IGNORECASE,
)
_PDF_DATE_RE = re.compile(
    r"^D:(?P<year>\d{4})(?P<month>\d{2})?(?P<day>\d{2})?(?P<hour>\d{2})?(?P<minute>\d{2})?(?P<second>\d{2})?"
    r"(?P<tz>[Zz]|[+-]\d{2}'?\d{2}'?)?",
)


@contextmanager
def open_pdf(data: bytes, *, stage: str) -> Iterator[Any]:
    """Open PDF bytes with PyMuPDF, mapping failures to `ParsingError`.

    Args:
        data (bytes): Raw document bytes.
        stage (str): Pipeline stage reported on failure.

    Raises:
        ParsingError: If the bytes are not a readable PDF.

    Yields:
        pymupdf.Document: Open document, closed on exit.
    """
    try:
        doc = pymupdf.open(stream=data, filetype="pdf")
    except Exception as exc:
        raise ParsingError(stage=stage, message=f"Input is not a readable PDF: {exc}") from exc
    try:
        yield doc
    finally:
        doc.close()


class TextExtractor:
    """Extract text and simple entities from PDF documents."""

    def extract_text(self, data: bytes) -> str:
        """Return the text of every page, pages separated by form feeds.

        Args:
            data (bytes): Raw PDF bytes.

        Returns:
            str: Full document text.
        """
        return PAGE_SEPARATOR.join(self.extract_text_by_page(data))

    def extract_text_by_page(self, data: bytes) -> list[str]:
        """Return the text of each page.

        Args:
            data (bytes): Raw PDF bytes.

        Raises:
            ParsingError: If text cannot be read from the document.

        Returns:
            list[str]: One text segment per page.
        """
        with open_pdf(data, stage="text_extraction") as doc:
            try:
                segments = [page.get_text("text") for page in doc]
            except Exception as exc:
                raise ParsingError(stage="text_extraction", message=f"Failed to extract text: {exc}") from exc
        logger.debug("Text extracted", extra={"pages": len(segments)})
        return segments

    def page_sizes(self, data: bytes) -> list[tuple[float, float]]:
        """Return (width, height) of each page in PDF points.

        Args:
            data (bytes): Raw PDF bytes.

        Returns:
            list[tuple[float, float]]: Page sizes in page order.
        """
        with open_pdf(data, stage="layout_analysis") as doc:
            return [(float(page.rect.width), float(page.rect.height)) for page in doc]

    def extract_metadata(self, data: bytes) -> DocumentMetadata:
        """Read the document information dictionary.

        Falls back to the page count alone when the information dictionary
        cannot be interpreted.

        Args:
            data (bytes): Raw PDF bytes.

        Returns:
            DocumentMetadata: Document metadata.
        """
        with open_pdf(data, stage="metadata") as doc:
            page_count = doc.page_count
            info = doc.metadata or {}

        try:
            return DocumentMetadata(
                page_count=page_count,
                title=info.get("title") or None,
                author=info.get("author") or None,
                creator=info.get("creator") or None,
                producer=info.get("producer") or None,
                creation_date=parse_pdf_date(info.get("creationDate")),
            )
        except ValueError:
            logger.warning("Failed to read document metadata, using page count only")
            return DocumentMetadata(page_count=page_count)

    def extract_entities(self, text: str) -> ExtractedEntities:
        """Find emails, phone numbers, dates and street addresses in text.

        Matches keep their order of first occurrence and duplicates are kept.

        Args:
            text (str): Free text.

        Returns:
            ExtractedEntities: Matches per entity kind, empty lists when none.
        """
        return ExtractedEntities(
            emails=_EMAIL_RE.findall(text),
            phones=_PHONE_RE.findall(text),
            dates=_DATE_RE.findall(text),
            addresses=[match.group(0) for match in _ADDRESS_RE.finditer(text)],
        )


def parse_pdf_date(raw: str | None) -> datetime | None:
    """Parse a PDF date string such as ``D:20240131120000+01'00'``.

    Args:
        raw (str | None): Raw date from the information dictionary.

    Returns:
        datetime | None: Parsed date, or None when absent or malformed.
    """
    if not raw:
        return None
    match = _PDF_DATE_RE.match(raw.strip())
    if match is None:
        return None

    parts = match.groupdict()
    tz_raw = parts["tz"]
    tzinfo: timezone = UTC
    if tz_raw and tz_raw not in {"Z", "z"}:
        digits = tz_raw[1:].replace("'", "")
        offset = timedelta(hours=int(digits[:2]), minutes=int(digits[2:4] or 0))
        tzinfo = timezone(offset if tz_raw[0] == "+" else -offset)

    try:
        return datetime(
            int(parts["year"]),
            int(parts["month"] or 1),
            int(parts["day"] or 1),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
            tzinfo=tzinfo,
        )
    except ValueError:
        return None
