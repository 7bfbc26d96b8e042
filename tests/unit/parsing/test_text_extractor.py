from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from formsense.exceptions import ParsingError
from formsense.parsing.text_extractor import PAGE_SEPARATOR, TextExtractor, parse_pdf_date


def test_extract_text_separates_pages_with_form_feed(pdf_factory) -> None:
    data = pdf_factory(["Company: Acme", "Second page"])

    text = TextExtractor().extract_text(data)
    segments = text.split(PAGE_SEPARATOR)

    assert len(segments) == 2
    assert "Company: Acme" in segments[0]
    assert "Second page" in segments[1]


def test_page_sizes_report_points(pdf_factory) -> None:
    assert TextExtractor().page_sizes(pdf_factory(["a", "b"])) == [(612.0, 792.0), (612.0, 792.0)]


def test_extract_metadata_reads_title_and_page_count(pdf_factory) -> None:
    metadata = TextExtractor().extract_metadata(pdf_factory(["x", "y", "z"], title="Quarterly Report"))

    assert metadata.page_count == 3
    assert metadata.title == "Quarterly Report"
    assert metadata.is_scanned is False


def test_unreadable_bytes_raise_parsing_error() -> None:
    with pytest.raises(ParsingError) as exc_info:
        TextExtractor().extract_text(b"definitely not a pdf")

    assert exc_info.value.stage == "text_extraction"
    assert "[text_extraction]" in str(exc_info.value)


def test_extract_entities_finds_emails_phones_and_dates() -> None:
    text = "Contact jane.doe@example.com or 555-123-4567, backup 555.987.6543. Due 01/15/2024 and 3-4-24."

    entities = TextExtractor().extract_entities(text)

    assert entities.emails == ["jane.doe@example.com"]
    assert entities.phones == ["555-123-4567", "555.987.6543"]
    assert entities.dates == ["01/15/2024", "3-4-24"]


def test_extract_entities_keeps_duplicates_in_order() -> None:
    entities = TextExtractor().extract_entities("a@b.io then c@d.io then a@b.io")

    assert entities.emails == ["a@b.io", "c@d.io", "a@b.io"]


def test_extract_entities_returns_empty_lists_without_matches() -> None:
    entities = TextExtractor().extract_entities("nothing to see here")

    assert entities.emails == []
    assert entities.phones == []
    assert entities.dates == []
    assert entities.addresses == []


def test_parse_pdf_date_handles_offsets() -> None:
    parsed = parse_pdf_date("D:20240131120000+01'00'")

    assert parsed == datetime(2024, 1, 31, 12, 0, 0, tzinfo=timezone(timedelta(hours=1)))


@pytest.mark.parametrize("raw", [None, "", "yesterday", "D:20241399"])
def test_parse_pdf_date_returns_none_for_bad_values(raw: str | None) -> None:
    assert parse_pdf_date(raw) is None
