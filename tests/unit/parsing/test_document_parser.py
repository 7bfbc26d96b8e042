from __future__ import annotations

import pymupdf
import pytest

from formsense.exceptions import ParsingError
from formsense.parsing.document_parser import DocumentParser
from formsense.parsing.ocr import OCRHandler
from formsense.settings import Settings
from formsense.typing.enums import FieldType


def _fillable_pdf() -> bytes:
    doc = pymupdf.open()
    page = doc.new_page(width=612, height=792)
    page.insert_text((72, 40), "Application")
    for name, field_type, rect in (
        ("company_name", pymupdf.PDF_WIDGET_TYPE_TEXT, pymupdf.Rect(50, 60, 250, 80)),
        ("agree", pymupdf.PDF_WIDGET_TYPE_CHECKBOX, pymupdf.Rect(50, 100, 65, 115)),
    ):
        widget = pymupdf.Widget()
        widget.field_name = name
        widget.field_type = field_type
        widget.rect = rect
        page.add_widget(widget)
    data = doc.tobytes()
    doc.close()
    return data


def _image_only_pdf() -> bytes:
    doc = pymupdf.open()
    page = doc.new_page(width=612, height=792)
    pixmap = pymupdf.Pixmap(pymupdf.csRGB, pymupdf.IRect(0, 0, 16, 16), False)
    pixmap.clear_with(200)
    page.insert_image(pymupdf.Rect(50, 50, 250, 250), pixmap=pixmap)
    data = doc.tobytes()
    doc.close()
    return data


def test_parse_detects_fields_per_page(pdf_factory) -> None:
    data = pdf_factory(["Name: ___________\nEmail: ___________", "Comments: _______"])

    result = DocumentParser().parse(data)

    assert len(result.pages) == 2
    assert result.metadata.page_count == 2
    assert "\f" in result.raw_text
    assert {field.bounding_box.page for field in result.fields} == {1, 2}
    assert [field.bounding_box.page for field in result.fields] == sorted(
        field.bounding_box.page for field in result.fields
    )


def test_parse_rejects_empty_input() -> None:
    with pytest.raises(ParsingError) as exc_info:
        DocumentParser().parse(b"")

    assert exc_info.value.stage == "input"


def test_parse_rejects_oversized_input(pdf_factory) -> None:
    data = pdf_factory(["text"])

    with pytest.raises(ParsingError, match="limit"):
        DocumentParser(max_file_size_bytes=len(data) - 1).parse(data)


def test_parse_rejects_garbage_bytes() -> None:
    with pytest.raises(ParsingError):
        DocumentParser().parse(b"%PDF-garbage")


def test_from_settings_uses_size_limit() -> None:
    parser = DocumentParser.from_settings(Settings(MAX_FILE_SIZE_MB=0.000001))

    with pytest.raises(ParsingError, match="limit"):
        parser.parse(b"x" * 10)


def test_extract_fillable_fields_uses_widget_geometry() -> None:
    fields = DocumentParser().extract_fillable_fields(_fillable_pdf())

    by_name = {field.name: field for field in fields}
    assert set(by_name) == {"company_name", "agree"}
    assert by_name["company_name"].type == FieldType.TEXT
    assert by_name["agree"].type == FieldType.CHECKBOX
    box = by_name["company_name"].bounding_box
    assert (box.page, box.x, box.y, box.width, box.height) == (1, 50, 60, 200, 20)
    assert by_name["company_name"].confidence == 1.0


def test_check_if_fillable(pdf_factory) -> None:
    parser = DocumentParser()

    assert parser.check_if_fillable(_fillable_pdf()) is True
    assert parser.check_if_fillable(pdf_factory(["plain"])) is False
    assert parser.check_if_fillable(b"not a pdf") is False


def test_image_only_document_is_flagged_as_scanned() -> None:
    data = _image_only_pdf()

    assert OCRHandler().is_scanned_document(data) is True
    result = DocumentParser().parse(data)
    assert result.metadata.is_scanned is True
    assert result.fields == []


def test_perform_ocr_is_a_stub() -> None:
    assert OCRHandler().perform_ocr(b"\x89PNG") == ""
