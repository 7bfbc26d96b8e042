from __future__ import annotations

from formsense.parsing.field_detector import (
    BlankLineHeuristic,
    CheckboxHeuristic,
    FieldDetector,
    LabeledFieldHeuristic,
    TableHeuristic,
)
from formsense.typing.enums import FieldType
from formsense.typing.models import Page


def _page(text: str, number: int = 1) -> Page:
    return Page(number=number, width=612, height=792, text=text)


def test_name_and_email_lines_yield_labeled_and_blank_line_fields() -> None:
    fields = FieldDetector().detect_fields([_page("Name: ___________\nEmail: ___________")])

    blank = [field for field in fields if field.id.startswith("blank_line_")]
    labeled = [field for field in fields if field.id.startswith("labeled_")]

    assert len(fields) == 4
    assert len(blank) == 2
    assert all(field.confidence == 0.7 for field in blank)
    assert [(field.name, field.type) for field in labeled] == [
        ("name", FieldType.TEXT),
        ("email", FieldType.EMAIL),
    ]
    assert all(field.confidence == 0.85 for field in labeled)


def test_blank_line_heuristic_counts_every_underscore_run() -> None:
    text = "a ___ b _____ c\n\n________ and __ not this\n___"

    fields = BlankLineHeuristic().detect(_page(text))

    assert len(fields) == 4
    assert {field.confidence for field in fields} == {0.7}
    assert len({field.id for field in fields}) == 4


def test_colon_heuristic_matches_label_only_lines() -> None:
    fields = BlankLineHeuristic().detect(_page("Project title:\nNot a field: value"))

    assert [field.id for field in fields] == ["colon_field_1_0"]
    assert fields[0].name == "project_title"
    assert fields[0].label == "Project title"
    assert fields[0].confidence == 0.8


def test_checkbox_heuristic_detects_brackets_and_glyphs() -> None:
    fields = CheckboxHeuristic().detect(_page("[ ] Yes\n[] No\n☐ Maybe\n□ Later"))

    assert len(fields) == 4
    assert {field.type for field in fields} == {FieldType.CHECKBOX}
    assert {field.confidence for field in fields} == {0.8}
    assert len({field.id for field in fields}) == 4


def test_checkbox_box_follows_line_of_match() -> None:
    fields = CheckboxHeuristic().detect(_page("intro\nmore\n[ ] Agree"))

    assert fields[0].bounding_box.y == 40.0


def test_labeled_heuristic_is_case_insensitive() -> None:
    fields = LabeledFieldHeuristic().detect(_page("PHONE: 555\nZip: 12345\nunknown: x"))

    assert [(field.name, field.type) for field in fields] == [("phone", FieldType.PHONE), ("zip", FieldType.TEXT)]


def test_table_heuristic_returns_no_fields() -> None:
    assert TableHeuristic().detect(_page("| a | b |\n| 1 | 2 |")) == []


def test_detector_returns_nothing_for_plain_text() -> None:
    assert FieldDetector().detect_fields([_page("Just a paragraph of text.")]) == []


def test_detector_keeps_page_order_with_workers() -> None:
    pages = [_page(f"Line {number} _____", number) for number in (3, 1, 2)]

    fields = FieldDetector(max_workers=3).detect_fields(pages)

    assert [field.bounding_box.page for field in fields] == [1, 2, 3]


def test_detector_runs_heuristics_in_given_order() -> None:
    class _Fixed:
        def __init__(self, label: str) -> None:
            self.label = label

        def detect(self, page: Page):
            return BlankLineHeuristic().detect(_page(f"{self.label} ___", page.number))

    fields = FieldDetector([_Fixed("second"), _Fixed("first")]).detect_fields([_page("")])

    assert [field.name for field in fields] == ["second", "first"]
