from __future__ import annotations

import pytest

from formsense.templates.pattern_matcher import PatternMatcher, normalize_name, similar_field_names
from formsense.typing.enums import IdentifierType
from formsense.typing.models import BoundingBox, Field, FormIdentifier, TemplateField

_BOX = BoundingBox(page=1, x=0, y=0, width=10, height=10)


def _identifier(value: str, pattern: str | None = None) -> FormIdentifier:
    return FormIdentifier(type=IdentifierType.HEADER_TEXT, value=value, pattern=pattern)


def _field(name: str) -> Field:
    return Field(id=name, name=name, bounding_box=_BOX)


def _template_field(name: str, *aliases: str) -> TemplateField:
    return TemplateField(id=name, name=name, bounding_box=_BOX, aliases=aliases)


def test_normalize_name_drops_punctuation() -> None:
    assert normalize_name("Firm-Name (Legal)") == "firmnamelegal"


@pytest.mark.parametrize(
    ("left", "right", "expected"),
    [
        ("firm_name", "Firm Name", True),
        ("phone", "telephone_number", True),
        ("email", "fax", False),
    ],
)
def test_similar_field_names(left: str, right: str, expected: bool) -> None:
    assert similar_field_names(left, right) is expected


def test_match_identifiers_is_one_when_all_found() -> None:
    identifiers = [_identifier("SF-330"), _identifier("Standard Form")]

    assert PatternMatcher().match_identifiers(identifiers, "sf-330 STANDARD FORM") == 1.0


def test_match_identifiers_is_zero_when_none_found() -> None:
    assert PatternMatcher().match_identifiers([_identifier("SF-330")], "unrelated text") == 0.0


def test_match_identifiers_scales_with_match_count() -> None:
    identifiers = [_identifier("alpha"), _identifier("beta"), _identifier("gamma"), _identifier("delta")]

    assert PatternMatcher().match_identifiers(identifiers, "alpha and gamma") == pytest.approx(0.5)


def test_match_identifiers_uses_pattern_over_value() -> None:
    identifier = _identifier("SF-330", pattern=r"\bSF[\s-]?330\b")

    assert PatternMatcher().match_identifiers([identifier], "Form SF 330, rev 2021") == 1.0


def test_match_identifiers_without_identifiers_is_zero() -> None:
    assert PatternMatcher().match_identifiers([], "anything") == 0.0


def test_partition_identifiers() -> None:
    matched, unmatched = PatternMatcher().partition_identifiers(
        [_identifier("alpha"), _identifier("beta")],
        "ALPHA only",
    )

    assert matched == ["alpha"]
    assert unmatched == ["beta"]


def test_match_fields_uses_names_and_aliases() -> None:
    template_fields = [
        _template_field("firm_name", "company_name"),
        _template_field("telephone_number", "phone"),
        _template_field("signature"),
    ]
    detected = [_field("company_name"), _field("phone")]

    assert PatternMatcher().match_fields(template_fields, detected) == pytest.approx(2 / 3)


def test_match_fields_with_empty_inputs_is_zero() -> None:
    assert PatternMatcher().match_fields([], [_field("a")]) == 0.0
    assert PatternMatcher().match_fields([_template_field("a")], []) == 0.0
