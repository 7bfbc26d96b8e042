from __future__ import annotations

import pytest

from formsense.templates.matcher import TemplateMatcher
from formsense.templates.registry import TemplateRegistry
from formsense.typing.enums import IdentifierType
from formsense.typing.models import BoundingBox, Field, FormIdentifier, FormTemplate, TemplateField

_BOX = BoundingBox(page=1, x=0, y=0, width=10, height=10)


def _template(template_id: str, identifier: str, field_names: list[str]) -> FormTemplate:
    return FormTemplate(
        id=template_id,
        name=template_id,
        form_identifiers=(FormIdentifier(type=IdentifierType.FORM_NUMBER, value=identifier, required=True),),
        field_definitions=tuple(
            TemplateField(id=f"{template_id}_{name}", name=name, bounding_box=_BOX) for name in field_names
        ),
    )


def _fields(*names: str) -> list[Field]:
    return [Field(id=name, name=name, bounding_box=_BOX) for name in names]


def test_identifier_and_two_of_three_fields_match() -> None:
    registry = TemplateRegistry([_template("sf-330", "SF-330", ["firm_name", "email_address", "signature"])])

    result = TemplateMatcher(registry).find_matching_template(
        "SF-330 STANDARD FORM",
        _fields("firm_name", "email"),
    )

    assert result is not None
    assert result.template_id == "sf-330"
    assert result.identifier_score == 1.0
    assert result.field_match_score == pytest.approx(2 / 3)
    assert result.confidence == pytest.approx(0.7 + 0.3 * 2 / 3)
    assert result.matched_identifiers == ["SF-330"]


def test_no_match_below_threshold() -> None:
    registry = TemplateRegistry([_template("sf-330", "SF-330", ["firm_name", "email_address", "signature"])])

    result = TemplateMatcher(registry).find_matching_template("SF-330", _fields("unrelated"))

    assert result is None


def test_threshold_is_configurable() -> None:
    registry = TemplateRegistry([_template("sf-330", "SF-330", ["firm_name"])])

    result = TemplateMatcher(registry, threshold=0.7).find_matching_template("SF-330", [])

    assert result is not None
    assert result.confidence == pytest.approx(0.7)


def test_ties_keep_earliest_registered_template() -> None:
    registry = TemplateRegistry(
        [
            _template("first", "FORM-1", ["name"]),
            _template("second", "FORM-1", ["name"]),
        ],
    )

    result = TemplateMatcher(registry).find_matching_template("FORM-1", _fields("name"))

    assert result is not None
    assert result.template_id == "first"


def test_best_template_wins() -> None:
    registry = TemplateRegistry(
        [
            _template("weak", "FORM-1", ["name", "other", "more"]),
            _template("strong", "FORM-1", ["name"]),
        ],
    )

    result = TemplateMatcher(registry).find_matching_template("FORM-1", _fields("name"))

    assert result is not None
    assert result.template_id == "strong"
    assert result.confidence == pytest.approx(1.0)


def test_empty_registry_never_matches() -> None:
    assert TemplateMatcher(TemplateRegistry()).find_matching_template("anything", _fields("a")) is None


def test_builtin_catalog_recognizes_sf330_text() -> None:
    matcher = TemplateMatcher(TemplateRegistry.with_builtin_catalog())
    text = "SF 330 Architect-Engineer Qualifications\nSTANDARD FORM 330"

    result = matcher.find_matching_template(text, _fields("firm_name", "email_address", "telephone_number"))

    assert result is not None
    assert result.template_id == "sf-330"


def test_builtin_sf330_wins_tie_with_generic_contact() -> None:
    matcher = TemplateMatcher(TemplateRegistry.with_builtin_catalog())
    text = "Contact Information\nSF-330 Architect-Engineer Qualifications STANDARD FORM 330"
    fields = _fields("name", "email", "phone", "address", "solicitation_number")

    result = matcher.find_matching_template(text, fields)

    assert result is not None
    assert result.template_id == "sf-330"
