"""Build custom templates from detected fields."""

from __future__ import annotations

from typing import TYPE_CHECKING

from formsense.typing.enums import IdentifierType, TemplateCategory
from formsense.typing.models import (
    FieldMappingHints,
    FormIdentifier,
    FormTemplate,
    LayoutMetadata,
    TemplateField,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from formsense.typing.models import Field


def to_template_field(field: Field) -> TemplateField:
    """Copy a field into a template field without aliases or hints."""
    payload = field.model_dump(include=set(TemplateField.model_fields) - {"aliases", "mapping"})
    return TemplateField.model_validate({**payload, "mapping": FieldMappingHints()})


def generate_template(
    form_id: str,
    fields: Sequence[Field],
    layout_metadata: LayoutMetadata | None = None,
    *,
    title: str | None = None,
) -> FormTemplate:
    """Create a custom template describing one processed form.

    Args:
        form_id (str): Identifier of the new template.
        fields (Sequence[Field]): Fields the template should expect.
        layout_metadata (LayoutMetadata | None): Page layout of the source form.
        title (str | None): Document title, used as a title identifier when known.

    Returns:
        FormTemplate: Custom template.
    """
    identifiers = (FormIdentifier(type=IdentifierType.TITLE, value=title, required=False),) if title else ()
    return FormTemplate(
        id=form_id,
        name=f"Custom Template - {form_id}",
        version="1.0",
        category=TemplateCategory.CUSTOM,
        form_identifiers=identifiers,
        field_definitions=tuple(to_template_field(field) for field in fields),
        layout_metadata=layout_metadata or LayoutMetadata(),
    )
