"""Identifier and field-name similarity scoring against one template."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from formsense.typing.models import Field, FormIdentifier, TemplateField

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_name(name: str) -> str:
    """Lower-case a name and drop every non-alphanumeric character."""
    return _NON_ALNUM.sub("", name.lower())


def similar_field_names(name1: str, name2: str) -> bool:
    """Return whether normalized names are equal or one contains the other."""
    n1 = normalize_name(name1)
    n2 = normalize_name(name2)
    return n1 == n2 or n1 in n2 or n2 in n1


class PatternMatcher:
    """Score text and detected fields against template definitions."""

    @staticmethod
    def identifier_found(identifier: FormIdentifier, text: str) -> bool:
        """Return whether an identifier occurs in the text.

        The regex pattern is searched case-insensitively when present,
        otherwise the literal value is looked up as a case-insensitive substring.
        """
        if identifier.pattern:
            return re.search(identifier.pattern, text, re.IGNORECASE) is not None
        return identifier.value.lower() in text.lower()

    def partition_identifiers(
        self,
        identifiers: Sequence[FormIdentifier],
        text: str,
    ) -> tuple[list[str], list[str]]:
        """Split identifier values into found and missing.

        Args:
            identifiers (Sequence[FormIdentifier]): Template identifiers.
            text (str): Document text.

        Returns:
            tuple[list[str], list[str]]: Matched and unmatched identifier values.
        """
        matched: list[str] = []
        unmatched: list[str] = []
        for identifier in identifiers:
            (matched if self.identifier_found(identifier, text) else unmatched).append(identifier.value)
        return matched, unmatched

    def match_identifiers(self, identifiers: Sequence[FormIdentifier], text: str) -> float:
        """Return the share of identifiers found in the text.

        Args:
            identifiers (Sequence[FormIdentifier]): Template identifiers.
            text (str): Document text.

        Returns:
            float: Matched count over identifier count, 0 when there are none.
        """
        if not identifiers:
            return 0.0
        matched, _ = self.partition_identifiers(identifiers, text)
        return len(matched) / len(identifiers)

    def match_fields(self, template_fields: Sequence[TemplateField], detected_fields: Sequence[Field]) -> float:
        """Return the share of template fields found among detected fields.

        A template field is found when a detected field name is similar to
        its name or to one of its aliases.

        Args:
            template_fields (Sequence[TemplateField]): Template field definitions.
            detected_fields (Sequence[Field]): Fields detected in the document.

        Returns:
            float: Matched count over template field count, 0 when either list is empty.
        """
        if not template_fields or not detected_fields:
            return 0.0

        matched = 0
        for template_field in template_fields:
            candidates = (template_field.name, *template_field.aliases)
            if any(
                similar_field_names(candidate, detected.name)
                for detected in detected_fields
                for candidate in candidates
            ):
                matched += 1
        return matched / len(template_fields)
