"""Filled field validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from formsense.logging import get_logger
from formsense.typing.enums import ErrorType, FieldType, Severity
from formsense.typing.models import ValidationIssue
from formsense.validation.rules import is_valid_date, is_valid_email, is_valid_phone

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from formsense.typing.models import FilledField

logger = get_logger(__name__)

_FORMAT_CHECKS: dict[FieldType, tuple[Callable[[str], bool], str]] = {
    FieldType.EMAIL: (is_valid_email, "Invalid email format"),
    FieldType.PHONE: (is_valid_phone, "Invalid phone format"),
    FieldType.DATE: (is_valid_date, "Invalid date format"),
}


class Validator:
    """Check filled fields for requiredness and value format."""

    def validate(self, fields: Sequence[FilledField]) -> list[ValidationIssue]:
        """Validate filled fields.

        Each field yields at most one issue: a missing required value is
        reported without checking its format.

        Args:
            fields (Sequence[FilledField]): Fields with their values.

        Returns:
            list[ValidationIssue]: Issues in field order.
        """
        issues: list[ValidationIssue] = []
        for field in fields:
            issue = self.validate_field(field)
            if issue is not None:
                issues.append(issue)
        logger.info("Fields validated", extra={"fields": len(fields), "issues": len(issues)})
        return issues

    def validate_field(self, field: FilledField) -> ValidationIssue | None:
        """Validate one filled field.

        Args:
            field (FilledField): Field to check.

        Returns:
            ValidationIssue | None: First failing check, or None.
        """
        if field.required and not field.value:
            return _issue(field, ErrorType.REQUIRED, "This field is required")
        if not field.value:
            return None

        check = _FORMAT_CHECKS.get(field.type)
        if check is None:
            return None
        is_valid, message = check
        if is_valid(str(field.value)):
            return None
        return _issue(field, ErrorType.FORMAT, message)


def _issue(field: FilledField, error_type: ErrorType, message: str) -> ValidationIssue:
    return ValidationIssue(
        field_id=field.id,
        field_name=field.name,
        error_type=error_type,
        message=message,
        severity=Severity.ERROR,
    )
