"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class FieldType(_EnumMixin):
    """Supported form field types."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    EMAIL = "email"
    PHONE = "phone"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DROPDOWN = "dropdown"
    TEXTAREA = "textarea"
    SIGNATURE = "signature"


class DetectionMethod(_EnumMixin):
    """How a field was found."""

    LAYOUT = "layout"
    TEMPLATE = "template"
    ML = "ml"
    MANUAL = "manual"


class ErrorType(_EnumMixin):
    """Validation issue category."""

    REQUIRED = "required"
    FORMAT = "format"
    RANGE = "range"
    CUSTOM = "custom"
    OVERFLOW = "overflow"


class Severity(_EnumMixin):
    """Validation issue severity."""

    ERROR = "error"
    WARNING = "warning"


class IdentifierType(_EnumMixin):
    """Kind of marker used to recognize a template."""

    TITLE = "title"
    FORM_NUMBER = "form_number"
    HEADER_TEXT = "header_text"
    FOOTER_TEXT = "footer_text"
    PATTERN = "pattern"


class TemplateCategory(_EnumMixin):
    """Template catalog category."""

    GOVERNMENT = "government"
    COMMERCIAL = "commercial"
    CUSTOM = "custom"


class TemplateRuleType(_EnumMixin):
    """Scope of a template validation rule."""

    FIELD = "field"
    CROSS_FIELD = "cross_field"
    CONDITIONAL = "conditional"


class FieldGroupType(_EnumMixin):
    """Arrangement of a group of template fields."""

    ROW = "row"
    COLUMN = "column"
    TABLE = "table"
    GROUP = "group"
