"""Form field models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field as PydanticField

from formsense.typing.enums import DetectionMethod, FieldType

FieldValueType = str | bool | int | float | None


class BoundingBox(BaseModel):
    """Position of a field on a page, in PDF points."""

    model_config = ConfigDict(extra="forbid")

    page: int
    x: float
    y: float
    width: float
    height: float


class ValidationConstraint(BaseModel):
    """Optional value constraints attached to a field."""

    model_config = ConfigDict(extra="forbid")

    pattern: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    min: float | None = None
    max: float | None = None
    custom_rule: str | None = None


class Field(BaseModel):
    """Single fillable element of a form."""

    model_config = ConfigDict(extra="forbid")

    id: str
    name: str
    type: FieldType = FieldType.TEXT
    label: str | None = None
    bounding_box: BoundingBox
    required: bool | None = None
    default_value: str | None = None
    options: list[str] | None = None
    validation: ValidationConstraint | None = None
    confidence: float | None = PydanticField(default=None, ge=0.0, le=1.0)


class DetectedField(Field):
    """Field produced by a detection heuristic, with its evidence."""

    detection_method: DetectionMethod = DetectionMethod.LAYOUT
    nearby_text: list[str] = PydanticField(default_factory=list)


class FilledField(Field):
    """Field carrying a value ready for validation."""

    value: FieldValueType = None
    source_document: str | None = None
    ai_confidence: float | None = PydanticField(default=None, ge=0.0, le=1.0)
    manually_edited: bool | None = None
    validation_errors: list[str] | None = None
