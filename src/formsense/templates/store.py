"""File-backed template catalog persistence."""

from __future__ import annotations

import json
import re
from importlib import resources
from pathlib import Path
from typing import cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from formsense import logger
from formsense.exceptions import TemplateStoreError
from formsense.typing.models import FormTemplate

_TEMPLATE_FILE_VERSION = 1
_TEMPLATE_SUFFIX = ".template.json"
_BUILTIN_PACKAGE = "formsense.templates"
_BUILTIN_DIR = "catalog"
_BUILTIN_FILES = ("sf-330.json", "sf-254.json", "generic.json")


class TemplateStore(BaseModel):
    """Directory of template JSON files."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    root: Path = Field(description="Template directory root.")

    def model_post_init(self, __context: object, /) -> None:
        """Ensure the template directory exists after model initialization.

        Args:
            __context (object): Pydantic model context.
        """
        self.root.mkdir(parents=True, exist_ok=True)

    def template_path(self, template_id: str) -> Path:
        """Build the file path of a template.

        Args:
            template_id (str): Template identifier.

        Returns:
            Path: Template file path.
        """
        safe_id = re.sub(r"[^a-z0-9._-]+", "-", template_id.lower()).strip("-")
        if not safe_id:
            safe_id = "template"
        return self.root / f"{safe_id}{_TEMPLATE_SUFFIX}"

    @staticmethod
    def load(path: Path) -> FormTemplate:
        """Load a template file.

        Args:
            path (Path): Template file path.

        Raises:
            TemplateStoreError: If the file is missing, not JSON or not a valid template.

        Returns:
            FormTemplate: Loaded template.
        """
        _validate_template_file_path(path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise TemplateStoreError(message=f"Template file is not valid JSON: {path}") from exc
        return parse_template_payload(payload, source=str(path))

    def save(self, template: FormTemplate) -> Path:
        """Persist a template, replacing any file with the same id.

        Args:
            template (FormTemplate): Template to write.

        Raises:
            TemplateStoreError: If the file cannot be written.

        Returns:
            Path: Written file path.
        """
        path = self.template_path(template.id)
        envelope = {
            "template_file_version": _TEMPLATE_FILE_VERSION,
            "template": template.model_dump(mode="json"),
        }
        try:
            path.write_text(json.dumps(envelope, indent=2, sort_keys=True), encoding="utf-8")
        except OSError as exc:
            raise TemplateStoreError(message=f"Template file cannot be written: {path}") from exc
        logger.info("Template saved", extra={"template_path": str(path)})
        return path

    def list_templates(self) -> list[Path]:
        """List template files.

        Returns:
            list[Path]: Template files sorted by name.
        """
        return sorted(self.root.glob(f"*{_TEMPLATE_SUFFIX}"))

    def load_all(self) -> list[FormTemplate]:
        """Load every template file in the directory."""
        return [self.load(path) for path in self.list_templates()]


def load_builtin_templates() -> list[FormTemplate]:
    """Load the templates shipped with the package.

    Returns:
        list[FormTemplate]: Built-in templates, specific forms before the generic one.
    """
    catalog = resources.files(_BUILTIN_PACKAGE) / _BUILTIN_DIR
    return [
        parse_template_payload(json.loads((catalog / name).read_text(encoding="utf-8")), source=name)
        for name in _BUILTIN_FILES
    ]


def parse_template_payload(payload: object, *, source: str) -> FormTemplate:
    """Validate a raw template payload, enveloped or bare.

    Args:
        payload (object): Decoded JSON payload.
        source (str): Origin used in error messages.

    Raises:
        TemplateStoreError: If the payload is not a valid template.

    Returns:
        FormTemplate: Parsed template.
    """
    if not isinstance(payload, dict):
        raise TemplateStoreError(message=f"Template payload must be a JSON object: {source}")

    payload_obj = cast("dict[str, object]", payload)
    embedded = payload_obj.get("template")
    template_obj = cast("dict[str, object]", embedded) if isinstance(embedded, dict) else payload_obj

    try:
        return FormTemplate.model_validate(template_obj)
    except ValidationError as exc:
        raise TemplateStoreError(message=f"Invalid template in {source}: {exc}") from exc


def _validate_template_file_path(path: Path) -> None:
    """Validate template file path before loading.

    Args:
        path (Path): Template file path.

    Raises:
        TemplateStoreError: If path is not a `pathlib.Path` or not a template JSON file.
    """
    if not isinstance(path, Path):
        raise TemplateStoreError(message=f"Template path must be a pathlib.Path instance, got: {type(path)!r}")
    if not path.is_file():
        raise TemplateStoreError(message=f"Template path is not a file: {path}")
    if not path.name.endswith(_TEMPLATE_SUFFIX):
        raise TemplateStoreError(message=f"Template path must end with '{_TEMPLATE_SUFFIX}': {path}")
