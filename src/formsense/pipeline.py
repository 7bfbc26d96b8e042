"""Form processing facade: detection, extraction, mapping and validation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from formsense import logger
from formsense.exceptions import ServiceError
from formsense.extraction.data_extractor import DataExtractor
from formsense.mapping.field_mapper import FieldMapper
from formsense.mapping.review import partition_mappings
from formsense.mapping.rules_mapper import RulesMapper
from formsense.parsing.document_parser import DocumentParser
from formsense.templates.matcher import TemplateMatcher
from formsense.templates.registry import TemplateRegistry
from formsense.templates.schema_generator import generate_template
from formsense.typing.models import (
    DetectionResult,
    LayoutMetadata,
    MappingResult,
    TemplateMatchSummary,
    ValidationReport,
)
from formsense.validation.validator import Validator

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from pathlib import Path

    from pydantic import BaseModel

    from formsense.settings import Settings
    from formsense.typing.models import CandidateData, Field, FieldMapping, FilledField, FormTemplate, LibraryDocument
    from formsense.typing.protocol import DocumentLibrary, ReasoningClient


class FormPipeline:
    """Run the form processing operations with shared components.

    The template registry is the only state shared between calls, so one
    pipeline may serve concurrent requests.
    """

    def __init__(
        self,
        *,
        parser: DocumentParser,
        registry: TemplateRegistry,
        matcher: TemplateMatcher,
        rules_mapper: RulesMapper,
        validator: Validator,
        data_extractor: DataExtractor,
        field_mapper: FieldMapper | None = None,
        review_threshold: float = 0.7,
        rules_fallback_enabled: bool = True,
    ) -> None:
        """Initialize pipeline.

        Args:
            parser (DocumentParser): Document parsing component.
            registry (TemplateRegistry): Template catalog.
            matcher (TemplateMatcher): Template matching component.
            rules_mapper (RulesMapper): Deterministic mapper.
            validator (Validator): Filled field validator.
            data_extractor (DataExtractor): Candidate data extractor.
            field_mapper (FieldMapper | None): AI mapper, rules only when None.
            review_threshold (float): Confidence needed to auto-fill a value.
            rules_fallback_enabled (bool): Use rules when the AI mapper fails.
        """
        self.parser = parser
        self.registry = registry
        self.matcher = matcher
        self.rules_mapper = rules_mapper
        self.validator = validator
        self.data_extractor = data_extractor
        self.field_mapper = field_mapper
        self._review_threshold = review_threshold
        self._rules_fallback_enabled = rules_fallback_enabled

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        reasoning_client: ReasoningClient | None = None,
        library: DocumentLibrary | None = None,
        registry: TemplateRegistry | None = None,
    ) -> FormPipeline:
        """Build a pipeline from runtime settings.

        The AI mapper is enabled when a reasoning client is given or when the
        OpenAI endpoint and key are configured.

        Args:
            settings (Settings): Runtime settings.
            reasoning_client (ReasoningClient | None): Reasoning service override.
            library (DocumentLibrary | None): Document library for extraction by id.
            registry (TemplateRegistry | None): Shared template catalog.

        Returns:
            FormPipeline: Configured pipeline.
        """
        parser = DocumentParser.from_settings(settings)
        if registry is None:
            registry = TemplateRegistry.from_settings(settings)

        field_mapper: FieldMapper | None = None
        if reasoning_client is not None or (settings.openai_base_url and settings.openai_api_key):
            field_mapper = FieldMapper.from_settings(settings, reasoning_client)

        return cls(
            parser=parser,
            registry=registry,
            matcher=TemplateMatcher(registry, threshold=settings.template_confidence_threshold),
            rules_mapper=RulesMapper(review_threshold=settings.manual_review_threshold),
            validator=Validator(),
            data_extractor=DataExtractor(library, text_extractor=parser.text_extractor),
            field_mapper=field_mapper,
            review_threshold=settings.manual_review_threshold,
            rules_fallback_enabled=settings.rules_fallback_enabled,
        )

    def detect_fields(self, data: bytes) -> DetectionResult:
        """Detect fields in a document and match it against known templates.

        Args:
            data (bytes): Raw PDF bytes.

        Raises:
            ParsingError: If the document cannot be parsed.

        Returns:
            DetectionResult: Fields, metadata and the best template match, if any.
        """
        parsed = self.parser.parse(data)
        match = self.matcher.find_matching_template(parsed.raw_text, parsed.fields)
        template_match = (
            TemplateMatchSummary(template_id=match.template_id, confidence=match.confidence) if match else None
        )
        return DetectionResult(fields=parsed.fields, metadata=parsed.metadata, template_match=template_match)

    def extract_data(self, documents: Iterable[LibraryDocument]) -> CandidateData:
        """Build candidate data from caller-supplied documents."""
        return self.data_extractor.extract_from_documents(documents)

    def extract_data_from_library(self, user_id: str, document_ids: list[str]) -> CandidateData:
        """Build candidate data from documents fetched from the library."""
        return self.data_extractor.extract_from_library(user_id, document_ids)

    def map_fields(self, fields: Sequence[Field], candidate_data: Mapping[str, Any]) -> MappingResult:
        """Propose values for fields and split them by review need.

        The AI mapper is used when configured. When it fails, the rules mapper
        takes over if fallback is enabled.

        Args:
            fields (Sequence[Field]): Fields to fill.
            candidate_data (Mapping[str, Any]): Candidate values.

        Raises:
            ServiceError: If the AI mapper fails and fallback is disabled.

        Returns:
            MappingResult: Mappings, auto-filled values and manual work.
        """
        mappings = self._propose(fields, candidate_data)
        return partition_mappings(mappings, threshold=self._review_threshold)

    def validate(self, fields: Sequence[FilledField]) -> ValidationReport:
        """Validate filled fields."""
        return ValidationReport(errors=self.validator.validate(fields))

    def learn_template(self, form_id: str, detection: DetectionResult) -> FormTemplate:
        """Register a custom template built from a detection result.

        Args:
            form_id (str): Identifier of the new template.
            detection (DetectionResult): Detection output of the source form.

        Returns:
            FormTemplate: Registered template.
        """
        layout = LayoutMetadata(page_count=max(detection.metadata.page_count, 1))
        template = generate_template(form_id, detection.fields, layout, title=detection.metadata.title)
        self.registry.add_template(template)
        return template

    def _propose(self, fields: Sequence[Field], candidate_data: Mapping[str, Any]) -> list[FieldMapping]:
        if self.field_mapper is None:
            return self.rules_mapper.map_by_rules(fields, candidate_data)
        try:
            return self.field_mapper.map_fields(fields, candidate_data)
        except ServiceError as exc:
            if not self._rules_fallback_enabled:
                raise
            logger.warning("Reasoning service failed, using rules mapping", extra={"error": str(exc)})
            return self.rules_mapper.map_by_rules(fields, candidate_data)


def persist_result(result: BaseModel, path: Path) -> None:
    """Persist an operation result as JSON.

    Args:
        result (BaseModel): Result payload.
        path (Path): Output path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(result.model_dump_json(indent=2), encoding="utf-8")
